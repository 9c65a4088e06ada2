"""
JDBC Sink Settings

Turns ``;``-separated export mapping statements plus connection and retry
parameters into validated, immutable settings for a JDBC sink.
"""

__version__ = "0.1.0"

from jdbc_sink.core.settings import ConfigError, JdbcSinkSettings
from jdbc_sink.core.settings_aggregator import aggregate_settings, settings_from_config

__all__ = [
    "ConfigError",
    "JdbcSinkSettings",
    "aggregate_settings",
    "settings_from_config",
]
