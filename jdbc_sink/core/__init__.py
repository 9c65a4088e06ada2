"""Field mapping model, settings aggregate and aggregation logic."""

from jdbc_sink.core.field_mapping import FieldAlias, FieldsMapping, WriteMode
from jdbc_sink.core.settings import (
    ConfigError,
    ErrorPolicy,
    JdbcSinkSettings,
    SettingsArgumentError,
)

__all__ = [
    "ConfigError",
    "ErrorPolicy",
    "FieldAlias",
    "FieldsMapping",
    "JdbcSinkSettings",
    "SettingsArgumentError",
    "WriteMode",
]
