"""Host configuration keys for the JDBC sink.

The sink is configured through a flat key/value map, usually kept in a YAML
file:

    connect.jdbc.connection.uri: jdbc:postgresql://db:5432/shop
    connect.jdbc.connection.user: sink
    connect.jdbc.connection.password: secret
    connect.jdbc.sink.export.mappings: >-
      INSERT INTO orders SELECT * FROM orders_topic PK id;
      UPSERT INTO customers SELECT id, name FROM customers_topic PK id
    connect.jdbc.sink.error.policy: retry
    connect.jdbc.sink.max.retries: 5
"""

from __future__ import annotations

from pathlib import Path

from ruamel.yaml.error import YAMLError

from jdbc_sink.helpers.yaml_loader import ConfigDict, load_yaml_file

# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------

DATABASE_CONNECTION_URI = "connect.jdbc.connection.uri"
DATABASE_CONNECTION_USER = "connect.jdbc.connection.user"
DATABASE_CONNECTION_PASSWORD = "connect.jdbc.connection.password"
EXPORT_MAPPINGS = "connect.jdbc.sink.export.mappings"
ERROR_POLICY = "connect.jdbc.sink.error.policy"
MAX_RETRIES = "connect.jdbc.sink.max.retries"
BATCH_SIZE = "connect.jdbc.sink.batch.size"
RETRY_INTERVAL = "connect.jdbc.sink.retry.interval"

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

ERROR_POLICY_DEFAULT = "throw"
MAX_RETRIES_DEFAULT = 10
BATCH_SIZE_DEFAULT = 3000
RETRY_INTERVAL_DEFAULT = 60000

DEFAULTS: dict[str, object] = {
    DATABASE_CONNECTION_USER: None,
    DATABASE_CONNECTION_PASSWORD: None,
    ERROR_POLICY: ERROR_POLICY_DEFAULT,
    MAX_RETRIES: MAX_RETRIES_DEFAULT,
    BATCH_SIZE: BATCH_SIZE_DEFAULT,
    RETRY_INTERVAL: RETRY_INTERVAL_DEFAULT,
}

ALL_KEYS = (
    DATABASE_CONNECTION_URI,
    DATABASE_CONNECTION_USER,
    DATABASE_CONNECTION_PASSWORD,
    EXPORT_MAPPINGS,
    ERROR_POLICY,
    MAX_RETRIES,
    BATCH_SIZE,
    RETRY_INTERVAL,
)


def unknown_keys(config: dict[str, object]) -> list[str]:
    """List config keys this sink does not read (sorted)."""
    return sorted(str(key) for key in config if key not in ALL_KEYS)


def load_sink_config(path: Path) -> ConfigDict:
    """Load a sink configuration map from a YAML file.

    Args:
        path: YAML file with the configuration keys at top level.

    Returns:
        The configuration map.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid YAML or the top level is not
            a mapping.
    """
    try:
        data = load_yaml_file(path)
    except YAMLError as e:
        raise ValueError(f"Sink config {path} is not valid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(
            f"Sink config {path} must contain a mapping at top level, "
            + f"got {type(data).__name__}"
        )
    return data
