"""Aggregate mapping statements and connection parameters into settings.

Pipeline per statement:

    parse_statement  →  build_fields_mapping  →  validate_fields_mapping

The first failing statement aborts the whole aggregation with a single
``ConfigError``. Callers never see a partial mapping list.

Example:
    >>> settings = aggregate_settings(
    ...     "INSERT INTO a SELECT * FROM ta; INSERT INTO b SELECT * FROM tb",
    ...     connection="jdbc:sqlite:test.db",
    ...     log=lambda _: None,
    ... )
    >>> sorted(settings.table_names)
    ['a', 'b']
"""

from __future__ import annotations

from collections.abc import Mapping

from jdbc_sink.core import sink_config
from jdbc_sink.core.field_mapping import FieldsMapping
from jdbc_sink.core.mapping_builder import build_fields_mapping
from jdbc_sink.core.settings import (
    ConfigError,
    JdbcSinkSettings,
    parse_error_policy,
)
from jdbc_sink.helpers.helpers_logging import LogFn, print_info, print_warning
from jdbc_sink.validators.mapping_validator import validate_fields_mapping
from jdbc_sink.validators.statement_parser import (
    STATEMENT_SEPARATOR,
    StatementSyntaxError,
    parse_statement,
)


def split_statements(text: str) -> list[str]:
    """Split mapping text on ``;`` preserving statement order.

    Trailing segments that are exactly empty (a trailing ``;``) are dropped.
    Every other segment is kept as-is, including empty or whitespace-only
    ones between separators, so the parser can report them.

    Examples:
        >>> split_statements("INSERT INTO a SELECT * FROM b;")
        ['INSERT INTO a SELECT * FROM b']

        >>> split_statements("x;;y")
        ['x', '', 'y']
    """
    segments = text.split(STATEMENT_SEPARATOR)
    while segments and segments[-1] == "":
        segments.pop()
    return segments


def _statement_error(statement: str, reason: str) -> ConfigError:
    return ConfigError(
        f"{sink_config.EXPORT_MAPPINGS} is not set correctly.\n"
        + f"  Statement: {statement.strip() or repr(statement)}\n"
        + f"  Reason: {reason}"
    )


def _build_mappings(text: str, log: LogFn) -> tuple[FieldsMapping, ...]:
    statements = split_statements(text)
    if not statements:
        raise ConfigError(
            f"{sink_config.EXPORT_MAPPINGS} contains no mapping statements"
        )

    mappings: list[FieldsMapping] = []
    for statement in statements:
        parsed = parse_statement(statement)
        if isinstance(parsed, StatementSyntaxError):
            raise _statement_error(statement, parsed.reason)

        mapping = build_fields_mapping(parsed, log=log)
        error = validate_fields_mapping(mapping)
        if error is not None:
            raise _statement_error(statement, error)

        mappings.append(mapping)

    return tuple(mappings)


def aggregate_settings(
    export_mappings: str | None,
    connection: str | None,
    user: str | None = None,
    password: str | None = None,
    error_policy: str = sink_config.ERROR_POLICY_DEFAULT,
    max_retries: int = sink_config.MAX_RETRIES_DEFAULT,
    batch_size: int = sink_config.BATCH_SIZE_DEFAULT,
    retry_delay: int = sink_config.RETRY_INTERVAL_DEFAULT,
    log: LogFn = print_info,
) -> JdbcSinkSettings:
    """Build validated sink settings from raw configuration values.

    Args:
        export_mappings: ``;``-separated mapping statements.
        connection: Database connection URI.
        user: Database user.
        password: Database password.
        error_policy: ``noop``, ``throw`` or ``retry`` (any case).
        max_retries: Retry budget. Not range checked.
        batch_size: Records per batch, must be > 0.
        retry_delay: Milliseconds between retries, must be > 0.
        log: Receives one message per built mapping.

    Returns:
        Frozen JdbcSinkSettings.

    Raises:
        ConfigError: On a missing value, a bad statement, an unknown error
            policy or a non-positive batch size / retry delay.
    """
    if not export_mappings:
        raise ConfigError(f"{sink_config.EXPORT_MAPPINGS} is not set!")

    mappings = _build_mappings(export_mappings, log)
    policy = parse_error_policy(error_policy)

    if not connection:
        raise ConfigError(f"{sink_config.DATABASE_CONNECTION_URI} is not set!")
    if batch_size <= 0:
        raise ConfigError(
            f"Invalid {sink_config.BATCH_SIZE} value {batch_size}. "
            + "Needs to be greater than zero"
        )
    if retry_delay <= 0:
        raise ConfigError(
            f"Invalid {sink_config.RETRY_INTERVAL} value {retry_delay}. "
            + "Needs to be greater than zero"
        )

    return JdbcSinkSettings(
        connection=connection,
        user=user,
        password=password,
        mappings=mappings,
        error_policy=policy,
        max_retries=max_retries,
        batch_size=batch_size,
        retry_delay=retry_delay,
    )


# ---------------------------------------------------------------------------
# Host config map
# ---------------------------------------------------------------------------


def _int_value(config: Mapping[str, object], key: str) -> int:
    raw = config.get(key, sink_config.DEFAULTS[key])
    if isinstance(raw, bool):
        raise ConfigError(f"{key} must be an integer, got {raw!r}")
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError as e:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from e


def _str_value(config: Mapping[str, object], key: str) -> str | None:
    raw = config.get(key, sink_config.DEFAULTS.get(key))
    return None if raw is None else str(raw)


def settings_from_config(
    config: Mapping[str, object],
    log: LogFn = print_info,
) -> JdbcSinkSettings:
    """Build sink settings from a host configuration map.

    Missing optional keys take the defaults from ``sink_config``. Keys the
    sink does not know are reported as warnings and otherwise ignored.

    Args:
        config: Key → value map (values may be strings or ints).
        log: Receives one message per built mapping.

    Returns:
        Frozen JdbcSinkSettings.

    Raises:
        ConfigError: If any value is missing or invalid.
    """
    for key in sink_config.unknown_keys(dict(config)):
        print_warning(f"Ignoring unknown sink config key '{key}'")

    return aggregate_settings(
        export_mappings=_str_value(config, sink_config.EXPORT_MAPPINGS),
        connection=_str_value(config, sink_config.DATABASE_CONNECTION_URI),
        user=_str_value(config, sink_config.DATABASE_CONNECTION_USER),
        password=_str_value(config, sink_config.DATABASE_CONNECTION_PASSWORD),
        error_policy=_str_value(config, sink_config.ERROR_POLICY) or "",
        max_retries=_int_value(config, sink_config.MAX_RETRIES),
        batch_size=_int_value(config, sink_config.BATCH_SIZE),
        retry_delay=_int_value(config, sink_config.RETRY_INTERVAL),
        log=log,
    )
