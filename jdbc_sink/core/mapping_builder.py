"""Build ``FieldsMapping`` values from parsed mapping statements.

Merges the ``PK`` list and the select list into one alias table, injects the
reserved metadata key for auto-created tables without a declared key and
resolves the write mode. Building never fails; rule checks are left to
``jdbc_sink.validators.mapping_validator`` so a complete mapping is always
available for diagnostics.
"""

from __future__ import annotations

from jdbc_sink.core.field_mapping import (
    RESERVED_KEY_COLUMNS,
    FieldAlias,
    FieldsMapping,
    WriteMode,
)
from jdbc_sink.helpers.helpers_logging import LogFn, print_info
from jdbc_sink.validators.statement_parser import ParsedStatement


def _resolve_write_mode(token: str) -> WriteMode:
    if token.upper() == "UPSERT":
        return WriteMode.UPSERT
    return WriteMode.INSERT


def build_fields_mapping(
    parsed: ParsedStatement,
    log: LogFn = print_info,
) -> FieldsMapping:
    """Build the field mapping for one parsed statement.

    Primary keys are added first as ``{pk: FieldAlias(pk, True)}``. Select
    list entries then overwrite them as ``{field: FieldAlias(alias, ...)}``,
    marked as key when the *alias* is one of the declared keys.

    Args:
        parsed: Result of ``parse_statement``.
        log: Receives a description of the built mapping.

    Returns:
        Frozen FieldsMapping.

    Example:
        >>> from jdbc_sink.validators.statement_parser import parse_statement
        >>> fm = build_fields_mapping(
        ...     parse_statement("INSERT INTO t SELECT a AS b FROM s PK b"),
        ...     log=lambda _: None,
        ... )
        >>> fm.mappings["a"]
        FieldAlias(name='b', is_primary_key=True)
    """
    aliases: dict[str, FieldAlias] = {}
    primary_keys = set(parsed.primary_keys)

    for pk in parsed.primary_keys:
        aliases[pk] = FieldAlias(pk, is_primary_key=True)

    for field_name, alias in parsed.field_aliases:
        aliases[field_name] = FieldAlias(alias, is_primary_key=alias in primary_keys)

    # Default key for auto-created tables: topic/partition/offset
    if parsed.auto_create and not primary_keys:
        for column in RESERVED_KEY_COLUMNS:
            aliases[column] = FieldAlias(column, is_primary_key=True)

    mapping = FieldsMapping(
        table_name=parsed.target,
        source=parsed.source,
        include_all_fields=parsed.include_all_fields,
        write_mode=_resolve_write_mode(parsed.write_mode),
        mappings=aliases,
        auto_create_table=parsed.auto_create,
        auto_evolve_table=parsed.auto_evolve,
        capitalize_names=parsed.capitalize,
        ignored_fields=parsed.ignored_fields,
    )

    log(f"Creating field mapping:\n{mapping}")
    return mapping
