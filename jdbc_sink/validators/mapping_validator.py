"""Rule checks for built field mappings."""

from __future__ import annotations

from jdbc_sink.core.field_mapping import (
    FieldsMapping,
    WriteMode,
)

UPSERT_AUTOCREATE_MESSAGE = (
    "In order to use UPSERT mode and table AUTO-CREATE you need to define "
    "Primary Keys in your export mappings (PK clause)."
)


def validate_fields_mapping(mapping: FieldsMapping) -> str | None:
    """Check a built mapping against the write-mode/key rules.

    UPSERT needs a key the operator chose. When AUTOCREATE filled in the
    reserved metadata columns as the key, UPSERT is rejected.

    UPSERT without AUTOCREATE and without a PK clause is *not* rejected here;
    such a mapping has no primary key at all.

    Args:
        mapping: Mapping produced by ``build_fields_mapping``.

    Returns:
        Error message if invalid, None if valid.
    """
    if (
        mapping.write_mode is WriteMode.UPSERT
        and mapping.auto_create_table
        and mapping.has_default_primary_key()
    ):
        return (
            UPSERT_AUTOCREATE_MESSAGE
            + f"\n  Table: {mapping.table_name}"
            + f"\n  Source: {mapping.source}"
        )

    return None
