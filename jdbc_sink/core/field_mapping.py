"""Field mapping model for JDBC sink export statements.

One ``FieldsMapping`` is produced per mapping statement. It binds a source
stream (topic) to a destination table and records how each source field is
exposed in that table:

    INSERT INTO orders SELECT id, amount AS total FROM orders_topic PK id

    FieldsMapping(
        table_name='orders',
        source='orders_topic',
        mappings={
            'id': FieldAlias(name='id', is_primary_key=True),
            'amount': FieldAlias(name='total', is_primary_key=False),
        },
        ...
    )

Instances are frozen. The alias table is a read-only, hashable
``AliasTable``, so a mapping can be shared between sink worker threads,
used as a dict key or pickled for a process pool as-is.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum

# ---------------------------------------------------------------------------
# Reserved metadata columns
# ---------------------------------------------------------------------------

# Names must match what the table-creation component emits for the
# implicit primary key of auto-created tables.
CONNECT_TOPIC_COLUMN = "__connect_topic"
CONNECT_PARTITION_COLUMN = "__connect_partition"
CONNECT_OFFSET_COLUMN = "__connect_offset"

RESERVED_KEY_COLUMNS = (
    CONNECT_TOPIC_COLUMN,
    CONNECT_PARTITION_COLUMN,
    CONNECT_OFFSET_COLUMN,
)


class WriteMode(Enum):
    """How rows are written to the destination table."""

    INSERT = "insert"
    UPSERT = "upsert"


@dataclass(frozen=True)
class FieldAlias:
    """How one source field appears in the destination table.

    Attributes:
        name: Effective column name in the destination table.
        is_primary_key: Whether the column is part of the primary key.
    """

    name: str
    is_primary_key: bool = False


class AliasTable(Mapping[str, FieldAlias]):
    """Read-only, hashable source field → FieldAlias table.

    Unlike a ``MappingProxyType`` view it can be hashed, copied and pickled,
    so mappings and settings behave like plain values.
    """

    __slots__ = ("_data",)

    def __init__(self, aliases: Mapping[str, FieldAlias] | None = None) -> None:
        object.__setattr__(self, "_data", dict(aliases or {}))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __getitem__(self, key: str) -> FieldAlias:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __hash__(self) -> int:
        return hash(frozenset(self._data.items()))

    def __reduce__(self) -> tuple[type[AliasTable], tuple[dict[str, FieldAlias]]]:
        return (AliasTable, (dict(self._data),))

    def __repr__(self) -> str:
        return f"AliasTable({self._data!r})"


@dataclass(frozen=True)
class FieldsMapping:
    """Resolved export mapping for one statement.

    Attributes:
        table_name: Destination table.
        source: Source stream (topic) the records come from.
        include_all_fields: True when the statement selected ``*``.
        write_mode: INSERT or UPSERT.
        mappings: Source field name → FieldAlias (read-only).
        auto_create_table: Create the table when it does not exist.
        auto_evolve_table: Add missing columns to an existing table.
        capitalize_names: Upper-case table and column identifiers.
        ignored_fields: Source fields the sink must not write (IGNORE).
    """

    table_name: str
    source: str
    include_all_fields: bool = True
    write_mode: WriteMode = WriteMode.INSERT
    mappings: Mapping[str, FieldAlias] = field(default_factory=AliasTable)
    auto_create_table: bool = False
    auto_evolve_table: bool = False
    capitalize_names: bool = False
    ignored_fields: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Callers may hand over a plain dict; never keep a mutable reference.
        if not isinstance(self.mappings, AliasTable):
            object.__setattr__(self, "mappings", AliasTable(self.mappings))
        object.__setattr__(self, "ignored_fields", tuple(self.ignored_fields))

    @property
    def primary_keys(self) -> list[str]:
        """Effective column names marked as primary key (sorted)."""
        return sorted({
            alias.name
            for alias in self.mappings.values()
            if alias.is_primary_key
        })

    def has_default_primary_key(self) -> bool:
        """Whether the reserved metadata columns were injected as key."""
        return CONNECT_PARTITION_COLUMN in self.mappings

    def __str__(self) -> str:
        fields = ", ".join(
            f"{src}->{alias.name}{' (pk)' if alias.is_primary_key else ''}"
            for src, alias in sorted(self.mappings.items())
        )
        return (
            f"FieldsMapping{{table='{self.table_name}', source='{self.source}', "
            + f"all_fields={self.include_all_fields}, mode={self.write_mode.name}, "
            + f"auto_create={self.auto_create_table}, "
            + f"auto_evolve={self.auto_evolve_table}, "
            + f"capitalize={self.capitalize_names}, fields=[{fields}], "
            + f"ignored=[{', '.join(self.ignored_fields)}]}}"
        )
