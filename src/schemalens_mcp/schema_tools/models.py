"""Data models for schema intelligence.

This module contains the immutable value types that flow through the
extraction and analysis pipeline. Every model is a frozen dataclass that
checks its structural invariants on construction, so a model that exists is
a model that is internally consistent.

Classes:
- Column: A single table column
- IndexDef: A named index over an ordered column sequence
- DeclaredForeignKey: A foreign key declared in the database catalog
- Table: Complete structural description of one table, with optional samples
- SchemaModel: All user tables of one database
- Relationship: A declared or inferred link between two columns
- Finding: A validation, optimization or drift observation
- ExtractionOptions: Options controlling extraction and sampling
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from .constants import Constants, FindingKind, RelationshipOrigin
from .exceptions import ConfigurationError, SchemaInvariantError

if TYPE_CHECKING:
    from schemalens_mcp.intelligence.scoring import ScoreModel


@dataclass(frozen=True)
class Column:
    """A single table column.

    Attributes:
        name: Column name, unique within its table
        data_type: Declared type as reported by the catalog (may be empty)
        nullable: Whether the column accepts NULL
        is_primary_key: Whether the column is part of the primary key
    """

    name: str
    data_type: str
    nullable: bool = True
    is_primary_key: bool = False


@dataclass(frozen=True)
class IndexDef:
    """A named index over an ordered column sequence."""

    name: str
    columns: tuple[str, ...]
    unique: bool = False

    def __post_init__(self) -> None:
        if not self.columns:
            msg = f"Index {self.name!r} must cover at least one column"
            raise SchemaInvariantError(msg)

    @property
    def leading_column(self) -> str:
        return self.columns[0]

    def is_strict_prefix_of(self, other: IndexDef) -> bool:
        """Return True when this index's columns are a strict prefix of ``other``'s."""
        return (
            len(self.columns) < len(other.columns)
            and other.columns[: len(self.columns)] == self.columns
        )


@dataclass(frozen=True)
class DeclaredForeignKey:
    """A foreign key declared in the database catalog.

    Composite constraints are represented as one entry per column pair.
    """

    column: str
    referenced_table: str
    referenced_column: str
    on_delete: str | None = None
    on_update: str | None = None


@dataclass(frozen=True)
class Table:
    """Complete structural description of one table.

    Attributes:
        name: Table name, unique within the schema
        columns: Columns in catalog order
        indexes: Indexes including unique constraints
        foreign_keys: Declared foreign keys, one per column pair
        primary_key: Ordered primary key columns; derived from column flags when empty
        sample_rows: Up to ``max_sample_rows`` sampled rows keyed by column name
        sample_degraded: True when sampling was requested but failed
    """

    name: str
    columns: tuple[Column, ...]
    indexes: tuple[IndexDef, ...] = ()
    foreign_keys: tuple[DeclaredForeignKey, ...] = ()
    primary_key: tuple[str, ...] = ()
    sample_rows: tuple[dict[str, Any], ...] = ()
    sample_degraded: bool = False

    def __post_init__(self) -> None:
        names = [c.name for c in self.columns]
        seen: set[str] = set()
        for name in names:
            if name in seen:
                msg = f"Duplicate column {name!r} in table {self.name!r}"
                raise SchemaInvariantError(msg)
            seen.add(name)

        for fk in self.foreign_keys:
            if fk.column not in seen:
                msg = (
                    f"Foreign key on {self.name!r} references unknown local column "
                    f"{fk.column!r}"
                )
                raise SchemaInvariantError(msg)

        flagged = tuple(c.name for c in self.columns if c.is_primary_key)
        if not self.primary_key:
            object.__setattr__(self, "primary_key", flagged)
        else:
            for pk_col in self.primary_key:
                if pk_col not in flagged:
                    msg = (
                        f"Primary key column {pk_col!r} of table {self.name!r} "
                        "is not a flagged primary key column"
                    )
                    raise SchemaInvariantError(msg)

    def column(self, name: str) -> Column | None:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    @property
    def has_primary_key(self) -> bool:
        return bool(self.primary_key)


@dataclass(frozen=True)
class SchemaModel:
    """All user tables of one database, in catalog order."""

    tables: tuple[Table, ...]
    dialect: str = ""
    _by_name: dict[str, Table] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_name: dict[str, Table] = {}
        for table in self.tables:
            if table.name in by_name:
                msg = f"Duplicate table name {table.name!r} in schema model"
                raise SchemaInvariantError(msg)
            by_name[table.name] = table
        object.__setattr__(self, "_by_name", by_name)

    def table(self, name: str) -> Table | None:
        return self._by_name.get(name)

    def has_table(self, name: str) -> bool:
        return name in self._by_name

    @property
    def table_names(self) -> tuple[str, ...]:
        return tuple(t.name for t in self.tables)


@dataclass(frozen=True)
class Relationship:
    """A link from a source column to a target column.

    Declared relationships come from catalog foreign keys and always carry
    confidence 1.0. Inferred relationships come from naming conventions and
    carry a confidence in [0, 1].
    """

    source_table: str
    source_column: str
    target_table: str
    target_column: str
    origin: RelationshipOrigin
    confidence: float = 1.0
    on_delete: str | None = None
    on_update: str | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            msg = f"Relationship confidence must be between 0 and 1, got {self.confidence}"
            raise SchemaInvariantError(msg)
        if self.origin is RelationshipOrigin.DECLARED and self.confidence != 1.0:
            msg = "Declared relationships must have confidence 1.0"
            raise SchemaInvariantError(msg)

    @property
    def key(self) -> tuple[str, str, str, str]:
        return (self.source_table, self.source_column, self.target_table, self.target_column)

    @property
    def is_declared(self) -> bool:
        return self.origin is RelationshipOrigin.DECLARED

    @property
    def is_self_referential(self) -> bool:
        return self.source_table == self.target_table

    @property
    def cascades_on_delete(self) -> bool:
        return (self.on_delete or "").upper() == "CASCADE"

    def describe(self) -> str:
        return (
            f"{self.source_table}.{self.source_column} -> "
            f"{self.target_table}.{self.target_column}"
        )


@dataclass(frozen=True)
class Finding:
    """A single observation about a schema.

    Findings are immutable. Ranking attaches a score by returning a copy via
    :meth:`with_score`; the description and subject never change.

    Attributes:
        kind: Closed finding kind
        table: Table the finding is about
        description: Human-readable explanation
        column: Column subject, when applicable
        index: Index subject, when applicable
        remediation: Suggested DDL or review action; never executed
        score: Score attached by the ranker
    """

    kind: FindingKind
    table: str
    description: str
    column: str | None = None
    index: str | None = None
    remediation: str | None = None
    score: ScoreModel | None = None

    def with_score(self, score: ScoreModel) -> Finding:
        return replace(self, score=score)

    @property
    def subject_key(self) -> tuple[int, str, str, str]:
        """Kind order, then table, column and index; the canonical tie-break."""
        return (self.kind.order, self.table, self.column or "", self.index or "")


@dataclass(frozen=True)
class ExtractionOptions:
    """Options controlling schema extraction.

    Attributes:
        include_samples: Whether to read sample rows per table
        max_sample_rows: Maximum rows sampled per table; zero disables sampling
        fan_out: Maximum number of tables reflected concurrently
        sample_timeout_sec: Per-query sampling timeout where the dialect supports it
    """

    include_samples: bool = True
    max_sample_rows: int = Constants.DEFAULT_SAMPLE_ROWS
    fan_out: int = Constants.DEFAULT_FAN_OUT
    sample_timeout_sec: int = Constants.DEFAULT_TIMEOUT_SEC

    def __post_init__(self) -> None:
        if self.max_sample_rows < 0:
            msg = f"max_sample_rows must be >= 0, got {self.max_sample_rows}"
            raise ConfigurationError(msg)
        if self.fan_out < 1:
            msg = f"fan_out must be >= 1, got {self.fan_out}"
            raise ConfigurationError(msg)

    @property
    def sampling_enabled(self) -> bool:
        return self.include_samples and self.max_sample_rows > 0
