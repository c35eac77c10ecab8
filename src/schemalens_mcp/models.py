"""Pydantic models for MCP tool I/O.

Serializable result models returned by the MCP tools and produced by the
response builders. Core analysis works on frozen dataclasses; these models
are the wire representation.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

EnvironmentName = Literal["development", "staging", "production"]
PriorityName = Literal["high", "medium", "low"]


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


# -----------------------
# Schema structure
# -----------------------


class ColumnDetail(BaseModel):
    """A single table column."""

    name: str
    data_type: str = Field(description="Declared type as reported by the catalog")
    nullable: bool
    is_primary_key: bool


class IndexDetail(BaseModel):
    """A named index over an ordered column list."""

    name: str
    columns: list[str]
    unique: bool


class ForeignKeyDetail(BaseModel):
    """A foreign key declared in the catalog (one per column pair)."""

    column: str
    referenced_table: str
    referenced_column: str
    on_delete: str | None = None
    on_update: str | None = None


class TableDetail(BaseModel):
    """Structure of one table."""

    name: str
    columns: list[ColumnDetail]
    primary_key: list[str] = Field(default_factory=list, description="Ordered PK columns")
    indexes: list[IndexDetail] = Field(default_factory=list)
    foreign_keys: list[ForeignKeyDetail] = Field(default_factory=list)
    sample_degraded: bool = Field(
        default=False, description="True when sampling was requested for this table but failed"
    )


class RelationshipDetail(BaseModel):
    """A declared or inferred relationship between two columns."""

    source_table: str
    source_column: str
    target_table: str
    target_column: str
    origin: Literal["declared", "inferred"]
    confidence: float = Field(ge=0.0, le=1.0)
    on_delete: str | None = None
    on_update: str | None = None


class SchemaStatistics(BaseModel):
    """Aggregate counts over a schema."""

    table_count: int
    column_count: int
    index_count: int
    foreign_key_count: int
    relationship_count: int
    inferred_relationship_count: int
    tables_without_primary_key: list[str] = Field(default_factory=list)
    degraded_sample_tables: list[str] = Field(default_factory=list)


class AnalyzeSchemaResult(BaseModel):
    """Full structural analysis of one environment's schema."""

    environment: EnvironmentName
    dialect: str
    tables: list[TableDetail]
    relationships: list[RelationshipDetail]
    statistics: SchemaStatistics
    sample_data: dict[str, list[dict[str, Any]]] | None = Field(
        default=None, description="Sample rows keyed by table name when samples were requested"
    )
    extracted_at: str = Field(default_factory=_now_iso)


class RelationshipsResult(BaseModel):
    """Relationships with dependency-graph analysis."""

    environment: EnvironmentName
    table_filter: str | None = None
    relationships: list[RelationshipDetail]
    relationship_count: int
    cycles: list[list[str]] = Field(
        default_factory=list, description="Reference cycles between distinct tables"
    )
    self_referential: list[RelationshipDetail] = Field(default_factory=list)
    population_order: list[str] = Field(
        default_factory=list, description="Tables ordered parents-first for data loading"
    )


# -----------------------
# Findings
# -----------------------


class ScoreDetail(BaseModel):
    """Insight x Context x Execution score."""

    insight: float
    context: float
    execution: float
    combined: float
    priority: PriorityName


class FindingDetail(BaseModel):
    """A ranked finding."""

    kind: str
    table: str
    column: str | None = None
    index: str | None = None
    description: str
    remediation: str | None = None
    score: ScoreDetail


class FindingsResult(BaseModel):
    """Ranked findings for one environment."""

    environment: EnvironmentName
    findings: list[FindingDetail]
    finding_count: int
    priority_counts: dict[PriorityName, int] = Field(
        default_factory=lambda: {"high": 0, "medium": 0, "low": 0}
    )
    generated_at: str = Field(default_factory=_now_iso)


class SchemaComparisonResult(BaseModel):
    """Schema drift of a target environment relative to a source environment."""

    source_environment: EnvironmentName
    target_environment: EnvironmentName
    in_sync: bool
    findings: list[FindingDetail]
    finding_count: int
    priority_counts: dict[PriorityName, int] = Field(
        default_factory=lambda: {"high": 0, "medium": 0, "low": 0}
    )
    generated_at: str = Field(default_factory=_now_iso)
