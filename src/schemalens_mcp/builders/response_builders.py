"""Response builders for schemalens-mcp.

This module contains builder classes that construct pydantic response
models from the immutable analysis models. Each builder is responsible for
one result type.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, cast

from schemalens_mcp.models import (
    AnalyzeSchemaResult,
    ColumnDetail,
    FindingDetail,
    FindingsResult,
    ForeignKeyDetail,
    IndexDetail,
    RelationshipDetail,
    RelationshipsResult,
    SchemaComparisonResult,
    SchemaStatistics,
    ScoreDetail,
    TableDetail,
)
from schemalens_mcp.schema_tools.constants import Environment
from schemalens_mcp.schema_tools.models import Finding, Relationship, SchemaModel, Table


def relationship_detail(rel: Relationship) -> RelationshipDetail:
    return RelationshipDetail(
        source_table=rel.source_table,
        source_column=rel.source_column,
        target_table=rel.target_table,
        target_column=rel.target_column,
        origin=rel.origin.value,  # type: ignore[arg-type]
        confidence=rel.confidence,
        on_delete=rel.on_delete,
        on_update=rel.on_update,
    )


def table_detail(table: Table) -> TableDetail:
    return TableDetail(
        name=table.name,
        columns=[
            ColumnDetail(
                name=c.name,
                data_type=c.data_type,
                nullable=c.nullable,
                is_primary_key=c.is_primary_key,
            )
            for c in table.columns
        ],
        primary_key=list(table.primary_key),
        indexes=[
            IndexDetail(name=ix.name, columns=list(ix.columns), unique=ix.unique)
            for ix in table.indexes
        ],
        foreign_keys=[
            ForeignKeyDetail(
                column=fk.column,
                referenced_table=fk.referenced_table,
                referenced_column=fk.referenced_column,
                on_delete=fk.on_delete,
                on_update=fk.on_update,
            )
            for fk in table.foreign_keys
        ],
        sample_degraded=table.sample_degraded,
    )


def finding_detail(finding: Finding) -> FindingDetail:
    score = finding.score
    if score is None:
        msg = f"Finding {finding.kind.value} on {finding.table!r} has not been ranked"
        raise ValueError(msg)
    return FindingDetail(
        kind=finding.kind.value,
        table=finding.table,
        column=finding.column,
        index=finding.index,
        description=finding.description,
        remediation=finding.remediation,
        score=ScoreDetail(
            insight=score.insight,
            context=score.context,
            execution=score.execution,
            combined=round(score.combined, 4),
            priority=score.priority.value,  # type: ignore[arg-type]
        ),
    )


def _priority_counts(findings: Sequence[Finding]) -> dict[str, int]:
    counts = {"high": 0, "medium": 0, "low": 0}
    for f in findings:
        if f.score is not None:
            counts[f.score.priority.value] += 1
    return counts


class AnalyzeSchemaResultBuilder:
    """Builder for AnalyzeSchemaResult objects."""

    @staticmethod
    def build(
        model: SchemaModel,
        relationships: Sequence[Relationship],
        environment: Environment,
        *,
        include_samples: bool,
    ) -> AnalyzeSchemaResult:
        """Build the structural analysis result.

        Args:
            model: Extracted schema model
            relationships: Resolved relationships for the whole schema
            environment: Environment the schema was read from
            include_samples: Whether to include the sample rows section

        Returns:
            AnalyzeSchemaResult with tables, relationships and statistics
        """
        statistics = SchemaStatistics(
            table_count=len(model.tables),
            column_count=sum(len(t.columns) for t in model.tables),
            index_count=sum(len(t.indexes) for t in model.tables),
            foreign_key_count=sum(len(t.foreign_keys) for t in model.tables),
            relationship_count=len(relationships),
            inferred_relationship_count=sum(1 for r in relationships if not r.is_declared),
            tables_without_primary_key=[t.name for t in model.tables if not t.has_primary_key],
            degraded_sample_tables=[t.name for t in model.tables if t.sample_degraded],
        )
        sample_data: dict[str, list[dict[str, Any]]] | None = None
        if include_samples:
            sample_data = {t.name: [dict(row) for row in t.sample_rows] for t in model.tables}

        return AnalyzeSchemaResult(
            environment=cast("Any", environment.value),
            dialect=model.dialect,
            tables=[table_detail(t) for t in model.tables],
            relationships=[relationship_detail(r) for r in relationships],
            statistics=statistics,
            sample_data=sample_data,
        )


class RelationshipsResultBuilder:
    """Builder for RelationshipsResult objects."""

    @staticmethod
    def build(
        relationships: Sequence[Relationship],
        environment: Environment,
        *,
        table_filter: str | None,
        cycles: list[list[str]],
        self_referential: Sequence[Relationship],
        population_order: list[str],
    ) -> RelationshipsResult:
        return RelationshipsResult(
            environment=cast("Any", environment.value),
            table_filter=table_filter,
            relationships=[relationship_detail(r) for r in relationships],
            relationship_count=len(relationships),
            cycles=cycles,
            self_referential=[relationship_detail(r) for r in self_referential],
            population_order=population_order,
        )


class FindingsResultBuilder:
    """Builder for FindingsResult objects."""

    @staticmethod
    def build(findings: Sequence[Finding], environment: Environment) -> FindingsResult:
        return FindingsResult(
            environment=cast("Any", environment.value),
            findings=[finding_detail(f) for f in findings],
            finding_count=len(findings),
            priority_counts=cast("Any", _priority_counts(findings)),
        )


class SchemaComparisonResultBuilder:
    """Builder for SchemaComparisonResult objects."""

    @staticmethod
    def build(
        findings: Sequence[Finding], source: Environment, target: Environment
    ) -> SchemaComparisonResult:
        return SchemaComparisonResult(
            source_environment=cast("Any", source.value),
            target_environment=cast("Any", target.value),
            in_sync=not findings,
            findings=[finding_detail(f) for f in findings],
            finding_count=len(findings),
            priority_counts=cast("Any", _priority_counts(findings)),
        )
