"""Performance optimization advice.

Rules that look for indexing problems: relationship source columns that
no index leads on, and indexes made redundant by a longer index sharing
their prefix.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Final

from fastmcp.utilities.logging import get_logger

from schemalens_mcp.schema_tools.constants import FindingKind
from schemalens_mcp.schema_tools.models import Finding, Relationship, SchemaModel, Table

from .validation import Rule, run_rules

_logger = get_logger(__name__)


def _leading_columns(table: Table) -> set[str]:
    leading = {index.leading_column for index in table.indexes}
    # The primary key is an implicit index on its leading column
    if table.primary_key:
        leading.add(table.primary_key[0])
    return leading


def missing_index_on_fk(model: SchemaModel, rels: Sequence[Relationship]) -> Iterator[Finding]:
    reported: set[tuple[str, str]] = set()
    for rel in rels:
        subject = (rel.source_table, rel.source_column)
        if subject in reported:
            continue
        table = model.table(rel.source_table)
        if table is None or rel.source_column in _leading_columns(table):
            continue
        reported.add(subject)
        origin = "declared" if rel.is_declared else "inferred"
        yield Finding(
            kind=FindingKind.MISSING_INDEX_ON_FK,
            table=rel.source_table,
            column=rel.source_column,
            description=(
                f"Column '{rel.source_table}.{rel.source_column}' is the source of a "
                f"{origin} relationship to '{rel.target_table}' but no index leads on it; "
                "joins and cascading deletes will scan the table."
            ),
            remediation=(
                f"CREATE INDEX idx_{rel.source_table}_{rel.source_column} "
                f"ON {rel.source_table}({rel.source_column});"
            ),
        )


def redundant_index(model: SchemaModel, _rels: Sequence[Relationship]) -> Iterator[Finding]:
    for table in model.tables:
        for index in table.indexes:
            if index.unique:
                continue
            covering = sorted(
                other.name for other in table.indexes if index.is_strict_prefix_of(other)
            )
            if not covering:
                continue
            cols = ", ".join(index.columns)
            yield Finding(
                kind=FindingKind.REDUNDANT_INDEX,
                table=table.name,
                index=index.name,
                description=(
                    f"Index '{index.name}' on '{table.name}' ({cols}) is a prefix of "
                    f"{', '.join(repr(n) for n in covering)} and is redundant."
                ),
                remediation=f"DROP INDEX {index.name};",
            )


OPTIMIZATION_RULES: Final[tuple[Rule, ...]] = (
    missing_index_on_fk,
    redundant_index,
)


def suggest_optimizations(model: SchemaModel, rels: Sequence[Relationship]) -> list[Finding]:
    """Run every optimization rule against the schema."""
    findings = run_rules(OPTIMIZATION_RULES, model, rels)
    _logger.info("Optimization advice produced %d findings", len(findings))
    return findings
