"""Relationship resolution.

Combines declared foreign keys with relationships inferred from column
naming conventions (``customer_id``, ``customerId``) into one deterministic
sequence. Declared relationships always win over inferred ones for the same
source/target column pair.
"""

from __future__ import annotations

from typing import Final

from fastmcp.utilities.logging import get_logger

from schemalens_mcp.schema_tools.constants import Constants, RelationshipOrigin
from schemalens_mcp.schema_tools.models import Column, Relationship, SchemaModel, Table
from schemalens_mcp.schema_tools.utils import inflections, types_compatible

_logger = get_logger(__name__)

# Inference confidence keyed by (stem matched exactly, underscore separator present)
INFERENCE_CONFIDENCE: Final[dict[tuple[bool, bool], float]] = {
    (True, True): 0.9,
    (False, True): 0.8,
    (True, False): 0.7,
    (False, False): 0.6,
}


def _sort_key(rel: Relationship) -> tuple[str, str, str, str]:
    return rel.key


def declared_relationships(model: SchemaModel) -> list[Relationship]:
    """Turn every declared foreign key into a relationship with confidence 1.0."""
    rels = [
        Relationship(
            source_table=table.name,
            source_column=fk.column,
            target_table=fk.referenced_table,
            target_column=fk.referenced_column,
            origin=RelationshipOrigin.DECLARED,
            confidence=1.0,
            on_delete=fk.on_delete,
            on_update=fk.on_update,
        )
        for table in model.tables
        for fk in table.foreign_keys
    ]
    return sorted(rels, key=_sort_key)


def _single_pk_column(table: Table) -> Column | None:
    if len(table.primary_key) != 1:
        return None
    return table.column(table.primary_key[0])


def infer_target(
    model: SchemaModel, table: Table, column: Column
) -> tuple[Table, Column, float] | None:
    """Find the best target for a column named like a foreign key.

    Returns:
        (target table, target column, confidence), or None when nothing matches
    """
    match = Constants.FK_NAME_PATTERN.match(column.name)
    if match is None:
        return None
    stem = match.group("stem").rstrip("_")
    if not stem:
        return None
    has_separator = match.group("sep") is not None
    stem_lower = stem.lower()
    stem_variants = inflections(stem)

    candidates: list[tuple[float, str, Table, Column]] = []
    for target in model.tables:
        target_lower = target.name.lower()
        if target_lower == stem_lower:
            exact = True
        elif target_lower in stem_variants:
            exact = False
        else:
            continue
        pk_col = _single_pk_column(target)
        if pk_col is None:
            continue
        if target.name == table.name and pk_col.name == column.name:
            continue
        if not types_compatible(column.data_type, pk_col.data_type):
            continue
        confidence = INFERENCE_CONFIDENCE[(exact, has_separator)]
        candidates.append((confidence, target.name, target, pk_col))

    if not candidates:
        return None
    candidates.sort(key=lambda c: (-c[0], c[1]))
    confidence, _, target, pk_col = candidates[0]
    return target, pk_col, confidence


def inferred_relationships(
    model: SchemaModel, declared: list[Relationship] | None = None
) -> list[Relationship]:
    """Infer relationships for columns that are not already declared FK sources."""
    declared = declared if declared is not None else declared_relationships(model)
    declared_sources = {(r.source_table, r.source_column) for r in declared}

    rels: list[Relationship] = []
    for table in model.tables:
        for column in table.columns:
            if (table.name, column.name) in declared_sources:
                continue
            found = infer_target(model, table, column)
            if found is None:
                continue
            target, pk_col, confidence = found
            rels.append(
                Relationship(
                    source_table=table.name,
                    source_column=column.name,
                    target_table=target.name,
                    target_column=pk_col.name,
                    origin=RelationshipOrigin.INFERRED,
                    confidence=confidence,
                )
            )
    return sorted(rels, key=_sort_key)


def resolve_relationships(
    model: SchemaModel, table_name: str | None = None
) -> tuple[Relationship, ...]:
    """Resolve declared and inferred relationships.

    Declared relationships come first, then inferred ones; each group is
    ordered by source table, source column, target table and target column.
    When ``table_name`` is given only relationships whose source or target
    equals it are kept.
    """
    declared = declared_relationships(model)
    inferred = inferred_relationships(model, declared)

    seen: set[tuple[str, str, str, str]] = set()
    resolved: list[Relationship] = []
    for rel in [*declared, *inferred]:
        if rel.key in seen:
            continue
        seen.add(rel.key)
        resolved.append(rel)

    if table_name is not None:
        resolved = [
            r for r in resolved if table_name in {r.source_table, r.target_table}
        ]

    _logger.debug(
        "Resolved %d relationships (%d declared, %d inferred)",
        len(resolved),
        sum(1 for r in resolved if r.is_declared),
        sum(1 for r in resolved if not r.is_declared),
    )
    return tuple(resolved)
