from __future__ import annotations

import pytest

from schemalens_mcp.intelligence.optimization import suggest_optimizations
from schemalens_mcp.intelligence.relationships import resolve_relationships
from schemalens_mcp.schema_tools.constants import FindingKind, RelationshipOrigin
from schemalens_mcp.schema_tools.models import (
    Column,
    DeclaredForeignKey,
    IndexDef,
    Relationship,
    SchemaModel,
    Table,
)


def _pk(name: str = "id") -> Column:
    return Column(name, "INTEGER", nullable=False, is_primary_key=True)


def _indexed_table(*indexes: IndexDef) -> SchemaModel:
    return SchemaModel(
        tables=(
            Table(
                "t",
                (_pk(), Column("a", "INTEGER"), Column("b", "INTEGER"), Column("c", "INTEGER")),
                indexes=indexes,
            ),
        )
    )


def test_prefix_index_is_redundant() -> None:
    model = _indexed_table(IndexDef("idx_a", ("a",)), IndexDef("idx_ab", ("a", "b")))
    findings = suggest_optimizations(model, ())
    assert len(findings) == 1
    (finding,) = findings
    assert finding.kind is FindingKind.REDUNDANT_INDEX
    assert finding.index == "idx_a"
    assert "idx_ab" in finding.description
    assert finding.remediation == "DROP INDEX idx_a;"


def test_unique_prefix_index_is_not_redundant() -> None:
    model = _indexed_table(
        IndexDef("uq_a", ("a",), unique=True), IndexDef("idx_ab", ("a", "b"))
    )
    assert suggest_optimizations(model, ()) == []


@pytest.mark.parametrize(
    "short,long",
    [
        (("a", "b"), ("a", "b")),  # equal, not a strict prefix
        (("b",), ("a", "b")),  # not leading
        (("a", "c"), ("a", "b", "c")),
    ],
)
def test_non_prefix_indexes_are_kept(short: tuple[str, ...], long: tuple[str, ...]) -> None:
    model = _indexed_table(IndexDef("ix_short", short), IndexDef("ix_long", long))
    kinds = [f.kind for f in suggest_optimizations(model, ())]
    assert FindingKind.REDUNDANT_INDEX not in kinds


def test_one_finding_per_redundant_index() -> None:
    model = _indexed_table(
        IndexDef("idx_a", ("a",)),
        IndexDef("idx_ab", ("a", "b")),
        IndexDef("idx_abc", ("a", "b", "c")),
    )
    findings = suggest_optimizations(model, ())
    assert [f.index for f in findings] == ["idx_a", "idx_ab"]


def _orders_model(*indexes: IndexDef) -> SchemaModel:
    return SchemaModel(
        tables=(
            Table("customers", (_pk(),)),
            Table(
                "orders",
                (_pk(), Column("customer_id", "INTEGER"), Column("placed_at", "TEXT")),
                indexes=indexes,
                foreign_keys=(DeclaredForeignKey("customer_id", "customers", "id"),),
            ),
        )
    )


def test_missing_index_on_declared_fk() -> None:
    model = _orders_model()
    (finding,) = suggest_optimizations(model, resolve_relationships(model))
    assert finding.kind is FindingKind.MISSING_INDEX_ON_FK
    assert (finding.table, finding.column) == ("orders", "customer_id")
    assert finding.remediation == "CREATE INDEX idx_orders_customer_id ON orders(customer_id);"


@pytest.mark.parametrize(
    "index",
    [
        IndexDef("idx_customer", ("customer_id",)),
        IndexDef("idx_customer_date", ("customer_id", "placed_at")),
    ],
)
def test_leading_index_satisfies_fk(index: IndexDef) -> None:
    model = _orders_model(index)
    assert suggest_optimizations(model, resolve_relationships(model)) == []


def test_non_leading_index_does_not_satisfy_fk() -> None:
    model = _orders_model(IndexDef("idx_date_customer", ("placed_at", "customer_id")))
    findings = suggest_optimizations(model, resolve_relationships(model))
    assert [f.kind for f in findings] == [FindingKind.MISSING_INDEX_ON_FK]


def test_primary_key_counts_as_index() -> None:
    model = SchemaModel(
        tables=(
            Table("users", (_pk(),)),
            Table(
                "profiles",
                (_pk("user_id"), Column("bio", "TEXT")),
                foreign_keys=(DeclaredForeignKey("user_id", "users", "id"),),
            ),
        )
    )
    assert suggest_optimizations(model, resolve_relationships(model)) == []


def test_inferred_relationships_are_considered_once_per_column() -> None:
    model = _orders_model()
    rels = (
        Relationship("orders", "customer_id", "customers", "id", RelationshipOrigin.DECLARED),
        Relationship(
            "orders", "customer_id", "clients", "id", RelationshipOrigin.INFERRED, 0.6
        ),
    )
    findings = suggest_optimizations(model, rels)
    assert len(findings) == 1
