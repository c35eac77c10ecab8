from __future__ import annotations

import pytest

from schemalens_mcp.intelligence.relationships import resolve_relationships
from schemalens_mcp.schema_tools.constants import RelationshipOrigin
from schemalens_mcp.schema_tools.models import Column, DeclaredForeignKey, SchemaModel, Table


def _pk(name: str = "id", data_type: str = "INTEGER") -> Column:
    return Column(name, data_type, nullable=False, is_primary_key=True)


def _col(name: str, data_type: str = "INTEGER") -> Column:
    return Column(name, data_type)


def _shop_model(*, declare_customer_fk: bool = True) -> SchemaModel:
    fks = (DeclaredForeignKey("customer_id", "customers", "id", on_delete="CASCADE"),)
    return SchemaModel(
        tables=(
            Table("customers", (_pk(), _col("name", "TEXT"))),
            Table("categories", (_pk(), _col("label", "TEXT"))),
            Table("products", (_pk(), _col("category_id"), _col("title", "TEXT"))),
            Table(
                "orders",
                (_pk(), _col("customer_id"), _col("product_id")),
                foreign_keys=fks if declare_customer_fk else (),
            ),
        )
    )


def test_declared_relationship_has_full_confidence() -> None:
    rels = resolve_relationships(_shop_model())
    declared = [r for r in rels if r.origin is RelationshipOrigin.DECLARED]
    assert len(declared) == 1
    rel = declared[0]
    assert rel.key == ("orders", "customer_id", "customers", "id")
    assert rel.confidence == 1.0
    assert rel.on_delete == "CASCADE"
    assert rel.cascades_on_delete


def test_inference_from_naming_convention() -> None:
    rels = {r.key: r for r in resolve_relationships(_shop_model())}
    product = rels[("orders", "product_id", "products", "id")]
    assert product.origin is RelationshipOrigin.INFERRED
    assert product.confidence == pytest.approx(0.8)  # products vs stem "product"
    category = rels[("products", "category_id", "categories", "id")]
    assert category.confidence == pytest.approx(0.8)


@pytest.mark.parametrize(
    "table_name,column_name,expected",
    [
        ("customer", "customer_id", 0.9),
        ("customers", "customer_id", 0.8),
        ("customer", "customerId", 0.7),
        ("customers", "customerid", 0.6),
    ],
)
def test_confidence_scheme(table_name: str, column_name: str, expected: float) -> None:
    model = SchemaModel(
        tables=(
            Table(table_name, (_pk(),)),
            Table("invoices", (_pk(), _col(column_name))),
        )
    )
    rels = resolve_relationships(model)
    assert len(rels) == 1
    assert rels[0].target_table == table_name
    assert rels[0].confidence == pytest.approx(expected)


def test_exact_match_beats_inflected_match() -> None:
    model = SchemaModel(
        tables=(
            Table("status", (_pk(),)),
            Table("statuses", (_pk(),)),
            Table("tickets", (_pk(), _col("status_id"))),
        )
    )
    (rel,) = resolve_relationships(model)
    assert rel.target_table == "status"
    assert rel.confidence == pytest.approx(0.9)


def test_declared_wins_over_inferred_for_same_columns() -> None:
    rels = resolve_relationships(_shop_model())
    customer_links = [r for r in rels if r.source_column == "customer_id"]
    assert len(customer_links) == 1
    assert customer_links[0].origin is RelationshipOrigin.DECLARED


def test_without_declared_fk_customer_link_is_inferred() -> None:
    rels = resolve_relationships(_shop_model(declare_customer_fk=False))
    (link,) = [r for r in rels if r.source_column == "customer_id"]
    assert link.origin is RelationshipOrigin.INFERRED
    assert link.target_table == "customers"


def test_no_inference_for_composite_pk_or_incompatible_type() -> None:
    model = SchemaModel(
        tables=(
            Table("regions", (_pk("code", "TEXT"),)),
            Table("accounts", (_pk("org"), _pk("seq"))),
            Table(
                "users",
                (_pk(), _col("region_id", "INTEGER"), _col("account_id")),
            ),
        )
    )
    assert resolve_relationships(model) == ()


def test_unknown_types_are_compatible() -> None:
    model = SchemaModel(
        tables=(
            Table("teams", (_pk(),)),
            Table("players", (_pk(), _col("team_id", ""))),
        )
    )
    (rel,) = resolve_relationships(model)
    assert rel.target_table == "teams"


def test_column_never_links_to_itself() -> None:
    model = SchemaModel(tables=(Table("customer", (_pk("customer_id"),)),))
    assert resolve_relationships(model) == ()


def test_order_declared_first_then_sorted() -> None:
    rels = resolve_relationships(_shop_model())
    origins = [r.origin for r in rels]
    assert origins == sorted(origins, key=lambda o: o is RelationshipOrigin.INFERRED)
    inferred = [r.key for r in rels if r.origin is RelationshipOrigin.INFERRED]
    assert inferred == sorted(inferred)


def test_resolution_is_idempotent() -> None:
    model = _shop_model()
    assert resolve_relationships(model) == resolve_relationships(model)


def test_table_filter_matches_source_or_target() -> None:
    model = _shop_model()
    rels = resolve_relationships(model, "products")
    assert {r.key for r in rels} == {
        ("orders", "product_id", "products", "id"),
        ("products", "category_id", "categories", "id"),
    }
    assert resolve_relationships(model, "missing") == ()
