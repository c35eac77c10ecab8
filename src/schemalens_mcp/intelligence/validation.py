"""Schema integrity validation.

Validation is a fixed, ordered tuple of pure rule functions. Each rule
takes the schema model and resolved relationships and yields findings; no
rule suppresses another. The combined output is sorted by finding kind,
then table, column and index.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Final

from fastmcp.utilities.logging import get_logger

from schemalens_mcp.schema_tools.constants import FindingKind
from schemalens_mcp.schema_tools.models import Finding, IndexDef, Relationship, SchemaModel

_logger = get_logger(__name__)

Rule = Callable[[SchemaModel, Sequence[Relationship]], Iterable[Finding]]


def missing_primary_key(model: SchemaModel, _rels: Sequence[Relationship]) -> Iterator[Finding]:
    for table in model.tables:
        if table.has_primary_key:
            continue
        yield Finding(
            kind=FindingKind.MISSING_PRIMARY_KEY,
            table=table.name,
            description=(
                f"Table '{table.name}' has no primary key; rows cannot be identified "
                "or referenced reliably."
            ),
            remediation=(
                f"Add a primary key to '{table.name}', for example a surrogate "
                "'id INTEGER PRIMARY KEY' column."
            ),
        )


def orphaned_foreign_key(model: SchemaModel, rels: Sequence[Relationship]) -> Iterator[Finding]:
    for rel in rels:
        target = model.table(rel.target_table)
        if target is None:
            reason = f"target table '{rel.target_table}' does not exist"
        elif target.column(rel.target_column) is None:
            reason = f"target column '{rel.target_table}.{rel.target_column}' does not exist"
        else:
            continue
        yield Finding(
            kind=FindingKind.ORPHANED_FOREIGN_KEY,
            table=rel.source_table,
            column=rel.source_column,
            description=f"Relationship {rel.describe()} is orphaned: {reason}.",
            remediation=(
                f"Create the missing target or drop the reference from "
                f"'{rel.source_table}.{rel.source_column}'."
            ),
        )


def duplicate_index(model: SchemaModel, _rels: Sequence[Relationship]) -> Iterator[Finding]:
    for table in model.tables:
        first_by_columns: dict[tuple[str, ...], IndexDef] = {}
        for index in table.indexes:
            original = first_by_columns.get(index.columns)
            if original is None:
                first_by_columns[index.columns] = index
                continue
            cols = ", ".join(index.columns)
            yield Finding(
                kind=FindingKind.DUPLICATE_INDEX,
                table=table.name,
                index=index.name,
                description=(
                    f"Index '{index.name}' on '{table.name}' ({cols}) duplicates "
                    f"index '{original.name}'."
                ),
                remediation=f"DROP INDEX {index.name};",
            )


def nullable_primary_key_column(
    model: SchemaModel, _rels: Sequence[Relationship]
) -> Iterator[Finding]:
    for table in model.tables:
        for column in table.columns:
            if not (column.is_primary_key and column.nullable):
                continue
            yield Finding(
                kind=FindingKind.NULLABLE_PRIMARY_KEY_COLUMN,
                table=table.name,
                column=column.name,
                description=(
                    f"Primary key column '{table.name}.{column.name}' allows NULL values."
                ),
                remediation=f"Declare '{table.name}.{column.name}' as NOT NULL.",
            )


def nullable_foreign_key(model: SchemaModel, _rels: Sequence[Relationship]) -> Iterator[Finding]:
    """Nullable declared foreign keys whose ON DELETE action is not SET NULL."""
    for table in model.tables:
        for fk in table.foreign_keys:
            column = table.column(fk.column)
            if column is None or not column.nullable:
                continue
            on_delete = (fk.on_delete or "").upper()
            if on_delete == "SET NULL":
                continue
            current = on_delete or "NO ACTION"
            yield Finding(
                kind=FindingKind.NULLABLE_FOREIGN_KEY,
                table=table.name,
                column=fk.column,
                description=(
                    f"Nullable foreign key column '{table.name}.{fk.column}' references "
                    f"'{fk.referenced_table}.{fk.referenced_column}' with ON DELETE {current}; "
                    "consider whether the relationship is truly optional."
                ),
                remediation=(
                    f"Declare '{table.name}.{fk.column}' NOT NULL, or recreate the foreign "
                    "key with ON DELETE SET NULL."
                ),
            )


VALIDATION_RULES: Final[tuple[Rule, ...]] = (
    missing_primary_key,
    orphaned_foreign_key,
    duplicate_index,
    nullable_primary_key_column,
    nullable_foreign_key,
)


def run_rules(
    rules: Sequence[Rule], model: SchemaModel, rels: Sequence[Relationship]
) -> list[Finding]:
    """Run rules in order and return their findings in canonical order."""
    findings = [finding for rule in rules for finding in rule(model, rels)]
    return sorted(findings, key=lambda f: f.subject_key)


def validate_schema(model: SchemaModel, rels: Sequence[Relationship]) -> list[Finding]:
    """Run every integrity rule against the schema."""
    findings = run_rules(VALIDATION_RULES, model, rels)
    _logger.info("Validation produced %d findings", len(findings))
    return findings
