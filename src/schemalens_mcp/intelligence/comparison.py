"""Schema drift comparison between two environments.

Compares a reference schema (typically development) against a target
schema (staging or production) and reports what the target lacks or adds.
Column types are compared by SQLite storage affinity so ``INT`` and
``INTEGER`` do not count as drift.
"""

from __future__ import annotations

from collections.abc import Iterator

from fastmcp.utilities.logging import get_logger

from schemalens_mcp.schema_tools.constants import FindingKind
from schemalens_mcp.schema_tools.models import Finding, SchemaModel, Table
from schemalens_mcp.schema_tools.utils import type_affinity

_logger = get_logger(__name__)


def _table_drift(
    ref: Table, tgt: Table, source_label: str, target_label: str
) -> Iterator[Finding]:
    tgt_columns = {c.name: c for c in tgt.columns}
    ref_columns = {c.name for c in ref.columns}

    for col in ref.columns:
        other = tgt_columns.get(col.name)
        if other is None:
            yield Finding(
                kind=FindingKind.MISSING_COLUMN,
                table=ref.name,
                column=col.name,
                description=(
                    f"Column '{ref.name}.{col.name}' exists in {source_label} "
                    f"but not in {target_label}."
                ),
                remediation=f"ALTER TABLE {ref.name} ADD COLUMN {col.name} {col.data_type};",
            )
            continue
        ref_aff, tgt_aff = type_affinity(col.data_type), type_affinity(other.data_type)
        if ref_aff != tgt_aff:
            yield Finding(
                kind=FindingKind.COLUMN_TYPE_MISMATCH,
                table=ref.name,
                column=col.name,
                description=(
                    f"Column '{ref.name}.{col.name}' is {col.data_type or 'untyped'} "
                    f"({ref_aff}) in {source_label} but {other.data_type or 'untyped'} "
                    f"({tgt_aff}) in {target_label}."
                ),
                remediation="Review the column definitions and migrate data before aligning types.",
            )

    for col in tgt.columns:
        if col.name not in ref_columns:
            yield Finding(
                kind=FindingKind.EXTRA_COLUMN,
                table=tgt.name,
                column=col.name,
                description=(
                    f"Column '{tgt.name}.{col.name}' exists in {target_label} "
                    f"but not in {source_label}."
                ),
            )

    tgt_index_columns = {ix.columns for ix in tgt.indexes}
    for index in ref.indexes:
        if index.columns in tgt_index_columns:
            continue
        unique = "UNIQUE " if index.unique else ""
        yield Finding(
            kind=FindingKind.MISSING_INDEX,
            table=ref.name,
            index=index.name,
            description=(
                f"Index '{index.name}' on '{ref.name}' ({', '.join(index.columns)}) "
                f"exists in {source_label} but not in {target_label}."
            ),
            remediation=(
                f"CREATE {unique}INDEX {index.name} ON {ref.name}({', '.join(index.columns)});"
            ),
        )

    tgt_fks = {(fk.column, fk.referenced_table, fk.referenced_column) for fk in tgt.foreign_keys}
    for fk in ref.foreign_keys:
        if (fk.column, fk.referenced_table, fk.referenced_column) in tgt_fks:
            continue
        yield Finding(
            kind=FindingKind.MISSING_FOREIGN_KEY,
            table=ref.name,
            column=fk.column,
            description=(
                f"Foreign key {ref.name}.{fk.column} -> "
                f"{fk.referenced_table}.{fk.referenced_column} exists in {source_label} "
                f"but not in {target_label}."
            ),
        )


def compare_schemas(
    source: SchemaModel,
    target: SchemaModel,
    *,
    source_label: str = "source",
    target_label: str = "target",
) -> list[Finding]:
    """Report drift of ``target`` relative to ``source``.

    Returns:
        Findings in canonical order (kind, table, column, index)
    """
    findings: list[Finding] = []
    for ref in source.tables:
        tgt = target.table(ref.name)
        if tgt is None:
            findings.append(
                Finding(
                    kind=FindingKind.MISSING_TABLE,
                    table=ref.name,
                    description=(
                        f"Table '{ref.name}' exists in {source_label} but not in {target_label}."
                    ),
                    remediation=f"Create table '{ref.name}' in {target_label}.",
                )
            )
            continue
        findings.extend(_table_drift(ref, tgt, source_label, target_label))

    for tgt in target.tables:
        if not source.has_table(tgt.name):
            findings.append(
                Finding(
                    kind=FindingKind.EXTRA_TABLE,
                    table=tgt.name,
                    description=(
                        f"Table '{tgt.name}' exists in {target_label} but not in {source_label}."
                    ),
                )
            )

    findings.sort(key=lambda f: f.subject_key)
    _logger.info(
        "Schema comparison %s -> %s produced %d findings", source_label, target_label, len(findings)
    )
    return findings
