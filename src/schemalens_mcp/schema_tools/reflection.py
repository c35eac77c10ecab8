"""Database schema reflection adapter.

This module provides the ReflectionAdapter class that reads table metadata
through the SQLAlchemy Inspector and turns it into the immutable schema
models. It hides dialect quirks (unnamed unique constraints, expression
indexes, SQLite rowid aliases) behind one consistent interface.

Classes:
- ReflectionAdapter: Main class for database schema reflection
"""

from __future__ import annotations

from typing import Any

from fastmcp.utilities.logging import get_logger
import sqlalchemy as sa
from sqlalchemy.engine import Engine
from sqlalchemy.engine.reflection import Inspector
from sqlalchemy.exc import SQLAlchemyError

from .exceptions import ReflectionError
from .models import Column, DeclaredForeignKey, IndexDef, Table
from .utils import is_internal_table

# Logger
_logger = get_logger("schemalens.reflection")


class ReflectionAdapter:
    """Adapter for database schema reflection using SQLAlchemy.

    Each public method opens its own connection, so a single adapter can be
    shared by concurrent workers reflecting different tables.

    Attributes:
        engine: SQLAlchemy engine for database connections
        schema: Optional schema name; the dialect default when None
    """

    def __init__(self, engine: Engine, schema: str | None = None) -> None:
        """Initialize the reflection adapter.

        Args:
            engine: SQLAlchemy engine connected to the database
            schema: Optional schema to reflect instead of the default one
        """
        self.engine = engine
        self.schema = schema

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    def list_tables(self) -> list[str]:
        """List user tables in catalog order.

        Engine bookkeeping tables (``sqlite_*``, ``_cf_*``) are excluded.

        Raises:
            ReflectionError: If the catalog cannot be read
        """
        try:
            with self.engine.connect() as conn:
                insp: Inspector = sa.inspect(conn)
                names = insp.get_table_names(schema=self.schema)
        except (SQLAlchemyError, OSError) as e:
            error_msg = f"Failed to list database tables: {e}"
            raise ReflectionError(error_msg) from e

        tables = [name for name in names if not is_internal_table(name)]
        _logger.info(
            "Found %d user tables (%d internal skipped)", len(tables), len(names) - len(tables)
        )
        return tables

    def reflect_table(self, table: str) -> Table:
        """Reflect one table's columns, primary key, indexes and foreign keys.

        Raises:
            ReflectionError: If any part of the table metadata cannot be read
        """
        _logger.debug("Reflecting table: %s", table)
        try:
            with self.engine.connect() as conn:
                insp: Inspector = sa.inspect(conn)
                columns_metadata = insp.get_columns(table, schema=self.schema)
                pk_constraint = insp.get_pk_constraint(table, schema=self.schema)
                index_metadata = insp.get_indexes(table, schema=self.schema)
                unique_metadata = insp.get_unique_constraints(table, schema=self.schema)
                fk_metadata = insp.get_foreign_keys(table, schema=self.schema)
        except (SQLAlchemyError, OSError) as e:
            error_msg = f"Failed to reflect table {table!r}: {e}"
            raise ReflectionError(error_msg) from e

        primary_key = tuple(pk_constraint.get("constrained_columns") or [])
        columns = self._build_columns(columns_metadata, primary_key)
        indexes = self._build_indexes(table, index_metadata, unique_metadata)
        foreign_keys = self._build_foreign_keys(table, fk_metadata)

        return Table(
            name=table,
            columns=columns,
            indexes=indexes,
            foreign_keys=foreign_keys,
            primary_key=primary_key,
        )

    # ---- internals ---------------------------------------------------------
    def _build_columns(
        self, columns_metadata: list[Any], primary_key: tuple[str, ...]
    ) -> tuple[Column, ...]:
        pk_set = set(primary_key)
        rowid_alias = self._rowid_alias(columns_metadata, primary_key)
        columns: list[Column] = []
        for col in columns_metadata:
            name = col["name"]
            nullable = bool(col.get("nullable", True))
            if name == rowid_alias:
                # INTEGER PRIMARY KEY aliases the rowid and can never hold NULL
                nullable = False
            columns.append(
                Column(
                    name=name,
                    data_type=str(col["type"]),
                    nullable=nullable,
                    is_primary_key=name in pk_set,
                )
            )
        return tuple(columns)

    def _rowid_alias(self, columns_metadata: list[Any], primary_key: tuple[str, ...]) -> str | None:
        if self.dialect_name != "sqlite" or len(primary_key) != 1:
            return None
        for col in columns_metadata:
            if col["name"] == primary_key[0] and str(col["type"]).upper() == "INTEGER":
                return col["name"]
        return None

    def _build_indexes(
        self, table: str, index_metadata: list[Any], unique_metadata: list[Any]
    ) -> tuple[IndexDef, ...]:
        indexes: list[IndexDef] = []
        for idx in index_metadata:
            # Expression indexes report None for computed members
            cols = tuple(c for c in (idx.get("column_names") or []) if c)
            if not cols:
                _logger.debug("Skipping expression index %s on %s", idx.get("name"), table)
                continue
            indexes.append(
                IndexDef(name=idx.get("name") or "", columns=cols, unique=bool(idx.get("unique")))
            )

        # Unique constraints are implemented as indexes but often reflected separately
        represented = {ix.columns for ix in indexes}
        for uc in unique_metadata:
            cols = tuple(c for c in (uc.get("column_names") or []) if c)
            if not cols or cols in represented:
                continue
            name = uc.get("name") or f"uq_{table}_{'_'.join(cols)}"
            indexes.append(IndexDef(name=name, columns=cols, unique=True))
            represented.add(cols)

        return tuple(indexes)

    def _build_foreign_keys(
        self, table: str, fk_metadata: list[Any]
    ) -> tuple[DeclaredForeignKey, ...]:
        fks: list[DeclaredForeignKey] = []
        for fk in fk_metadata:
            ref_table = fk.get("referred_table")
            if not ref_table:
                continue
            options = fk.get("options") or {}
            constrained_cols = fk.get("constrained_columns") or []
            referred_cols = list(fk.get("referred_columns") or [])
            if len(referred_cols) < len(constrained_cols):
                _logger.debug(
                    "FK on %s -> %s lacks referred columns; assuming same names", table, ref_table
                )
            for pos, local_col in enumerate(constrained_cols):
                ref_col = referred_cols[pos] if pos < len(referred_cols) else None
                fks.append(
                    DeclaredForeignKey(
                        column=local_col,
                        referenced_table=ref_table,
                        referenced_column=ref_col or local_col,
                        on_delete=options.get("ondelete"),
                        on_update=options.get("onupdate"),
                    )
                )
        return tuple(fks)
