"""Database table sampling functionality.

This module provides the Sampler class that reads a bounded number of rows
from a table through SQLAlchemy Core and pandas, returning JSON-friendly
records.

Classes:
- Sampler: Main class for database table sampling operations
"""

from __future__ import annotations

from typing import Any

from fastmcp.utilities.logging import get_logger
import pandas as pd
import sqlalchemy as sa
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement

from .exceptions import SamplingError

# Logger
_logger = get_logger("schemalens.sampling")


class Sampler:
    """Bounded row sampler.

    Attributes:
        engine: SQLAlchemy engine for database connections
        per_table_rows: Maximum number of rows to sample per table
        timeout_sec: Query timeout in seconds where the dialect supports one
        schema: Optional schema name; the dialect default when None
    """

    def __init__(
        self,
        engine: Engine,
        per_table_rows: int = 5,
        timeout_sec: int = 5,
        schema: str | None = None,
    ) -> None:
        self.engine = engine
        self.per_table_rows = per_table_rows
        self.timeout_sec = timeout_sec
        self.schema = schema

    def sample_table(
        self,
        table: str,
        cols: list[str],
        *,
        conn: Connection | None = None,
    ) -> list[dict[str, Any]]:
        """Sample up to ``per_table_rows`` rows from a table.

        Args:
            table: Table name to sample from
            cols: Column names to include in the sample

        Returns:
            Rows as dictionaries keyed by column name, NULLs as None

        Raises:
            SamplingError: If the sampling query fails
        """
        if not cols or self.per_table_rows <= 0:
            _logger.debug("Nothing to sample for %s", table)
            return []

        table_obj = sa.table(table, schema=self.schema)
        select_columns: list[ColumnElement[Any]] = [sa.column(col) for col in cols]
        sql_query = sa.select(*select_columns).select_from(table_obj).limit(self.per_table_rows)

        _logger.debug("Sampling %s with query: %s", table, sql_query)

        try:
            if conn is None:
                with self.engine.connect() as _conn:
                    self._apply_statement_timeout(_conn)
                    frame = pd.read_sql(sql_query, _conn)
            else:
                self._apply_statement_timeout(conn)
                frame = pd.read_sql(sql_query, conn)
        except (SQLAlchemyError, OSError, ValueError) as e:
            error_msg = f"Sampling failed for {table!r}: {e}"
            raise SamplingError(error_msg) from e

        return self._frame_to_records(frame)

    # ---- internals ---------------------------------------------------------
    @staticmethod
    def _frame_to_records(frame: pd.DataFrame) -> list[dict[str, Any]]:
        if frame.empty:
            return []
        cleaned = frame.astype(object).where(frame.notna(), None)
        return [{str(k): v for k, v in row.items()} for row in cleaned.to_dict(orient="records")]

    def _apply_statement_timeout(self, conn: Connection) -> None:
        """Apply a per-query timeout for supported dialects.

        PostgreSQL uses ``statement_timeout`` and MySQL ``MAX_EXECUTION_TIME``;
        other dialects are left untouched.
        """
        if not self.timeout_sec or self.timeout_sec <= 0:
            return
        ms = max(1, int(self.timeout_sec * 1000))
        dialect = self.engine.dialect.name
        try:
            if dialect == "postgresql":
                conn.execute(sa.text("SET statement_timeout = :ms"), {"ms": ms})
            elif dialect in {"mysql", "mariadb"}:
                conn.execute(sa.text("SET SESSION MAX_EXECUTION_TIME = :ms"), {"ms": ms})
        except SQLAlchemyError as e:
            _logger.debug("Could not apply sampling timeout: %s", e)
