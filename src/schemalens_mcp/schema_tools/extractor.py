"""Schema extraction.

Builds a :class:`SchemaModel` from a live database: lists user tables,
reflects each table concurrently on a bounded thread pool and, when asked,
attaches a few sample rows per table. Sampling failures degrade the
affected table only; catalog failures abort the whole extraction.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

from fastmcp.utilities.logging import get_logger
from sqlalchemy.engine import Engine
from sqlalchemy.pool import SingletonThreadPool

from .exceptions import SamplingError
from .models import ExtractionOptions, SchemaModel, Table
from .reflection import ReflectionAdapter
from .sampling import Sampler
from .utils import is_lob_type

# Logger
_logger = get_logger("schemalens.extractor")


class SchemaExtractor:
    """Extract a schema model from a database engine.

    Attributes:
        engine: SQLAlchemy engine for database connections
        options: Validated extraction options
        reflector: Catalog reflection adapter
        sampler: Row sampler, used only when sampling is enabled
    """

    def __init__(self, engine: Engine, options: ExtractionOptions | None = None) -> None:
        self.engine = engine
        self.options = options or ExtractionOptions()
        self.reflector = ReflectionAdapter(engine)
        self.sampler = Sampler(
            engine,
            per_table_rows=self.options.max_sample_rows,
            timeout_sec=self.options.sample_timeout_sec,
        )

    def extract(self) -> SchemaModel:
        """Reflect all user tables and return an immutable schema model.

        Tables are reflected concurrently but assembled in catalog order.

        Raises:
            ReflectionError: If the catalog or any table's metadata cannot be read
        """
        names = self.reflector.list_tables()
        if not names:
            return SchemaModel(tables=(), dialect=self.reflector.dialect_name)

        workers = min(self.options.fan_out, len(names))
        # SingletonThreadPool gives each thread its own connection (and its own
        # in-memory SQLite database), so such engines are read on this thread.
        if isinstance(self.engine.pool, SingletonThreadPool):
            workers = 1
        _logger.info("Extracting %d tables with %d workers", len(names), workers)
        if workers == 1:
            tables = tuple(self._extract_table(name) for name in names)
        else:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="schemalens") as pool:
                tables = tuple(pool.map(self._extract_table, names))

        degraded = sum(1 for t in tables if t.sample_degraded)
        if degraded:
            _logger.warning("Sampling degraded for %d of %d tables", degraded, len(tables))
        return SchemaModel(tables=tables, dialect=self.reflector.dialect_name)

    def _extract_table(self, name: str) -> Table:
        table = self.reflector.reflect_table(name)
        if not self.options.sampling_enabled:
            return table

        cols = [c.name for c in table.columns if not is_lob_type(c.data_type)]
        try:
            rows = self.sampler.sample_table(name, cols)
        except SamplingError as exc:
            _logger.warning("Sampling failed for %s: %s", name, exc)
            return replace(table, sample_degraded=True)
        return replace(table, sample_rows=tuple(rows))


def extract_schema(engine: Engine, options: ExtractionOptions | None = None) -> SchemaModel:
    """Convenience wrapper around :class:`SchemaExtractor`."""
    return SchemaExtractor(engine, options).extract()
