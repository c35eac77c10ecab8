"""MCP tool registration for schema intelligence features.

Exposes a `register_schema_tools` function that attaches tools to a
FastMCP instance while delegating actual logic to `SchemaService`
instances bound to engines obtained via `EngineManager`.
"""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.utilities.logging import get_logger
from pydantic import Field

from schemalens_mcp.models import (
    AnalyzeSchemaResult,
    FindingsResult,
    RelationshipsResult,
    SchemaComparisonResult,
)
from schemalens_mcp.schema_tools.exceptions import SchemaLensError
from schemalens_mcp.schema_tools.utils import parse_environment
from schemalens_mcp.services.engine_manager import EngineManager
from schemalens_mcp.services.schema_service import SchemaService

_logger = get_logger(__name__)

ENVIRONMENT_DESCRIPTION = (
    "Target environment: 'development' (or 'dev'), 'staging' (or 'stage'), "
    "'production' (or 'prod')."
)


def _tool_error(exc: Exception) -> ToolError:
    return ToolError(f"Tool execution failed: {exc}")


def register_schema_tools(mcp: FastMCP, manager: EngineManager | None = None) -> None:
    """Register schema analysis, validation and optimization tools.

    Every tool parses the environment first, so an unknown environment is
    rejected before any database access.
    """

    mgr = manager or EngineManager.get_instance()

    def _service(environment: str) -> SchemaService:
        env = parse_environment(environment)
        return SchemaService(mgr.get_engine(env), env)

    @mcp.tool
    async def analyze_database_schema(  # pyright: ignore[reportUnusedFunction]
        ctx: Context,
        environment: Annotated[str, Field(description=ENVIRONMENT_DESCRIPTION)],
        *,
        include_samples: Annotated[
            bool, Field(description="Include up to max_sample_rows sample rows per table")
        ] = True,
        max_sample_rows: Annotated[
            int, Field(ge=0, description="Maximum sample rows per table (0 disables sampling)")
        ] = 5,
    ) -> AnalyzeSchemaResult:
        """Analyze the complete database schema structure.

        Returns tables with columns, primary keys, indexes and declared foreign
        keys, the resolved relationships (declared and inferred), schema
        statistics and optional sample rows.
        """
        try:
            svc = _service(environment)
            result = await asyncio.to_thread(
                svc.analyze_schema,
                include_samples=include_samples,
                max_sample_rows=max_sample_rows,
            )
        except SchemaLensError as exc:
            await ctx.error(f"Schema analysis failed: {exc}")
            raise _tool_error(exc) from exc
        _logger.info("Analyzed %s: %d tables", result.environment, result.statistics.table_count)
        return result

    @mcp.tool
    async def get_table_relationships(  # pyright: ignore[reportUnusedFunction]
        ctx: Context,
        environment: Annotated[str, Field(description=ENVIRONMENT_DESCRIPTION)],
        table_name: Annotated[
            str | None,
            Field(description="Only return relationships where this table is source or target"),
        ] = None,
    ) -> RelationshipsResult:
        """Get declared and inferred relationships between tables.

        Also reports reference cycles, self-referential relationships and a
        parents-first population order.
        """
        try:
            svc = _service(environment)
            return await asyncio.to_thread(svc.get_relationships, table_name)
        except SchemaLensError as exc:
            await ctx.error(f"Relationship analysis failed: {exc}")
            raise _tool_error(exc) from exc

    @mcp.tool
    async def validate_database_schema(  # pyright: ignore[reportUnusedFunction]
        ctx: Context,
        environment: Annotated[str, Field(description=ENVIRONMENT_DESCRIPTION)],
    ) -> FindingsResult:
        """Validate schema integrity and return ranked findings.

        Checks for missing primary keys, orphaned foreign keys, duplicate
        indexes, nullable primary key columns and nullable foreign keys
        without ON DELETE SET NULL.
        """
        try:
            svc = _service(environment)
            return await asyncio.to_thread(svc.validate_schema)
        except SchemaLensError as exc:
            await ctx.error(f"Schema validation failed: {exc}")
            raise _tool_error(exc) from exc

    @mcp.tool
    async def suggest_schema_optimizations(  # pyright: ignore[reportUnusedFunction]
        ctx: Context,
        environment: Annotated[str, Field(description=ENVIRONMENT_DESCRIPTION)],
    ) -> FindingsResult:
        """Suggest indexing improvements ranked by impact.

        Reports relationship columns without a supporting index and indexes
        made redundant by a longer index with the same leading columns.
        """
        try:
            svc = _service(environment)
            return await asyncio.to_thread(svc.suggest_optimizations)
        except SchemaLensError as exc:
            await ctx.error(f"Optimization analysis failed: {exc}")
            raise _tool_error(exc) from exc

    @mcp.tool
    async def compare_schemas(  # pyright: ignore[reportUnusedFunction]
        ctx: Context,
        source_environment: Annotated[
            str, Field(description="Reference environment, usually 'development'")
        ],
        target_environment: Annotated[
            str, Field(description="Environment checked for drift, e.g. 'production'")
        ],
    ) -> SchemaComparisonResult:
        """Compare two environments' schemas and report drift in the target."""
        try:
            source = _service(source_environment)
            target = _service(target_environment)
            return await asyncio.to_thread(source.compare_schemas, target)
        except SchemaLensError as exc:
            await ctx.error(f"Schema comparison failed: {exc}")
            raise _tool_error(exc) from exc

    _ = (
        analyze_database_schema,
        get_table_relationships,
        validate_database_schema,
        suggest_schema_optimizations,
        compare_schemas,
    )
