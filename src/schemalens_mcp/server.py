"""FastMCP server implementation for schemalens-mcp."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import dotenv
from fastmcp import FastMCP
from fastmcp.utilities.logging import get_logger
from starlette.requests import Request
from starlette.responses import JSONResponse

from schemalens_mcp.schema_tools.mcp_tools import register_schema_tools
from schemalens_mcp.services.config_service import ConfigService
from schemalens_mcp.services.engine_manager import EngineManager

# Load environment variables
dotenv.load_dotenv()

# Configure a module-level logger for local server logs.
_logger = get_logger(__name__)


# -- Context Manager for engine lifecycle -----------------------------------
@asynccontextmanager
async def lifespan(_mcp_instance: FastMCP) -> AsyncGenerator[None]:
    """FastMCP lifespan context manager disposing database engines on shutdown."""
    manager = EngineManager.get_instance()
    configured = [env.value for env in ConfigService.configured_environments()]
    _logger.info("Configured environments: %s", ", ".join(configured) or "none")
    try:
        yield
    finally:
        _logger.info("Disposing database engines during lifespan shutdown")
        manager.shutdown()


# Create the main MCP server instance with lifespan
mcp = FastMCP(
    instructions=(
        "This provides a database schema intelligence Model Context Protocol "
        "server that analyzes schema structure, resolves table relationships, "
        "validates integrity and suggests ranked optimizations per environment."
    ),
    lifespan=lifespan,
)

# -- Tool Registration -------------------------------------------------------
register_schema_tools(mcp)


# -- Health Check ----------------------------------------------------------
@mcp.custom_route("/health", methods=["GET"])
async def health_check(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "healthy", "service": "schemalens-mcp"})
