from __future__ import annotations

import asyncio
import json
from pathlib import Path

from _pytest.monkeypatch import MonkeyPatch
from fastmcp import Client, FastMCP
from fastmcp.exceptions import ToolError
import pytest
import sqlalchemy as sa
from sqlalchemy import text
from starlette.requests import Request

from schemalens_mcp.schema_tools.constants import Environment
from schemalens_mcp.schema_tools.mcp_tools import register_schema_tools
from schemalens_mcp.server import health_check
from schemalens_mcp.services.engine_manager import EngineManager


def _mk_server(tmp_path: Path) -> FastMCP:
    engine = sa.create_engine(f"sqlite+pysqlite:///{tmp_path / 'dev.db'}")
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE logs (id INTEGER, message TEXT)"))
    manager = EngineManager()
    manager.register_engine(Environment.DEVELOPMENT, engine)
    mcp = FastMCP("schemalens-test")
    register_schema_tools(mcp, manager=manager)
    return mcp


def test_tools_are_registered(tmp_path: Path) -> None:
    async def _names() -> set[str]:
        async with Client(_mk_server(tmp_path)) as client:
            return {tool.name for tool in await client.list_tools()}

    assert asyncio.run(_names()) == {
        "analyze_database_schema",
        "get_table_relationships",
        "validate_database_schema",
        "suggest_schema_optimizations",
        "compare_schemas",
    }


def test_validate_tool_returns_ranked_findings(tmp_path: Path) -> None:
    async def _call() -> dict:
        async with Client(_mk_server(tmp_path)) as client:
            result = await client.call_tool("validate_database_schema", {"environment": "dev"})
            return result.structured_content or {}

    payload = asyncio.run(_call())
    assert payload["environment"] == "development"
    assert payload["finding_count"] == 1
    assert payload["findings"][0]["kind"] == "missing-primary-key"


def test_unknown_environment_is_tool_error(tmp_path: Path) -> None:
    async def _call() -> None:
        async with Client(_mk_server(tmp_path)) as client:
            await client.call_tool("validate_database_schema", {"environment": "qa"})

    with pytest.raises(ToolError, match="Tool execution failed: Invalid environment"):
        asyncio.run(_call())


def test_unconfigured_environment_is_tool_error(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    monkeypatch.delenv("SCHEMALENS_MCP_PRODUCTION_DATABASE_URL", raising=False)

    async def _call() -> None:
        async with Client(_mk_server(tmp_path)) as client:
            await client.call_tool("suggest_schema_optimizations", {"environment": "prod"})

    with pytest.raises(ToolError, match="No database configured"):
        asyncio.run(_call())


def test_malformed_database_url_is_tool_error(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv("SCHEMALENS_MCP_STAGING_DATABASE_URL", "not a url")

    async def _call() -> None:
        async with Client(_mk_server(tmp_path)) as client:
            await client.call_tool("validate_database_schema", {"environment": "staging"})

    with pytest.raises(
        ToolError, match="Tool execution failed: Invalid database URL for environment 'staging'"
    ):
        asyncio.run(_call())


def test_health_check_payload() -> None:
    response = asyncio.run(health_check(Request({"type": "http"})))
    assert response.status_code == 200
    assert json.loads(response.body) == {"status": "healthy", "service": "schemalens-mcp"}
