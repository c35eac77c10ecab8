from __future__ import annotations

from pathlib import Path

from _pytest.monkeypatch import MonkeyPatch
import pytest

from schemalens_mcp.schema_tools.constants import Environment
from schemalens_mcp.schema_tools.exceptions import ConfigurationError
from schemalens_mcp.schema_tools.utils import parse_environment
from schemalens_mcp.services.config_service import ConfigService
from schemalens_mcp.services.engine_manager import EngineManager

URL_VARS = [
    "SCHEMALENS_MCP_DATABASE_URL",
    "SCHEMALENS_MCP_DEVELOPMENT_DATABASE_URL",
    "SCHEMALENS_MCP_STAGING_DATABASE_URL",
    "SCHEMALENS_MCP_PRODUCTION_DATABASE_URL",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: MonkeyPatch) -> None:
    for var in [*URL_VARS, "SCHEMALENS_MCP_FAN_OUT", "SCHEMALENS_MCP_SAMPLE_TIMEOUT"]:
        monkeypatch.delenv(var, raising=False)
    EngineManager.reset_instance()


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("development", Environment.DEVELOPMENT),
        ("DEV", Environment.DEVELOPMENT),
        ("Staging", Environment.STAGING),
        ("stage", Environment.STAGING),
        ("production", Environment.PRODUCTION),
        (" prod ", Environment.PRODUCTION),
        (Environment.STAGING, Environment.STAGING),
    ],
)
def test_parse_environment(raw: str, expected: Environment) -> None:
    assert parse_environment(raw) is expected


@pytest.mark.parametrize("raw", ["qa", "", "production-eu", "testing"])
def test_parse_environment_rejects_unknown(raw: str) -> None:
    with pytest.raises(ConfigurationError, match="Must be one of: development, staging"):
        parse_environment(raw)


def test_database_url_per_environment(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv("SCHEMALENS_MCP_PRODUCTION_DATABASE_URL", "sqlite:///prod.db")
    assert ConfigService.get_database_url(Environment.PRODUCTION) == "sqlite:///prod.db"
    with pytest.raises(ConfigurationError, match="staging"):
        ConfigService.get_database_url(Environment.STAGING)


def test_development_falls_back_to_generic_url(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv("SCHEMALENS_MCP_DATABASE_URL", "sqlite:///generic.db")
    assert ConfigService.get_database_url(Environment.DEVELOPMENT) == "sqlite:///generic.db"
    monkeypatch.setenv("SCHEMALENS_MCP_DEVELOPMENT_DATABASE_URL", "sqlite:///dev.db")
    assert ConfigService.get_database_url(Environment.DEVELOPMENT) == "sqlite:///dev.db"
    assert ConfigService.configured_environments() == [Environment.DEVELOPMENT]


@pytest.mark.parametrize(
    "raw,expected",
    [(None, 4), ("8", 8), ("0", 1), ("lots", 4)],
)
def test_fan_out_knob(monkeypatch: MonkeyPatch, raw: str | None, expected: int) -> None:
    if raw is not None:
        monkeypatch.setenv("SCHEMALENS_MCP_FAN_OUT", raw)
    assert ConfigService.fan_out() == expected


def test_extraction_options_validates_rows() -> None:
    opts = ConfigService.extraction_options(include_samples=True, max_sample_rows=3)
    assert opts.max_sample_rows == 3
    assert opts.sampling_enabled
    with pytest.raises(ConfigurationError):
        ConfigService.extraction_options(max_sample_rows=-2)


def test_engine_manager_caches_and_disposes(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SCHEMALENS_MCP_STAGING_DATABASE_URL", f"sqlite:///{tmp_path / 's.db'}")
    manager = EngineManager.get_instance()
    assert EngineManager.get_instance() is manager

    engine = manager.get_engine(Environment.STAGING)
    assert manager.get_engine(Environment.STAGING) is engine
    with pytest.raises(ConfigurationError):
        manager.get_engine(Environment.PRODUCTION)

    manager.shutdown()
    assert manager.get_engine(Environment.STAGING) is not engine
    manager.shutdown()


@pytest.mark.parametrize("url", ["not a url", "nosuchdialect://host/db"])
def test_invalid_database_url_is_configuration_error(monkeypatch: MonkeyPatch, url: str) -> None:
    monkeypatch.setenv("SCHEMALENS_MCP_PRODUCTION_DATABASE_URL", url)
    with pytest.raises(
        ConfigurationError, match="Invalid database URL for environment 'production'"
    ):
        EngineManager.get_instance().get_engine(Environment.PRODUCTION)
