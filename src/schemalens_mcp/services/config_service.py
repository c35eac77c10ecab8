"""Configuration service for schemalens-mcp.

This module provides configuration management and database connection
utilities. It centralizes environment variable handling (per-environment
database URLs and extraction knobs) and database engine creation.
"""

from __future__ import annotations

import os

import sqlalchemy as sa
from sqlalchemy.exc import ArgumentError

from schemalens_mcp.schema_tools.constants import Constants, Environment
from schemalens_mcp.schema_tools.exceptions import ConfigurationError
from schemalens_mcp.schema_tools.models import ExtractionOptions

ENV_PREFIX = "SCHEMALENS_MCP"


class ConfigService:
    """Service for managing configuration and database connections."""

    @staticmethod
    def database_url_variable(environment: Environment) -> str:
        """Name of the environment variable holding the URL for ``environment``."""
        return f"{ENV_PREFIX}_{environment.name}_DATABASE_URL"

    @staticmethod
    def get_database_url(environment: Environment) -> str:
        """Get the database URL configured for an environment.

        Development falls back to ``SCHEMALENS_MCP_DATABASE_URL`` when its
        dedicated variable is unset.

        Returns:
            Database URL string

        Raises:
            ConfigurationError: If no URL is configured for the environment
        """
        variable = ConfigService.database_url_variable(environment)
        database_url = os.getenv(variable)
        if not database_url and environment is Environment.DEVELOPMENT:
            database_url = os.getenv(f"{ENV_PREFIX}_DATABASE_URL")
        if not database_url:
            error_msg = f"No database configured for environment '{environment.value}' ({variable})"
            raise ConfigurationError(error_msg)
        return database_url

    @staticmethod
    def configured_environments() -> list[Environment]:
        """Environments that have a database URL configured, in declaration order."""
        configured: list[Environment] = []
        for env in Environment:
            try:
                ConfigService.get_database_url(env)
            except ConfigurationError:
                continue
            configured.append(env)
        return configured

    @staticmethod
    def create_database_engine(url: str, environment: Environment | None = None) -> sa.Engine:
        """Create SQLAlchemy database engine.

        Args:
            url: Database connection URL
            environment: Environment the URL belongs to, used in error messages

        Returns:
            SQLAlchemy Engine instance

        Raises:
            ConfigurationError: If the URL cannot be parsed or its driver is not installed
        """
        try:
            return sa.create_engine(url)
        except (ArgumentError, ImportError) as e:
            target = f"environment '{environment.value}'" if environment else "engine"
            error_msg = f"Invalid database URL for {target}: {e}"
            raise ConfigurationError(error_msg) from e

    # ---- Extraction knobs ------------------------------------------------
    @staticmethod
    def fan_out() -> int:
        """Maximum number of tables reflected concurrently."""
        val = os.getenv(f"{ENV_PREFIX}_FAN_OUT", str(Constants.DEFAULT_FAN_OUT))
        try:
            n = int(val)
        except ValueError:
            n = Constants.DEFAULT_FAN_OUT
        return max(1, n)

    @staticmethod
    def sample_timeout() -> int:
        """Per-query sampling timeout in seconds."""
        val = os.getenv(f"{ENV_PREFIX}_SAMPLE_TIMEOUT", str(Constants.DEFAULT_TIMEOUT_SEC))
        try:
            n = int(val)
        except ValueError:
            n = Constants.DEFAULT_TIMEOUT_SEC
        return max(1, n)

    @staticmethod
    def extraction_options(
        *, include_samples: bool = True, max_sample_rows: int = Constants.DEFAULT_SAMPLE_ROWS
    ) -> ExtractionOptions:
        """Build extraction options from caller input plus environment knobs.

        Raises:
            ConfigurationError: If ``max_sample_rows`` is negative
        """
        return ExtractionOptions(
            include_samples=include_samples,
            max_sample_rows=max_sample_rows,
            fan_out=ConfigService.fan_out(),
            sample_timeout_sec=ConfigService.sample_timeout(),
        )
