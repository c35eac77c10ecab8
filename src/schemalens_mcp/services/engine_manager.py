"""Engine manager for schemalens-mcp.

Provides a process-wide singleton that lazily creates and caches one
SQLAlchemy engine per environment and disposes them on server shutdown.
"""

from __future__ import annotations

import threading
from typing import ClassVar

from fastmcp.utilities.logging import get_logger
import sqlalchemy as sa

from schemalens_mcp.schema_tools.constants import Environment
from schemalens_mcp.services.config_service import ConfigService


class EngineManager:
    """Singleton cache of database engines keyed by environment.

    Engines are created on first use from the configured database URL and
    shared across tool calls; the manager never caches schema models.
    """

    _instance: ClassVar[EngineManager | None] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        """Initialize the engine manager."""
        self._engines: dict[Environment, sa.Engine] = {}
        self._engines_lock = threading.Lock()
        self._logger = get_logger(__name__)

    @classmethod
    def get_instance(cls) -> EngineManager:
        """Get the singleton instance of EngineManager.

        Returns:
            EngineManager: The singleton instance
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        with cls._lock:
            cls._instance = None

    def get_engine(self, environment: Environment) -> sa.Engine:
        """Return the engine for ``environment``, creating it on first use.

        Raises:
            ConfigurationError: If no database URL is configured for the environment
        """
        with self._engines_lock:
            engine = self._engines.get(environment)
            if engine is None:
                url = ConfigService.get_database_url(environment)
                engine = ConfigService.create_database_engine(url, environment)
                self._engines[environment] = engine
                self._logger.info(
                    "Created %s engine for %s", engine.dialect.name, environment.value
                )
            return engine

    def register_engine(self, environment: Environment, engine: sa.Engine) -> None:
        """Use an externally created engine for ``environment``."""
        with self._engines_lock:
            self._engines[environment] = engine

    def shutdown(self) -> None:
        """Dispose every cached engine."""
        with self._engines_lock:
            for environment, engine in self._engines.items():
                self._logger.info("Disposing engine for %s", environment.value)
                engine.dispose()
            self._engines.clear()
