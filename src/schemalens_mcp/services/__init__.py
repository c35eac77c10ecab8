"""Services package for schemalens-mcp.

This package contains service classes that handle orchestration and
configuration. Services coordinate between the schema_tools extraction
layer, the intelligence rules and the response builders.

Main Components:
- ConfigService: Configuration and database connection management
- EngineManager: Per-environment engine cache and lifecycle
- SchemaService: Schema analysis orchestration for one environment
"""

from .config_service import ConfigService
from .engine_manager import EngineManager
from .schema_service import SchemaService

__all__ = [
    "ConfigService",
    "EngineManager",
    "SchemaService",
]
