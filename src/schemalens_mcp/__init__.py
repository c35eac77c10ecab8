"""schemalens-mcp package for database schema intelligence.

Provides Model Context Protocol (FastMCP) server capabilities for analyzing
database schemas: relationship resolution, integrity validation and ranked
optimization advice across development, staging and production.
"""

from schemalens_mcp.models import (
    AnalyzeSchemaResult,
    FindingDetail,
    FindingsResult,
    RelationshipsResult,
    SchemaComparisonResult,
)
from schemalens_mcp.services import ConfigService, EngineManager, SchemaService

__all__ = [  # noqa: RUF022
    # Core models
    "AnalyzeSchemaResult",
    "FindingDetail",
    "FindingsResult",
    "RelationshipsResult",
    "SchemaComparisonResult",
    # Services
    "ConfigService",
    "EngineManager",
    "SchemaService",
]
