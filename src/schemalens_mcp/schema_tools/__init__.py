"""Schema extraction tools for schemalens-mcp.

Reads database catalogs into immutable schema models and exposes the MCP
tool registration.

Main Components:
- SchemaExtractor: Concurrent catalog reflection with optional row sampling
- ReflectionAdapter: SQLAlchemy Inspector wrapper producing Table models
- Sampler: Bounded row sampling via SQLAlchemy Core and pandas
- Data Models: Column, IndexDef, Table, SchemaModel, Relationship, Finding
- Exceptions: Structured error handling for different failure modes

Example Usage:
    >>> import sqlalchemy as sa
    >>> from schemalens_mcp.schema_tools import ExtractionOptions, SchemaExtractor
    >>>
    >>> engine = sa.create_engine("sqlite:///app.db")
    >>> model = SchemaExtractor(engine, ExtractionOptions(max_sample_rows=3)).extract()
    >>> [t.name for t in model.tables]
"""

from .constants import Environment, FindingKind, Priority, RelationshipOrigin
from .exceptions import (
    ConfigurationError,
    ReflectionError,
    SamplingError,
    SchemaInvariantError,
    SchemaLensError,
    ScoreRangeError,
)
from .extractor import SchemaExtractor, extract_schema
from .models import (
    Column,
    DeclaredForeignKey,
    ExtractionOptions,
    Finding,
    IndexDef,
    Relationship,
    SchemaModel,
    Table,
)
from .utils import parse_environment

__all__ = [
    "Column",
    "ConfigurationError",
    "DeclaredForeignKey",
    "Environment",
    "ExtractionOptions",
    "Finding",
    "FindingKind",
    "IndexDef",
    "Priority",
    "ReflectionError",
    "Relationship",
    "RelationshipOrigin",
    "SamplingError",
    "SchemaExtractor",
    "SchemaInvariantError",
    "SchemaLensError",
    "SchemaModel",
    "ScoreRangeError",
    "Table",
    "extract_schema",
    "parse_environment",
]
