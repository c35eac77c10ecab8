"""Builders package for schemalens-mcp.

This package contains builder classes responsible for constructing pydantic
response models from the immutable analysis models.
"""

from .response_builders import (
    AnalyzeSchemaResultBuilder,
    FindingsResultBuilder,
    RelationshipsResultBuilder,
    SchemaComparisonResultBuilder,
)

__all__ = [
    "AnalyzeSchemaResultBuilder",
    "FindingsResultBuilder",
    "RelationshipsResultBuilder",
    "SchemaComparisonResultBuilder",
]
