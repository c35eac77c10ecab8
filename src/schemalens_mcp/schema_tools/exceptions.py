"""Custom exception hierarchy for schema intelligence.

This module defines the exceptions raised across extraction, analysis and
configuration. The hierarchy separates caller mistakes (configuration),
fatal database failures (reflection), per-table degradations (sampling) and
internal defects (schema invariants), so the protocol adapter can map each
to a meaningful message.

Exception Categories:
- Base exception for all schema intelligence errors
- Configuration errors for invalid caller input or missing settings
- Reflection errors for catalog and connectivity failures
- Sampling errors for row sampling failures
- Invariant errors for internally inconsistent schema models
"""

from __future__ import annotations


class SchemaLensError(Exception):
    """Base exception for schema intelligence operations.

    This is the root exception class for all schemalens errors.
    All other custom exceptions in this module inherit from this class.
    """


class ConfigurationError(SchemaLensError, ValueError):
    """Raised when caller input or configuration is invalid.

    This exception is raised before any database access, such as when:
    - The environment name is not recognised
    - No database URL is configured for the requested environment
    - Extraction options are out of range (negative row counts)
    """


class ScoreRangeError(ConfigurationError):
    """Raised when a score dimension is not a finite number in [0, 10]."""


class ReflectionError(SchemaLensError):
    """Raised when database schema reflection fails.

    This exception aborts the whole call, such as when:
    - Database connection fails
    - Catalog or table metadata cannot be read
    - SQL dialect specific reflection issues occur
    """


class SamplingError(SchemaLensError):
    """Raised when table sampling operations fail.

    The extractor absorbs this error for the affected table and marks the
    table's samples as degraded instead of failing the call.
    """


class SchemaInvariantError(SchemaLensError):
    """Raised when a schema model violates its structural invariants.

    Indicates an internal defect, for example duplicate table or column
    names, or a foreign key whose local column does not exist.
    """
