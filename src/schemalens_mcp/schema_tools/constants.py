"""Constants and enums for schema intelligence.

This module contains configuration constants, regex patterns and the
closed enumerations (environments, finding kinds, priorities, relationship
origins) shared across extraction, analysis and ranking.
"""

from __future__ import annotations

from enum import Enum
import re
from typing import Final


class Constants:
    """Configuration constants for schema extraction and analysis."""

    # Defaults
    DEFAULT_SAMPLE_ROWS: Final[int] = 5
    DEFAULT_FAN_OUT: Final[int] = 4
    DEFAULT_TIMEOUT_SEC: Final[int] = 5

    # Score bounds and priority thresholds
    SCORE_MIN: Final[float] = 0.0
    SCORE_MAX: Final[float] = 10.0
    HIGH_PRIORITY_THRESHOLD: Final[float] = 6.0
    MEDIUM_PRIORITY_THRESHOLD: Final[float] = 3.0

    # Regex patterns
    INTERNAL_TABLE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(sqlite_|_cf_)", re.IGNORECASE)
    FK_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(
        r"^(?P<stem>.+?)(?P<sep>_)?id$", re.IGNORECASE
    )

    # Large object types skipped during sampling
    LOB_TYPE_HINTS: Final[tuple[str, ...]] = (
        "blob",
        "clob",
        "bytea",
        "varbinary",
        "binary",
        "image",
        "ntext",
    )


class Environment(Enum):
    """Deployment environment a database belongs to."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


ENVIRONMENT_ALIASES: Final[dict[str, Environment]] = {
    "development": Environment.DEVELOPMENT,
    "dev": Environment.DEVELOPMENT,
    "staging": Environment.STAGING,
    "stage": Environment.STAGING,
    "production": Environment.PRODUCTION,
    "prod": Environment.PRODUCTION,
}


class Priority(Enum):
    """Priority bucket derived from a combined score."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RelationshipOrigin(Enum):
    """Where a relationship came from."""

    DECLARED = "declared"
    INFERRED = "inferred"


class FindingKind(Enum):
    """Closed set of finding kinds.

    Declaration order is the canonical emission and tie-break order.
    """

    # Integrity
    MISSING_PRIMARY_KEY = "missing-primary-key"
    ORPHANED_FOREIGN_KEY = "orphaned-foreign-key"
    DUPLICATE_INDEX = "duplicate-index"
    NULLABLE_PRIMARY_KEY_COLUMN = "nullable-primary-key-column"
    NULLABLE_FOREIGN_KEY = "nullable-foreign-key"
    # Performance
    MISSING_INDEX_ON_FK = "missing-index-on-fk"
    REDUNDANT_INDEX = "redundant-index"
    # Drift between environments
    MISSING_TABLE = "missing-table"
    EXTRA_TABLE = "extra-table"
    MISSING_COLUMN = "missing-column"
    EXTRA_COLUMN = "extra-column"
    COLUMN_TYPE_MISMATCH = "column-type-mismatch"
    MISSING_INDEX = "missing-index"
    MISSING_FOREIGN_KEY = "missing-foreign-key"

    @property
    def order(self) -> int:
        return _KIND_ORDER[self]


_KIND_ORDER: Final[dict[FindingKind, int]] = {kind: i for i, kind in enumerate(FindingKind)}
