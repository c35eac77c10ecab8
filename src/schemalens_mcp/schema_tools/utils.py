"""Utility functions for schema intelligence.

Helpers shared between extraction, relationship inference and schema
comparison: environment parsing, internal-table detection, type affinity
normalisation and simple English inflection of table names.
"""

from __future__ import annotations

from .constants import ENVIRONMENT_ALIASES, Constants, Environment
from .exceptions import ConfigurationError


def parse_environment(value: str | Environment) -> Environment:
    """Parse an environment name or alias.

    Accepts ``development``/``dev``, ``staging``/``stage`` and
    ``production``/``prod`` in any letter case.

    Raises:
        ConfigurationError: If the value names no known environment
    """
    if isinstance(value, Environment):
        return value
    env = ENVIRONMENT_ALIASES.get(str(value).strip().lower())
    if env is None:
        msg = (
            f'Invalid environment: "{value}". '
            "Must be one of: development, staging, production"
        )
        raise ConfigurationError(msg)
    return env


def is_internal_table(name: str) -> bool:
    """Return True for engine bookkeeping tables (``sqlite_*``, ``_cf_*``)."""
    return bool(Constants.INTERNAL_TABLE_PATTERN.match(name))


def is_lob_type(type_str: str) -> bool:
    lowered = type_str.lower()
    return any(hint in lowered for hint in Constants.LOB_TYPE_HINTS)


def type_affinity(type_str: str) -> str:
    """Normalise a declared column type to its SQLite storage affinity.

    Follows the SQLite affinity rules: INT -> INTEGER; CHAR/CLOB/TEXT -> TEXT;
    BLOB or no type -> BLOB; REAL/FLOA/DOUB -> REAL; everything else NUMERIC.
    """
    upper = type_str.upper()
    if "INT" in upper:
        return "INTEGER"
    if any(token in upper for token in ("CHAR", "CLOB", "TEXT")):
        return "TEXT"
    if "BLOB" in upper or not upper.strip():
        return "BLOB"
    if any(token in upper for token in ("REAL", "FLOA", "DOUB")):
        return "REAL"
    return "NUMERIC"


def types_compatible(left: str, right: str) -> bool:
    """Return True when two declared types can hold the same key values.

    Unknown types (empty or ``NULL``) are compatible with anything, and
    INTEGER and NUMERIC affinities are treated as interchangeable.
    """
    if _is_unknown_type(left) or _is_unknown_type(right):
        return True
    a, b = type_affinity(left), type_affinity(right)
    if a == b:
        return True
    return {a, b} == {"INTEGER", "NUMERIC"}


def _is_unknown_type(type_str: str) -> bool:
    stripped = type_str.strip().upper()
    return stripped in {"", "NULL", "NULLTYPE"}


def singularize(word: str) -> str:
    lowered = word.lower()
    if lowered.endswith("ies") and len(word) > 3:  # noqa: PLR2004
        return word[:-3] + "y"
    if lowered.endswith(("ses", "xes", "zes", "ches", "shes")):
        return word[:-2]
    if lowered.endswith("s") and not lowered.endswith("ss"):
        return word[:-1]
    return word


def pluralize(word: str) -> str:
    lowered = word.lower()
    if lowered.endswith("y") and len(word) > 1 and lowered[-2] not in "aeiou":
        return word[:-1] + "ies"
    if lowered.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    return word + "s"


def inflections(word: str) -> set[str]:
    """Return lower-cased singular/plural variants of ``word`` (excluding itself)."""
    lowered = word.lower()
    variants = {singularize(word).lower(), pluralize(word).lower()}
    variants.discard(lowered)
    return variants
