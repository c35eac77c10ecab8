"""Schema intelligence rules for schemalens-mcp.

Pure functions over schema models: relationship resolution, dependency
graph analysis, integrity validation, optimization advice, drift
comparison and Insight x Context x Execution ranking.
"""

from .comparison import compare_schemas
from .graph import DependencyGraph
from .optimization import suggest_optimizations
from .ranking import rank_findings
from .relationships import resolve_relationships
from .scoring import ScoreModel
from .validation import validate_schema

__all__ = [
    "DependencyGraph",
    "ScoreModel",
    "compare_schemas",
    "rank_findings",
    "resolve_relationships",
    "suggest_optimizations",
    "validate_schema",
]
