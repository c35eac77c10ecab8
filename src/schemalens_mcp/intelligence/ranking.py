"""Finding ranking.

Attaches an Insight x Context x Execution score to every finding from a
single policy table and sorts findings strongest first.

Policy rationale per dimension:

- insight: data-integrity defects outrank performance issues, which
  outrank housekeeping
- context: the same defect matters more the closer it is to production
- execution: index changes are mechanical; key and type changes need
  data migration and review
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Final

from fastmcp.utilities.logging import get_logger

from schemalens_mcp.schema_tools.constants import Environment, FindingKind
from schemalens_mcp.schema_tools.models import Finding

from .scoring import ScoreModel

_logger = get_logger(__name__)


@dataclass(frozen=True)
class ScorePolicy:
    """Score dimensions for one finding kind."""

    insight: float
    development: float
    staging: float
    production: float
    execution: float

    def context_for(self, environment: Environment) -> float:
        return {
            Environment.DEVELOPMENT: self.development,
            Environment.STAGING: self.staging,
            Environment.PRODUCTION: self.production,
        }[environment]

    def score(self, environment: Environment) -> ScoreModel:
        return ScoreModel.create(self.insight, self.context_for(environment), self.execution)


SCORE_POLICY: Final[dict[FindingKind, ScorePolicy]] = {
    FindingKind.MISSING_PRIMARY_KEY: ScorePolicy(9, 6, 8, 10, 8),
    FindingKind.ORPHANED_FOREIGN_KEY: ScorePolicy(9, 6, 8, 10, 5),
    FindingKind.DUPLICATE_INDEX: ScorePolicy(6, 5, 6, 8, 9),
    FindingKind.NULLABLE_PRIMARY_KEY_COLUMN: ScorePolicy(8, 6, 8, 10, 6),
    FindingKind.NULLABLE_FOREIGN_KEY: ScorePolicy(6, 4, 6, 8, 7),
    FindingKind.MISSING_INDEX_ON_FK: ScorePolicy(8, 6, 8, 9, 10),
    FindingKind.REDUNDANT_INDEX: ScorePolicy(5, 4, 5, 7, 8),
    FindingKind.MISSING_TABLE: ScorePolicy(9, 5, 8, 10, 6),
    FindingKind.EXTRA_TABLE: ScorePolicy(4, 3, 5, 7, 5),
    FindingKind.MISSING_COLUMN: ScorePolicy(8, 5, 8, 10, 7),
    FindingKind.EXTRA_COLUMN: ScorePolicy(4, 3, 5, 7, 5),
    FindingKind.COLUMN_TYPE_MISMATCH: ScorePolicy(8, 5, 8, 10, 4),
    FindingKind.MISSING_INDEX: ScorePolicy(7, 4, 6, 9, 9),
    FindingKind.MISSING_FOREIGN_KEY: ScorePolicy(8, 5, 7, 9, 6),
}


def score_finding(finding: Finding, environment: Environment) -> Finding:
    return finding.with_score(SCORE_POLICY[finding.kind].score(environment))


def rank_findings(findings: Iterable[Finding], environment: Environment) -> list[Finding]:
    """Score findings for ``environment`` and sort them strongest first.

    Ties on the combined score fall back to kind order, then table, column
    and index, so ranking the same input always gives the same output.
    """
    scored = [score_finding(f, environment) for f in findings]
    scored.sort(key=lambda f: (-f.score.combined, *f.subject_key))  # type: ignore[union-attr]
    _logger.debug("Ranked %d findings for %s", len(scored), environment.value)
    return scored
