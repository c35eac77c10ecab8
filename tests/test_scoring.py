from __future__ import annotations

from dataclasses import FrozenInstanceError
import math

import pytest

from schemalens_mcp.intelligence.scoring import ScoreModel, priority_for
from schemalens_mcp.schema_tools.constants import Priority
from schemalens_mcp.schema_tools.exceptions import ConfigurationError, ScoreRangeError


def test_combined_score_formula() -> None:
    score = ScoreModel.create(8, 7, 9)
    assert score.combined == pytest.approx(5.04)
    assert score.priority is Priority.MEDIUM
    assert score.is_medium_priority


@pytest.mark.parametrize(
    "dims,expected",
    [
        ((10, 10, 6), Priority.HIGH),
        ((10, 10, 10), Priority.HIGH),
        ((10, 10, 5.99), Priority.MEDIUM),
        ((10, 10, 3), Priority.MEDIUM),
        ((10, 10, 2.99), Priority.LOW),
        ((0, 10, 10), Priority.LOW),
    ],
)
def test_priority_thresholds(dims: tuple[float, float, float], expected: Priority) -> None:
    assert ScoreModel.create(*dims).priority is expected


def test_priority_for_boundaries() -> None:
    assert priority_for(6.0) is Priority.HIGH
    assert priority_for(3.0) is Priority.MEDIUM
    assert priority_for(0.0) is Priority.LOW


@pytest.mark.parametrize("bad", [-0.1, 10.01, 11, -5, math.inf, -math.inf])
def test_out_of_range_dimensions_rejected(bad: float) -> None:
    with pytest.raises(ScoreRangeError, match="between 0 and 10"):
        ScoreModel.create(bad, 5, 5)
    with pytest.raises(ScoreRangeError, match="between 0 and 10"):
        ScoreModel.create(5, bad, 5)
    with pytest.raises(ScoreRangeError, match="between 0 and 10"):
        ScoreModel.create(5, 5, bad)


def test_nan_and_non_numeric_rejected() -> None:
    with pytest.raises(ScoreRangeError):
        ScoreModel.create(math.nan, 5, 5)
    with pytest.raises(ScoreRangeError, match="must be a number"):
        ScoreModel.create("5", 5, 5)  # type: ignore[arg-type]
    with pytest.raises(ScoreRangeError, match="must be a number"):
        ScoreModel.create(True, 5, 5)


def test_score_range_error_is_configuration_and_value_error() -> None:
    with pytest.raises(ConfigurationError):
        ScoreModel.create(12, 5, 5)
    with pytest.raises(ValueError):
        ScoreModel.create(12, 5, 5)


def test_compare_and_strength() -> None:
    strong = ScoreModel.create(9, 9, 9)
    weak = ScoreModel.create(2, 2, 2)
    same = ScoreModel.create(9, 9, 9)
    assert strong.compare(weak) > 0
    assert weak.compare(strong) < 0
    assert strong.compare(same) == 0
    assert strong.is_stronger_than(weak)
    assert not strong.is_stronger_than(same)


def test_score_is_immutable() -> None:
    score = ScoreModel.create(5, 5, 5)
    with pytest.raises(FrozenInstanceError):
        score.insight = 9  # type: ignore[misc]


def test_describe_mentions_priority() -> None:
    text = ScoreModel.create(10, 10, 10).describe()
    assert "10.00" in text
    assert "high" in text


@pytest.mark.parametrize(
    "execution,high,medium,low",
    [
        (6, True, False, False),
        (5.99, False, True, False),
        (3, False, True, False),
        (2.99, False, False, True),
    ],
)
def test_priority_flags_at_boundaries(
    execution: float, high: bool, medium: bool, low: bool
) -> None:
    score = ScoreModel.create(10, 10, execution)
    assert score.is_high_priority is high
    assert score.is_medium_priority is medium
    assert score.is_low_priority is low
