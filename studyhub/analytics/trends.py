"""Trend helpers for grade histories."""

from collections.abc import Sequence
from dataclasses import dataclass

from studyhub.analytics.correlation import linear_regression
from studyhub.analytics.descriptive import mean
from studyhub.errors import InvalidInputError

# Slope thresholds in grade points per observation
IMPROVING_SLOPE = 0.5
STRONG_SLOPE = 2.0


@dataclass(frozen=True)
class Trend:
    direction: str  # improving, declining, stable
    slope: float
    strength: str  # strong, moderate, weak


def moving_average(values: Sequence[float], window: int) -> list[float]:
    """Return the trailing moving average, one value per input.

    The first ``window - 1`` entries average over however many values exist
    so far.
    """
    if window <= 0:
        raise InvalidInputError(f"Window must be positive, got {window}")

    result: list[float] = []
    for i in range(len(values)):
        start = max(0, i - window + 1)
        result.append(mean(values[start : i + 1]))
    return result


def grade_trend(values: Sequence[float]) -> Trend:
    """Classify the direction of a grade history by its regression slope."""
    if len(values) < 2:
        return Trend(direction="stable", slope=0.0, strength="weak")

    slope = linear_regression(list(range(len(values))), values).slope

    if slope > IMPROVING_SLOPE:
        direction = "improving"
    elif slope < -IMPROVING_SLOPE:
        direction = "declining"
    else:
        direction = "stable"

    if abs(slope) > STRONG_SLOPE:
        strength = "strong"
    elif abs(slope) > IMPROVING_SLOPE:
        strength = "moderate"
    else:
        strength = "weak"

    return Trend(direction=direction, slope=slope, strength=strength)
