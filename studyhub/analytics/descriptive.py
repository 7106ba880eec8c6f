"""Descriptive statistics for grade and sentiment samples.

Central tendency, dispersion and distribution shape for a sample of
numbers. Standard deviation and variance use the population form (divide
by n) unless ``sample=True`` is passed, which keeps them consistent with the
correlation engine.

An empty sample is never silently summarized: every statistic that needs at
least one value raises ``EmptyInputError``.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from studyhub.errors import EmptyInputError, InvalidInputError


@dataclass(frozen=True)
class DescriptiveStats:
    """Summary of a numeric sample."""

    count: int
    mean: float
    median: float
    mode: float
    std_dev: float  # Population standard deviation
    variance: float  # Population variance
    min: float
    max: float
    range: float


@dataclass(frozen=True)
class Quartiles:
    q1: float
    q2: float
    q3: float


def _require_values(values: Sequence[float]) -> None:
    if len(values) == 0:
        raise EmptyInputError("Sample must contain at least one value")


# --- Central tendency ---


def mean(values: Sequence[float]) -> float:
    """Return the arithmetic mean of a non-empty sample."""
    _require_values(values)
    return math.fsum(values) / len(values)


def median(values: Sequence[float]) -> float:
    """Return the median of a non-empty sample.

    Values are sorted numerically; an even count averages the two middle
    values.
    """
    _require_values(values)
    ordered = sorted(values)
    mid = len(ordered) // 2

    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2

    return ordered[mid]


def mode(values: Sequence[float]) -> float:
    """Return the most frequent value.

    When several values share the top frequency, the one that reached it
    first while scanning the input wins.
    """
    _require_values(values)
    frequency: dict[float, int] = {}
    best = values[0]
    best_count = 0

    for value in values:
        frequency[value] = frequency.get(value, 0) + 1
        if frequency[value] > best_count:
            best_count = frequency[value]
            best = value

    return best


# --- Dispersion ---


def variance(values: Sequence[float], *, sample: bool = False) -> float:
    """Return the variance of a non-empty sample.

    Args:
        values: The sample.
        sample: Use the n-1 divisor instead of n.

    Returns:
        The variance. A single value or a constant sample has variance
        exactly 0 under both forms.
    """
    _require_values(values)
    n = len(values)
    # The mean of identical floats can miss the value by an ulp
    if n == 1 or max(values) == min(values):
        return 0.0

    avg = mean(values)
    squared = math.fsum((value - avg) ** 2 for value in values)
    divisor = n - 1 if sample else n
    return squared / divisor


def standard_deviation(values: Sequence[float], *, sample: bool = False) -> float:
    """Return the (population, by default) standard deviation."""
    return math.sqrt(variance(values, sample=sample))


def value_range(values: Sequence[float]) -> float:
    """Return max - min."""
    _require_values(values)
    return max(values) - min(values)


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Return the standard deviation relative to the mean, as a percentage.

    A zero mean has no meaningful relative spread, so 0 is returned.
    """
    avg = mean(values)
    if avg == 0:
        return 0.0
    return standard_deviation(values) / abs(avg) * 100


# --- Percentiles ---


def percentile(values: Sequence[float], p: float) -> float:
    """Return the value at percentile ``p`` using linear interpolation.

    Args:
        values: The sample.
        p: Percentile between 0 and 100 inclusive.
    """
    _require_values(values)
    if p < 0 or p > 100:
        raise InvalidInputError(f"Percentile must be between 0 and 100, got {p}")

    ordered = sorted(values)
    index = p / 100 * (len(ordered) - 1)
    lower = math.floor(index)
    upper = math.ceil(index)

    if lower == upper:
        return ordered[lower]

    fraction = index - lower
    return ordered[lower] * (1 - fraction) + ordered[upper] * fraction


def quartiles(values: Sequence[float]) -> Quartiles:
    return Quartiles(
        q1=percentile(values, 25),
        q2=percentile(values, 50),
        q3=percentile(values, 75),
    )


def interquartile_range(values: Sequence[float]) -> float:
    q = quartiles(values)
    return q.q3 - q.q1


# --- Distribution shape ---


def skewness(values: Sequence[float]) -> float:
    """Return the adjusted Fisher-Pearson skewness.

    Positive skew means a longer right tail. Fewer than 3 values or a
    constant sample yields 0.
    """
    n = len(values)
    if n < 3:
        return 0.0

    avg = mean(values)
    sd = standard_deviation(values, sample=True)
    if sd == 0:
        return 0.0

    cubed = math.fsum(((value - avg) / sd) ** 3 for value in values)
    return n / ((n - 1) * (n - 2)) * cubed


def kurtosis(values: Sequence[float]) -> float:
    """Return the excess kurtosis (0 for a normal distribution).

    Fewer than 4 values or a constant sample yields 0.
    """
    n = len(values)
    if n < 4:
        return 0.0

    avg = mean(values)
    sd = standard_deviation(values, sample=True)
    if sd == 0:
        return 0.0

    fourth = math.fsum(((value - avg) / sd) ** 4 for value in values)
    raw = n * (n + 1) / ((n - 1) * (n - 2) * (n - 3)) * fourth
    adjustment = 3 * (n - 1) ** 2 / ((n - 2) * (n - 3))
    return raw - adjustment


# --- Standardization ---


def z_score(value: float, values: Sequence[float]) -> float:
    """Return how many standard deviations ``value`` lies from the sample mean."""
    sd = standard_deviation(values)
    if sd == 0:
        return 0.0
    return (value - mean(values)) / sd


def standardize(values: Sequence[float]) -> list[float]:
    if len(values) == 0:
        return []
    avg = mean(values)
    sd = standard_deviation(values)
    if sd == 0:
        return [0.0 for _ in values]
    return [(value - avg) / sd for value in values]


def normalize(values: Sequence[float]) -> list[float]:
    """Scale values to [0, 1]; a constant sample maps to 0.5."""
    if len(values) == 0:
        return []
    low = min(values)
    spread = max(values) - low
    if spread == 0:
        return [0.5 for _ in values]
    return [(value - low) / spread for value in values]


# --- Outliers ---


def outliers_iqr(values: Sequence[float], multiplier: float = 1.5) -> list[float]:
    """Return values outside ``[q1 - m*IQR, q3 + m*IQR]``, in input order.

    Samples with fewer than 4 values have no meaningful quartiles and
    report no outliers.
    """
    if len(values) < 4:
        return []

    q = quartiles(values)
    iqr = q.q3 - q.q1
    lower = q.q1 - multiplier * iqr
    upper = q.q3 + multiplier * iqr
    return [value for value in values if value < lower or value > upper]


def outliers_zscore(values: Sequence[float], threshold: float = 3.0) -> list[float]:
    """Return values whose absolute z-score exceeds ``threshold``."""
    if len(values) == 0:
        return []

    avg = mean(values)
    sd = standard_deviation(values)
    if sd == 0:
        return []
    return [value for value in values if abs((value - avg) / sd) > threshold]


# --- Summary ---


def descriptive_stats(values: Sequence[float]) -> DescriptiveStats:
    """Compute the full summary for a non-empty sample."""
    _require_values(values)
    low = min(values)
    high = max(values)

    return DescriptiveStats(
        count=len(values),
        mean=mean(values),
        median=median(values),
        mode=mode(values),
        std_dev=standard_deviation(values),
        variance=variance(values),
        min=low,
        max=high,
        range=high - low,
    )


def format_descriptive_stats(stats: DescriptiveStats) -> str:
    return "\n".join(
        [
            f"Mean: {stats.mean:.2f}",
            f"Median: {stats.median:.2f}",
            f"Mode: {stats.mode:.2f}",
            f"Std Dev: {stats.std_dev:.2f}",
            f"Variance: {stats.variance:.2f}",
            f"Min: {stats.min:.2f}",
            f"Max: {stats.max:.2f}",
            f"Range: {stats.range:.2f}",
            f"Count: {stats.count}",
        ]
    )
