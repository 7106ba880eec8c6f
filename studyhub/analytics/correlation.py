"""Correlation and regression analysis.

Pearson correlation between two index-aligned series, significance testing
of the coefficient and simple linear regression. Used by the admin
analytics views to relate grades to sentiment and engagement.

Key concepts:
- r: Pearson correlation coefficient in [-1, 1], computed from population
  covariance and population standard deviations.
- t: test statistic r * sqrt((n - 2) / (1 - r^2)) with n - 2 degrees of freedom.
- Significance level: looked up against a fixed table of two-tailed critical
  values of |r|, never inferred per call.
"""

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from studyhub.analytics.descriptive import mean, standard_deviation
from studyhub.errors import (
    DegenerateInputError,
    InsufficientDataError,
    InvalidInputError,
    LengthMismatchError,
    StudyHubError,
)

logger = logging.getLogger(__name__)

NOT_SIGNIFICANT = "not significant"
SIGNIFICANT = "significant"
HIGHLY_SIGNIFICANT = "highly significant"

# Two-tailed critical values of |r|: df -> (alpha 0.05, alpha 0.01)
CRITICAL_R_TABLE: dict[int, tuple[float, float]] = {
    1: (0.997, 1.000),
    2: (0.950, 0.990),
    3: (0.878, 0.959),
    4: (0.811, 0.917),
    5: (0.754, 0.875),
    6: (0.707, 0.834),
    7: (0.666, 0.798),
    8: (0.632, 0.765),
    9: (0.602, 0.735),
    10: (0.576, 0.708),
    11: (0.553, 0.684),
    12: (0.532, 0.661),
    13: (0.514, 0.641),
    14: (0.497, 0.623),
    15: (0.482, 0.606),
    16: (0.468, 0.590),
    17: (0.456, 0.575),
    18: (0.444, 0.561),
    19: (0.433, 0.549),
    20: (0.423, 0.537),
    25: (0.381, 0.487),
    30: (0.349, 0.449),
    35: (0.325, 0.418),
    40: (0.304, 0.393),
    45: (0.288, 0.372),
    50: (0.273, 0.354),
    60: (0.250, 0.325),
    70: (0.232, 0.302),
    80: (0.217, 0.283),
    90: (0.205, 0.267),
    100: (0.195, 0.254),
    200: (0.138, 0.181),
    300: (0.113, 0.148),
    400: (0.098, 0.128),
    500: (0.088, 0.115),
    1000: (0.062, 0.081),
}

# Continued fraction settings for the incomplete beta function
_BETA_MAX_ITERATIONS = 200
_BETA_EPSILON = 3e-16
_BETA_FPMIN = 1e-300


@dataclass(frozen=True)
class CorrelationResult:
    """A correlation coefficient with its significance metadata."""

    r: float
    n: int
    t_statistic: float | None  # None when n < 3
    p_value: float | None  # None when n < 3
    significance: str
    strength: str
    direction: str  # positive, negative, none
    description: str


@dataclass(frozen=True)
class RegressionResult:
    """Least-squares fit of y = slope * x + intercept."""

    slope: float
    intercept: float
    r_squared: float
    predictions: list[float]


@dataclass(frozen=True)
class CorrelationMatrix:
    variables: list[str]
    matrix: list[list[float | None]]  # None where r is undefined


def _check_pair(x: Sequence[float], y: Sequence[float]) -> int:
    if len(x) != len(y):
        raise LengthMismatchError(
            f"Series must be of equal length (got {len(x)} and {len(y)})"
        )
    n = len(x)
    if n < 2:
        raise InsufficientDataError(f"Need at least 2 data points, got {n}")
    return n


def _check_coefficient(r: float, n: int) -> None:
    if abs(r) > 1:
        raise InvalidInputError(f"Correlation coefficient must be in [-1, 1], got {r}")
    if n < 3:
        raise InsufficientDataError(f"Significance needs at least 3 data points, got {n}")


# --- Pearson correlation ---


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Calculate the Pearson correlation coefficient of two series.

    Args:
        x: First series.
        y: Second series, index-aligned with ``x``.

    Returns:
        r in [-1, 1].

    Raises:
        LengthMismatchError: The series differ in length.
        InsufficientDataError: Fewer than 2 points.
        DegenerateInputError: Either series has zero variance.
    """
    n = _check_pair(x, y)

    sd_x = standard_deviation(x)
    sd_y = standard_deviation(y)
    if sd_x == 0 or sd_y == 0:
        raise DegenerateInputError("Correlation is undefined for a series with zero variance")

    mean_x = mean(x)
    mean_y = mean(y)
    covariance = math.fsum((xi - mean_x) * (yi - mean_y) for xi, yi in zip(x, y)) / n

    r = covariance / (sd_x * sd_y)
    return max(-1.0, min(1.0, r))


def correlation_strength(r: float) -> str:
    strength = abs(r)
    if strength >= 0.9:
        return "very strong"
    if strength >= 0.7:
        return "strong"
    if strength >= 0.5:
        return "moderate"
    if strength >= 0.3:
        return "weak"
    return "very weak"


# --- Significance testing ---


def significance(r: float, n: int) -> float:
    """Return the t statistic for H0: true correlation = 0.

    A perfect correlation has an infinite statistic carrying the sign of r.
    """
    _check_coefficient(r, n)
    if abs(r) == 1:
        return math.copysign(math.inf, r)
    return r * math.sqrt((n - 2) / (1 - r * r))


def critical_values(df: int) -> tuple[float, float]:
    """Return the tabulated (alpha 0.05, alpha 0.01) critical |r| for ``df``.

    Degrees of freedom between table rows use the nearest row below, which
    demands a slightly stronger correlation than the exact value would.
    """
    if df < 1:
        raise InsufficientDataError(f"Need at least 1 degree of freedom, got {df}")
    row = max(key for key in CRITICAL_R_TABLE if key <= df)
    return CRITICAL_R_TABLE[row]


def significance_level(r: float, n: int) -> str:
    """Categorize r as not significant, significant or highly significant."""
    _check_coefficient(r, n)
    crit_05, crit_01 = critical_values(n - 2)
    if abs(r) >= crit_01:
        return HIGHLY_SIGNIFICANT
    if abs(r) >= crit_05:
        return SIGNIFICANT
    return NOT_SIGNIFICANT


def p_value(r: float, n: int) -> float:
    """Return the two-tailed p-value of r from the Student t distribution."""
    _check_coefficient(r, n)
    if abs(r) == 1:
        return 0.0

    t = significance(r, n)
    df = n - 2
    x = df / (df + t * t)
    return min(1.0, max(0.0, _regularized_incomplete_beta(df / 2, 0.5, x)))


def _regularized_incomplete_beta(a: float, b: float, x: float) -> float:
    """Evaluate I_x(a, b) via its continued fraction expansion."""
    if x <= 0:
        return 0.0
    if x >= 1:
        return 1.0

    log_front = (
        math.lgamma(a + b)
        - math.lgamma(a)
        - math.lgamma(b)
        + a * math.log(x)
        + b * math.log(1 - x)
    )
    front = math.exp(log_front)

    # The fraction converges quickly only on this side of the mean
    if x < (a + 1) / (a + b + 2):
        return front * _beta_continued_fraction(a, b, x) / a
    return 1 - front * _beta_continued_fraction(b, a, 1 - x) / b


def _beta_continued_fraction(a: float, b: float, x: float) -> float:
    """Modified Lentz evaluation of the incomplete beta continued fraction."""
    qab = a + b
    qap = a + 1
    qam = a - 1
    c = 1.0
    d = 1 - qab * x / qap
    if abs(d) < _BETA_FPMIN:
        d = _BETA_FPMIN
    d = 1 / d
    h = d

    for m in range(1, _BETA_MAX_ITERATIONS + 1):
        m2 = 2 * m

        # Even step
        aa = m * (b - m) * x / ((qam + m2) * (a + m2))
        d = 1 + aa * d
        if abs(d) < _BETA_FPMIN:
            d = _BETA_FPMIN
        c = 1 + aa / c
        if abs(c) < _BETA_FPMIN:
            c = _BETA_FPMIN
        d = 1 / d
        h *= d * c

        # Odd step
        aa = -(a + m) * (qab + m) * x / ((a + m2) * (qap + m2))
        d = 1 + aa * d
        if abs(d) < _BETA_FPMIN:
            d = _BETA_FPMIN
        c = 1 + aa / c
        if abs(c) < _BETA_FPMIN:
            c = _BETA_FPMIN
        d = 1 / d
        delta = d * c
        h *= delta

        if abs(delta - 1) < _BETA_EPSILON:
            break
    else:
        logger.debug("Incomplete beta did not converge for a=%s b=%s x=%s", a, b, x)

    return h


def analyze_correlation(x: Sequence[float], y: Sequence[float]) -> CorrelationResult:
    """Calculate r together with significance, strength and a description."""
    r = pearson_correlation(x, y)
    n = len(x)

    if n >= 3:
        t_statistic: float | None = significance(r, n)
        p: float | None = p_value(r, n)
        level = significance_level(r, n)
    else:
        t_statistic = None
        p = None
        level = NOT_SIGNIFICANT

    if r > 0:
        direction = "positive"
    elif r < 0:
        direction = "negative"
    else:
        direction = "none"

    strength = correlation_strength(r)
    p_text = f"{p:.4f}" if p is not None else "n/a"
    description = f"{strength} {direction} correlation (r = {r:.3f}, p = {p_text}, n = {n})"

    return CorrelationResult(
        r=r,
        n=n,
        t_statistic=t_statistic,
        p_value=p,
        significance=level,
        strength=strength,
        direction=direction,
        description=description,
    )


# --- Regression ---


def linear_regression(x: Sequence[float], y: Sequence[float]) -> RegressionResult:
    """Fit y = slope * x + intercept by ordinary least squares.

    Raises:
        LengthMismatchError: The series differ in length.
        InsufficientDataError: Fewer than 2 points.
        DegenerateInputError: ``x`` has zero variance (vertical line).
    """
    _check_pair(x, y)
    if max(x) == min(x):
        raise DegenerateInputError("Regression is undefined when x has zero variance")

    mean_x = mean(x)
    mean_y = mean(y)

    sxy = math.fsum((xi - mean_x) * (yi - mean_y) for xi, yi in zip(x, y))
    sxx = math.fsum((xi - mean_x) ** 2 for xi in x)

    flat_y = max(y) == min(y)
    if flat_y:
        # Flat line through the constant y, fitted exactly
        slope = 0.0
        intercept = y[0]
    else:
        slope = sxy / sxx
        intercept = mean_y - slope * mean_x
    predictions = [slope * xi + intercept for xi in x]

    ss_res = math.fsum((yi - pi) ** 2 for yi, pi in zip(y, predictions))
    ss_tot = math.fsum((yi - mean_y) ** 2 for yi in y)
    r_squared = 1.0 if flat_y else 1 - ss_res / ss_tot

    return RegressionResult(
        slope=slope,
        intercept=intercept,
        r_squared=r_squared,
        predictions=predictions,
    )


def correlation_matrix(series: Mapping[str, Sequence[float]]) -> CorrelationMatrix:
    """Compute pairwise Pearson r for several named series.

    Pairs whose coefficient is undefined hold ``None`` rather than 0.
    """
    variables = list(series)
    size = len(variables)
    matrix: list[list[float | None]] = [[None] * size for _ in range(size)]

    for i in range(size):
        matrix[i][i] = 1.0
        for j in range(i + 1, size):
            try:
                r: float | None = pearson_correlation(series[variables[i]], series[variables[j]])
            except StudyHubError as exc:
                logger.debug(
                    "No correlation for %s/%s: %s", variables[i], variables[j], exc
                )
                r = None
            matrix[i][j] = r
            matrix[j][i] = r

    return CorrelationMatrix(variables=variables, matrix=matrix)
