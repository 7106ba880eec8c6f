"""Statistics used by the analytics dashboards."""

from studyhub.analytics.correlation import (
    CorrelationResult,
    analyze_correlation,
    pearson_correlation,
    significance,
    significance_level,
)
from studyhub.analytics.descriptive import (
    DescriptiveStats,
    descriptive_stats,
    mean,
    median,
    standard_deviation,
)
from studyhub.analytics.trends import Trend, grade_trend, moving_average

__all__ = [
    "CorrelationResult",
    "DescriptiveStats",
    "Trend",
    "analyze_correlation",
    "descriptive_stats",
    "grade_trend",
    "mean",
    "median",
    "moving_average",
    "pearson_correlation",
    "significance",
    "significance_level",
    "standard_deviation",
]
