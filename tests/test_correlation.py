"""Tests for correlation, significance testing, regression and trends."""

import math

import pytest

from studyhub.analytics.correlation import (
    CRITICAL_R_TABLE,
    HIGHLY_SIGNIFICANT,
    NOT_SIGNIFICANT,
    SIGNIFICANT,
    analyze_correlation,
    correlation_matrix,
    correlation_strength,
    critical_values,
    linear_regression,
    p_value,
    pearson_correlation,
    significance,
    significance_level,
)
from studyhub.analytics.trends import grade_trend, moving_average
from studyhub.errors import (
    DegenerateInputError,
    InsufficientDataError,
    InvalidInputError,
    LengthMismatchError,
)

MOOD = [3.0, 4.0, 2.0, 5.0, 4.0, 3.0, 5.0, 1.0]
GRADES = [78.0, 85.0, 70.0, 93.0, 88.0, 80.0, 95.0, 62.0]


class TestPearson:
    def test_perfect_positive(self) -> None:
        assert pearson_correlation([1, 2, 3, 4], [2, 4, 6, 8]) == pytest.approx(1.0)

    def test_perfect_negative(self) -> None:
        assert pearson_correlation([1, 2, 3, 4], [8, 6, 4, 2]) == pytest.approx(-1.0)

    def test_self_correlation_is_one(self) -> None:
        assert pearson_correlation(GRADES, GRADES) == pytest.approx(1.0)

    def test_symmetry(self) -> None:
        assert pearson_correlation(MOOD, GRADES) == pearson_correlation(GRADES, MOOD)

    def test_bounded(self) -> None:
        r = pearson_correlation(MOOD, GRADES)
        assert -1 <= r <= 1
        assert r > 0.9

    def test_known_value(self) -> None:
        # Deviations give sum(dx*dy) = 8 over sqrt(10 * 10)
        assert pearson_correlation([1, 2, 3, 4, 5], [2, 1, 4, 3, 5]) == pytest.approx(0.8)

    def test_length_mismatch(self) -> None:
        with pytest.raises(LengthMismatchError):
            pearson_correlation([1, 2, 3], [1, 2])

    def test_length_mismatch_is_invalid_input(self) -> None:
        with pytest.raises(InvalidInputError):
            pearson_correlation([1, 2, 3], [1, 2])

    def test_single_point(self) -> None:
        with pytest.raises(InsufficientDataError):
            pearson_correlation([1], [2])

    def test_zero_variance_is_degenerate(self) -> None:
        with pytest.raises(DegenerateInputError):
            pearson_correlation([5, 5, 5], [1, 2, 3])
        with pytest.raises(DegenerateInputError):
            pearson_correlation([1, 2, 3], [7, 7, 7])

    @pytest.mark.parametrize("constant", [[0.1] * 3, [2.675] * 3])
    def test_constant_float_series_is_degenerate(self, constant: list[float]) -> None:
        with pytest.raises(DegenerateInputError):
            pearson_correlation(constant, [1, 2, 3])
        with pytest.raises(DegenerateInputError):
            pearson_correlation([1, 2, 3], constant)

    def test_strength_labels(self) -> None:
        assert correlation_strength(-0.95) == "very strong"
        assert correlation_strength(0.75) == "strong"
        assert correlation_strength(0.5) == "moderate"
        assert correlation_strength(0.3) == "weak"
        assert correlation_strength(0.1) == "very weak"


class TestSignificance:
    def test_t_statistic(self) -> None:
        # r = 0.6, n = 12 -> t = 0.6 * sqrt(10 / 0.64) = 2.371708...
        assert significance(0.6, 12) == pytest.approx(0.6 * math.sqrt(10 / 0.64))

    def test_t_statistic_sign_follows_r(self) -> None:
        assert significance(-0.6, 12) == pytest.approx(-significance(0.6, 12))

    def test_perfect_correlation_is_infinite(self) -> None:
        assert significance(1.0, 10) == math.inf
        assert significance(-1.0, 10) == -math.inf

    def test_requires_three_points(self) -> None:
        with pytest.raises(InsufficientDataError):
            significance(0.5, 2)

    def test_rejects_out_of_range_r(self) -> None:
        with pytest.raises(InvalidInputError):
            significance(1.2, 10)

    def test_levels(self) -> None:
        # df = 10: critical r is 0.576 at 0.05 and 0.708 at 0.01
        assert significance_level(0.5, 12) == NOT_SIGNIFICANT
        assert significance_level(0.6, 12) == SIGNIFICANT
        assert significance_level(-0.8, 12) == HIGHLY_SIGNIFICANT

    def test_level_uses_nearest_lower_row(self) -> None:
        # df = 22 falls back to the df = 20 row
        assert critical_values(22) == CRITICAL_R_TABLE[20]
        assert critical_values(5000) == CRITICAL_R_TABLE[1000]

    def test_table_is_monotonic(self) -> None:
        rows = [CRITICAL_R_TABLE[df] for df in sorted(CRITICAL_R_TABLE)]
        for (prev_05, prev_01), (next_05, next_01) in zip(rows, rows[1:]):
            assert next_05 < prev_05
            assert next_01 <= prev_01
        for crit_05, crit_01 in rows:
            assert crit_05 < crit_01

    def test_p_value_matches_table(self) -> None:
        # A coefficient at the tabulated 0.05 critical value has p close to 0.05
        crit_05, crit_01 = CRITICAL_R_TABLE[10]
        assert p_value(crit_05, 12) == pytest.approx(0.05, abs=0.002)
        assert p_value(crit_01, 12) == pytest.approx(0.01, abs=0.001)

    def test_p_value_edges(self) -> None:
        assert p_value(0.0, 20) == pytest.approx(1.0)
        assert p_value(1.0, 20) == 0.0

    def test_p_value_decreases_with_strength(self) -> None:
        assert p_value(0.2, 30) > p_value(0.4, 30) > p_value(0.6, 30)


class TestAnalyzeCorrelation:
    def test_full_result(self) -> None:
        result = analyze_correlation(MOOD, GRADES)
        assert result.n == 8
        assert result.direction == "positive"
        assert result.significance == HIGHLY_SIGNIFICANT
        assert result.p_value is not None and result.p_value < 0.01
        assert result.description.startswith("very strong positive correlation")

    def test_two_points_has_no_test(self) -> None:
        result = analyze_correlation([1, 2], [3, 1])
        assert result.r == pytest.approx(-1.0)
        assert result.t_statistic is None
        assert result.p_value is None
        assert result.significance == NOT_SIGNIFICANT
        assert "p = n/a" in result.description


class TestRegression:
    def test_exact_line(self) -> None:
        result = linear_regression([1, 2, 3], [5, 7, 9])
        assert result.slope == pytest.approx(2.0)
        assert result.intercept == pytest.approx(3.0)
        assert result.r_squared == pytest.approx(1.0)
        assert result.predictions == pytest.approx([5, 7, 9])

    def test_flat_y(self) -> None:
        result = linear_regression([1, 2, 3], [4, 4, 4])
        assert result.slope == 0
        assert result.r_squared == 1.0

    def test_vertical_x_is_degenerate(self) -> None:
        with pytest.raises(DegenerateInputError):
            linear_regression([2, 2, 2], [1, 2, 3])

    def test_constant_float_series(self) -> None:
        with pytest.raises(DegenerateInputError):
            linear_regression([0.1] * 3, [1, 2, 3])
        result = linear_regression([1, 2, 3], [2.675] * 3)
        assert result.slope == 0
        assert result.intercept == 2.675
        assert result.r_squared == 1.0

    def test_r_squared_matches_pearson(self) -> None:
        r = pearson_correlation(MOOD, GRADES)
        assert linear_regression(MOOD, GRADES).r_squared == pytest.approx(r * r)


class TestCorrelationMatrix:
    def test_matrix(self) -> None:
        result = correlation_matrix(
            {"mood": MOOD, "grade": GRADES, "constant": [1.0] * len(MOOD)}
        )
        assert result.variables == ["mood", "grade", "constant"]
        assert result.matrix[0][0] == 1.0
        assert result.matrix[0][1] == result.matrix[1][0]
        assert result.matrix[0][1] == pytest.approx(pearson_correlation(MOOD, GRADES))
        # Undefined pairs are reported as missing, not as zero
        assert result.matrix[0][2] is None
        assert result.matrix[2][1] is None

    def test_constant_float_series_is_missing(self) -> None:
        result = correlation_matrix({"grade": GRADES, "flat": [0.1] * len(GRADES)})
        assert result.matrix[0][1] is None


class TestTrends:
    def test_moving_average(self) -> None:
        assert moving_average([2, 4, 6, 8], 2) == [2, 3, 5, 7]
        assert moving_average([], 3) == []

    def test_moving_average_rejects_bad_window(self) -> None:
        with pytest.raises(InvalidInputError):
            moving_average([1, 2], 0)

    def test_improving(self) -> None:
        trend = grade_trend([70, 74, 79, 85])
        assert trend.direction == "improving"
        assert trend.strength == "strong"

    def test_declining(self) -> None:
        trend = grade_trend([90, 89, 88, 87])
        assert trend.direction == "declining"
        assert trend.strength == "moderate"

    def test_stable_and_short(self) -> None:
        assert grade_trend([80, 80.2, 80.1]).direction == "stable"
        short = grade_trend([80])
        assert (short.direction, short.slope, short.strength) == ("stable", 0.0, "weak")
