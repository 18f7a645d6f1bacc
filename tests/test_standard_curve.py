"""
Tests for standard-curve efficiency estimation and quality classification.
"""

import math

import pytest

from relquant.exceptions import InvalidDilutionSeries, ZeroSlopeRegression
from relquant.standard_curve import (
    StandardCurveCalculator,
    classify_efficiency,
    classify_r_squared,
    dilution_points,
    fit_standard_curve,
    worst_status,
)

IDEAL_SLOPE = -3.32193


def _ideal_series(n=5, start=15.0, slope=IDEAL_SLOPE, factor=10):
    # x_i = -i * log10(factor), Ct = start + slope * x_i
    return [start - slope * i * math.log10(factor) for i in range(n)]


class TestFitStandardCurve:
    def test_ideal_tenfold_series(self):
        result = fit_standard_curve(_ideal_series(), 10)

        assert result.slope == pytest.approx(IDEAL_SLOPE)
        assert result.intercept == pytest.approx(15.0)
        assert result.efficiency == pytest.approx(2.000, abs=1e-3)
        assert result.percent_efficiency == pytest.approx(100.0, abs=0.1)
        assert result.r_squared == pytest.approx(1.0)
        assert result.efficiency_quality == "excellent"
        assert result.r_squared_quality == "good"
        assert result.status == "success"

    def test_twofold_series(self):
        # Perfect doubling with D=2 means one cycle per dilution step
        cts = [20.0, 21.0, 22.0, 23.0]

        result = fit_standard_curve(cts, 2)

        assert result.efficiency == pytest.approx(2.0)
        assert result.status == "success"

    def test_points_use_dilution_factor(self):
        points = dilution_points([20.0, 23.3, 26.6], 10)

        assert [x for x, _ in points] == pytest.approx([0.0, -1.0, -2.0])

    def test_blank_readings_keep_positions(self):
        points = dilution_points([20.0, None, "", 30.0, 33.3], 10)

        assert [x for x, _ in points] == pytest.approx([0.0, -3.0, -4.0])

    def test_noisy_series_warns_on_r_squared(self):
        result = fit_standard_curve([15.0, 19.5, 20.8, 25.9, 27.5], 10)

        assert result.r_squared < 0.98
        assert result.r_squared_quality == "warning"
        assert result.status in ("warning", "error")

    def test_too_few_points(self):
        with pytest.raises(InvalidDilutionSeries):
            fit_standard_curve([20.0, 23.3], 10)

    def test_non_numeric_values_do_not_count(self):
        with pytest.raises(InvalidDilutionSeries):
            fit_standard_curve([20.0, "Undetermined", float("nan"), 26.6], 10)

    @pytest.mark.parametrize("factor", [1, 0, 2.5, "abc"])
    def test_invalid_dilution_factor(self, factor):
        with pytest.raises(InvalidDilutionSeries):
            fit_standard_curve([20.0, 23.3, 26.6], factor)

    def test_flat_series_is_zero_slope(self):
        with pytest.raises(ZeroSlopeRegression):
            fit_standard_curve([25.0, 25.0, 25.0, 25.0], 10)


class TestClassification:
    @pytest.mark.parametrize(
        "percent, expected",
        [
            (90.0, ("excellent", "success")),
            (110.0, ("excellent", "success")),
            (100.0, ("excellent", "success")),
            (80.0, ("acceptable", "warning")),
            (89.9, ("acceptable", "warning")),
            (110.1, ("acceptable", "warning")),
            (120.0, ("acceptable", "warning")),
            (79.9, ("poor", "error")),
            (120.1, ("poor", "error")),
        ],
    )
    def test_efficiency_bands(self, percent, expected):
        assert classify_efficiency(percent) == expected

    def test_r_squared_threshold(self):
        assert classify_r_squared(0.98) == ("good", "success")
        assert classify_r_squared(0.979) == ("warning", "warning")

    def test_worst_status(self):
        assert worst_status("success", "warning") == "warning"
        assert worst_status("warning", "error") == "error"
        assert worst_status("success", "success") == "success"


class TestStandardCurveCalculator:
    def test_success(self):
        result = StandardCurveCalculator.calculate(_ideal_series(), 10)

        assert result.status == "success"
        assert result.efficiency == pytest.approx(2.0, abs=1e-3)

    def test_reports_invalid_series(self):
        result = StandardCurveCalculator.calculate([20.0], 10)

        assert result.status == "error"
        assert "At least 3" in result.message
        assert result.efficiency is None

    def test_reports_zero_slope(self):
        result = StandardCurveCalculator.calculate([25.0, 25.0, 25.0], 10)

        assert result.status == "error"
        assert "slope" in result.message.lower()
