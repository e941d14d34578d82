"""
test_maintenance.py – Unit tests for the MaintenanceForecaster.

Each sub-score is exercised on its own with windows whose statistics are
known exactly, then the risk level buckets are checked against the sum.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from coldwatch.analytics.maintenance import MaintenanceForecaster
from coldwatch.common.models import (
    EquipmentProfile,
    ForecastConfidence,
    MaintenanceForecast,
    RiskLevel,
    TemperatureReading,
)

forecaster = MaintenanceForecaster()

NOW = datetime(2026, 10, 1, tzinfo=timezone.utc)
OPTIMAL_MIN = Decimal("2")
OPTIMAL_MAX = Decimal("8")


def _window(temperatures) -> list[TemperatureReading]:
    """Helper: hourly readings ending at NOW."""
    count = len(temperatures)
    return [
        TemperatureReading(
            equipment_id=9,
            temperature=Decimal(str(t)),
            timestamp=NOW - timedelta(hours=count - 1 - i),
        )
        for i, t in enumerate(temperatures)
    ]


def _spread(low, high):
    """Twelve readings split evenly between two values, mirrored so the trend is flat."""
    return _window([high, low, low, high] * 3)


def _forecast(readings, installation_date=None, optimal_min=OPTIMAL_MIN, optimal_max=OPTIMAL_MAX):
    return forecaster.forecast(readings, installation_date, optimal_min, optimal_max, now=NOW)


class TestInsufficientData:

    def test_nine_readings(self):
        result = _forecast(_window(["4"] * 9))
        assert result.risk_score == 0
        assert result.risk_level == RiskLevel.LOW
        assert result.confidence == ForecastConfidence.LOW
        assert result.recommendation == "Insufficient data for maintenance forecast"
        assert result.reasons == []


class TestVarianceScore:

    @pytest.mark.parametrize(
        "low, high, expected",
        [
            ("4", "4", 0),
            ("3", "5", 0),          # σ = 1.0, not above 1.0
            ("2.9", "5.1", 10),     # σ = 1.1
            ("1.9", "6.1", 25),     # σ = 2.1
            ("0.9", "7.1", 40),     # σ = 3.1
        ],
    )
    def test_tiers(self, low, high, expected):
        # Wide optimal band so efficiency never scores.
        result = _forecast(_spread(low, high), optimal_min=Decimal("-50"), optimal_max=Decimal("50"))
        assert result.indicators.variance_score == expected

    def test_lowest_tier_adds_no_reason(self):
        result = _forecast(_spread("2.9", "5.1"), optimal_min=Decimal("-50"), optimal_max=Decimal("50"))
        assert result.indicators.variance_score == 10
        assert result.reasons == []

    def test_high_tier_reason_quotes_deviation(self):
        result = _forecast(_spread("0.9", "7.1"), optimal_min=Decimal("-50"), optimal_max=Decimal("50"))
        assert result.reasons[0] == "High temperature variance (3.10°C) indicates equipment stress"


class TestEfficiencyScore:

    def test_range_more_than_double_band(self):
        # Range 13 over a band of 6 → ratio 2.17
        result = _forecast(_window(["4"] * 9 + ["17"]))
        assert result.indicators.efficiency_score == 30
        assert "exceeds optimal by 2x" in " ".join(result.reasons)

    def test_range_between_one_and_a_half_and_double(self):
        # Range 10 over 6 → 1.67
        result = _forecast(_window(["4"] * 9 + ["14"]))
        assert result.indicators.efficiency_score == 20

    def test_range_within_one_and_a_half(self):
        result = _forecast(_window(["4"] * 9 + ["12"]))
        assert result.indicators.efficiency_score == 0

    def test_zero_width_band_does_not_divide_by_zero(self):
        result = _forecast(_window(["4"] * 9 + ["17"]), optimal_min=Decimal("4"), optimal_max=Decimal("4"))
        assert result.indicators.efficiency_score == 0


class TestAgeScore:

    @pytest.mark.parametrize(
        "days_installed, expected",
        [
            (None, 0),
            (30 * 36, 0),           # exactly 36 months
            (30 * 37, 10),
            (30 * 60, 10),          # exactly 60 months
            (30 * 61, 20),
            (30 * 70, 20),
        ],
    )
    def test_tiers(self, days_installed, expected):
        installed = None if days_installed is None else NOW - timedelta(days=days_installed)
        result = _forecast(_window(["4"] * 10), installation_date=installed)
        assert result.indicators.age_score == expected

    def test_age_reason_in_years(self):
        result = _forecast(_window(["4"] * 10), installation_date=NOW - timedelta(days=30 * 70))
        assert result.reasons == ["Equipment age (5 years) - typical service life exceeded"]


class TestTrendScore:

    def test_rising_trend_projected_over_one_degree(self):
        # slope 0.1/reading → +2.4 °C per 24 h
        temps = [Decimal("4") + Decimal("0.1") * i for i in range(10)]
        result = _forecast(_window(temps))
        assert result.indicators.trend_score == 10
        assert result.reasons[-1] == "Rising temperature trend (2.40°C/24h projected)"

    def test_falling_trend_scores_nothing(self):
        temps = [Decimal("6") - Decimal("0.1") * i for i in range(10)]
        assert _forecast(_window(temps)).indicators.trend_score == 0

    def test_stable_trend_scores_nothing(self):
        assert _forecast(_window(["4"] * 10)).indicators.trend_score == 0


class TestRiskLevels:

    def test_low_risk_has_no_eta_or_cost(self):
        result = _forecast(_window(["4"] * 10))
        assert result.risk_score == 0
        assert result.risk_level == RiskLevel.LOW
        assert result.estimated_days_to_maintenance is None
        assert result.estimated_cost is None

    def test_moderate_risk(self):
        # variance 40 only
        result = _forecast(_spread("0.9", "7.1"), optimal_min=Decimal("-50"), optimal_max=Decimal("50"))
        assert result.risk_score == 40
        assert result.risk_level == RiskLevel.MODERATE
        assert result.estimated_days_to_maintenance == 30
        assert result.estimated_cost == Decimal("100")

    def test_high_risk(self):
        # variance 40 + age 10
        result = _forecast(
            _spread("0.9", "7.1"),
            installation_date=NOW - timedelta(days=30 * 40),
            optimal_min=Decimal("-50"),
            optimal_max=Decimal("50"),
        )
        assert result.risk_score == 50
        assert result.risk_level == RiskLevel.HIGH
        assert result.estimated_days_to_maintenance == 14
        assert result.estimated_cost == Decimal("150")

    def test_critical_risk(self):
        # variance 40 + efficiency 30 (range 6.2 over a band of 2)
        result = _forecast(_spread("0.9", "7.1"), optimal_min=Decimal("3"), optimal_max=Decimal("5"))
        assert result.risk_score == 70
        assert result.risk_level == RiskLevel.CRITICAL
        assert result.estimated_days_to_maintenance == 3
        assert result.estimated_cost == Decimal("200")

    def test_score_is_sum_of_indicators(self):
        result = _forecast(
            _spread("0.9", "7.1"),
            installation_date=NOW - timedelta(days=30 * 40),
            optimal_min=Decimal("3"),
            optimal_max=Decimal("5"),
        )
        i = result.indicators
        assert result.risk_score == i.variance_score + i.efficiency_score + i.age_score + i.trend_score
        assert result.risk_score == 80
        assert (result.risk_score >= 70) == (result.risk_level == RiskLevel.CRITICAL)


class TestConfidence:

    @pytest.mark.parametrize(
        "count, expected",
        [
            (10, ForecastConfidence.LOW),
            (50, ForecastConfidence.LOW),
            (51, ForecastConfidence.MEDIUM),
            (100, ForecastConfidence.MEDIUM),
            (101, ForecastConfidence.HIGH),
        ],
    )
    def test_reading_count_buckets(self, count, expected):
        assert _forecast(_window(["4"] * count)).confidence == expected


class TestNaiveDatetimes:

    def test_naive_installation_date_from_profile_is_utc(self):
        profile = EquipmentProfile(
            equipment_id=9,
            optimal_min=OPTIMAL_MIN,
            optimal_max=OPTIMAL_MAX,
            installation_date="2019-01-01T00:00:00",
        )
        assert profile.installation_date.tzinfo is not None
        result = forecaster.forecast(_window(["4"] * 12), profile.installation_date, OPTIMAL_MIN, OPTIMAL_MAX)
        assert result.indicators.age_score == 20

    def test_naive_dates_passed_directly(self):
        naive_now = NOW.replace(tzinfo=None)
        installed = naive_now - timedelta(days=30 * 40)
        result = forecaster.forecast(_window(["4"] * 12), installed, OPTIMAL_MIN, OPTIMAL_MAX, now=naive_now)
        assert result.indicators.age_score == 10


def test_default_forecast_confidence_is_low():
    assert MaintenanceForecast().confidence == ForecastConfidence.LOW
