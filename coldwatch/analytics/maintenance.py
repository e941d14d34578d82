"""
maintenance.py – Rule-based maintenance risk forecast.

The risk score is the sum of four bounded sub-scores: temperature variance
(0-40), observed range against the optimal band (0-30), equipment age (0-20)
and a rising 24h trend (0-10).  The total maps to a risk level carrying a
recommendation, a maintenance ETA and an indicative cost.
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from decimal import Decimal

from coldwatch.analytics.health import HealthScorer
from coldwatch.common.config import Settings, settings as default_settings
from coldwatch.common.models import (
    EquipmentHealth,
    ForecastConfidence,
    MaintenanceForecast,
    RiskIndicators,
    RiskLevel,
    TemperatureReading,
    TrendDirection,
    assume_utc,
)


class MaintenanceForecaster:
    """
    Stateless maintenance risk forecaster.

    Usage
    -----
    >>> forecaster = MaintenanceForecaster()
    >>> forecast = forecaster.forecast(readings, installation_date, Decimal("2"), Decimal("8"))
    >>> forecast.risk_level, forecast.estimated_days_to_maintenance
    """

    def __init__(
        self,
        settings: Settings | None = None,
        health_scorer: HealthScorer | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.health_scorer = health_scorer or HealthScorer(self.settings)

    def forecast(
        self,
        readings: Sequence[TemperatureReading],
        installation_date: datetime | None,
        optimal_min: Decimal,
        optimal_max: Decimal,
        now: datetime | None = None,
    ) -> MaintenanceForecast:
        """
        Forecast maintenance need from a temperature window in any order.

        ``installation_date`` of ``None`` means no age score; ``now`` is the
        reference time for the age and defaults to now (UTC).
        """
        s = self.settings
        if len(readings) < s.maintenance_min_readings:
            return MaintenanceForecast(recommendation="Insufficient data for maintenance forecast")

        health = self.health_scorer.score(readings)
        reasons: list[str] = []

        variance_score = self._variance_score(health, reasons)
        efficiency_score = self._efficiency_score(health, optimal_min, optimal_max, reasons)
        age_score = self._age_score(
            assume_utc(installation_date),
            assume_utc(now) or datetime.now(timezone.utc),
            reasons,
        )
        trend_score = self._trend_score(health, reasons)

        indicators = RiskIndicators(
            variance_score=variance_score,
            efficiency_score=efficiency_score,
            age_score=age_score,
            trend_score=trend_score,
        )
        risk_score = indicators.total

        if risk_score >= s.maintenance_critical_threshold:
            risk_level = RiskLevel.CRITICAL
            recommendation = (
                f"URGENT: Schedule emergency maintenance within {s.maintenance_critical_days} days"
                " to prevent failure"
            )
            days_to_maintenance = s.maintenance_critical_days
            estimated_cost = s.maintenance_critical_cost
        elif risk_score >= s.maintenance_high_threshold:
            risk_level = RiskLevel.HIGH
            recommendation = "Schedule maintenance within 1-2 weeks to prevent issues"
            days_to_maintenance = s.maintenance_high_days
            estimated_cost = s.maintenance_high_cost
        elif risk_score >= s.maintenance_moderate_threshold:
            risk_level = RiskLevel.MODERATE
            recommendation = f"Schedule routine maintenance within {s.maintenance_moderate_days} days"
            days_to_maintenance = s.maintenance_moderate_days
            estimated_cost = s.maintenance_moderate_cost
        else:
            risk_level = RiskLevel.LOW
            recommendation = "Equipment operating well - no immediate maintenance needed"
            days_to_maintenance = None
            estimated_cost = None

        return MaintenanceForecast(
            risk_score=risk_score,
            risk_level=risk_level,
            estimated_days_to_maintenance=days_to_maintenance,
            confidence=self._confidence(len(readings)),
            indicators=indicators,
            recommendation=recommendation,
            estimated_cost=estimated_cost,
            reasons=reasons,
        )

    def _variance_score(self, health: EquipmentHealth, reasons: list[str]) -> int:
        s = self.settings
        std_dev = health.standard_deviation
        if std_dev > s.maintenance_stddev_high:
            reasons.append(
                f"High temperature variance ({std_dev}°C) indicates equipment stress"
            )
            return s.maintenance_variance_high_score
        if std_dev > s.maintenance_stddev_moderate:
            reasons.append(f"Moderate temperature variance ({std_dev}°C)")
            return s.maintenance_variance_moderate_score
        if std_dev > s.maintenance_stddev_low:
            return s.maintenance_variance_low_score
        return 0

    def _efficiency_score(
        self,
        health: EquipmentHealth,
        optimal_min: Decimal,
        optimal_max: Decimal,
        reasons: list[str],
    ) -> int:
        s = self.settings
        optimal_range = optimal_max - optimal_min
        range_ratio = health.range / optimal_range if optimal_range > 0 else Decimal(0)

        if range_ratio > s.maintenance_range_ratio_high:
            reasons.append("Temperature range exceeds optimal by 2x - efficiency declining")
            return s.maintenance_efficiency_high_score
        if range_ratio > s.maintenance_range_ratio_moderate:
            reasons.append("Temperature range exceeds optimal")
            return s.maintenance_efficiency_moderate_score
        return 0

    def _age_score(
        self,
        installation_date: datetime | None,
        now: datetime,
        reasons: list[str],
    ) -> int:
        if installation_date is None:
            return 0

        s = self.settings
        age_months = (now - installation_date).days // s.maintenance_days_per_month
        years = age_months // 12
        if age_months > s.maintenance_age_old_months:
            reasons.append(f"Equipment age ({years} years) - typical service life exceeded")
            return s.maintenance_age_old_score
        if age_months > s.maintenance_age_mid_months:
            reasons.append(f"Equipment age ({years} years) - routine maintenance due")
            return s.maintenance_age_mid_score
        return 0

    def _trend_score(self, health: EquipmentHealth, reasons: list[str]) -> int:
        trend = health.trend
        if (
            trend.direction == TrendDirection.RISING
            and trend.projected_change_24h > self.settings.maintenance_trend_projection_threshold
        ):
            reasons.append(
                f"Rising temperature trend ({trend.projected_change_24h}°C/24h projected)"
            )
            return self.settings.maintenance_trend_score
        return 0

    def _confidence(self, count: int) -> ForecastConfidence:
        if count > self.settings.maintenance_high_confidence_readings:
            return ForecastConfidence.HIGH
        if count > self.settings.maintenance_medium_confidence_readings:
            return ForecastConfidence.MEDIUM
        return ForecastConfidence.LOW
