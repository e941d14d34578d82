"""
test_scenarios.py – End-to-end scenarios through the full analytics stack.

No external services are involved; "integration" here means the components
are exercised together through EquipmentAnalyzer with real windows, settings,
logging and a private Prometheus registry.

Coverage
--------
* Scenario A: constant 4.00 °C window is perfectly healthy.
* Scenario B: 0.6 °C/min rise is reported as an open door.
* Scenario C: 100 kWh against 50 kWh at 0.12 doubles the cost.
* Scenario D: a volatile, old, warming unit is at critical risk.
* Report building: window carving, failure isolation, foreign readings.
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from prometheus_client import CollectorRegistry

from coldwatch.analytics.report import EquipmentAnalyzer
from coldwatch.common.models import (
    AnomalySeverity,
    AnomalyType,
    CostTrend,
    EnergyReading,
    EquipmentProfile,
    RiskLevel,
    TemperatureReading,
    TrendDirection,
)
from coldwatch.common.observability import AnalyticsMetrics
from coldwatch.common.simulator import simulate_equipment

NOW = datetime(2026, 8, 20, 9, 0, tzinfo=timezone.utc)
EQUIPMENT_ID = 12

SCENARIO_D_TEMPERATURES = ["-2", "3.25", "6.75", "3.25", "6.75", "3.25", "6.75", "3.25", "6.75", "12"]


def _profile(installed_days_ago=None) -> EquipmentProfile:
    return EquipmentProfile(
        equipment_id=EQUIPMENT_ID,
        optimal_min=Decimal("2"),
        optimal_max=Decimal("8"),
        installation_date=None if installed_days_ago is None else NOW - timedelta(days=installed_days_ago),
    )


def _temperatures(values, spacing=timedelta(hours=1)) -> list[TemperatureReading]:
    """Readings ending at NOW, oldest first."""
    count = len(values)
    return [
        TemperatureReading(
            equipment_id=EQUIPMENT_ID,
            temperature=Decimal(v),
            timestamp=NOW - spacing * (count - 1 - i),
        )
        for i, v in enumerate(values)
    ]


def _energy(current_kwh: str, previous_kwh: str) -> list[EnergyReading]:
    """One reading in each cost period."""
    return [
        EnergyReading(equipment_id=EQUIPMENT_ID, consumption=Decimal(previous_kwh), timestamp=NOW - timedelta(days=45)),
        EnergyReading(equipment_id=EQUIPMENT_ID, consumption=Decimal(current_kwh), timestamp=NOW - timedelta(days=10)),
    ]


@pytest.fixture
def registry():
    return CollectorRegistry()


@pytest.fixture
def analyzer(registry):
    return EquipmentAnalyzer(
        logger=logging.getLogger("test.report"),
        metrics=AnalyticsMetrics(registry),
    )


# ── Scenarios ──────────────────────────────────────────────────────────────────

class TestScenarios:

    def test_a_constant_temperature_is_healthy(self, analyzer):
        report = analyzer.analyze(_profile(), _temperatures(["4.00"] * 5), [], now=NOW)
        health = report.health
        assert health.variance == 0
        assert health.standard_deviation == 0
        assert health.health_score == 100
        assert health.is_stable is True
        assert health.trend.direction == TrendDirection.STABLE

    def test_b_rising_temperature_is_door_open(self, analyzer):
        readings = _temperatures(["2.0", "2.6", "3.2", "3.8", "4.4"], spacing=timedelta(minutes=1))
        anomaly = analyzer.analyze(_profile(), readings, [], now=NOW).anomaly
        assert anomaly.change_rate == Decimal("0.60")
        assert anomaly.type == AnomalyType.DOOR_OPEN
        assert anomaly.severity == AnomalySeverity.WARNING
        assert anomaly.should_alert is False
        assert anomaly.detected_at == NOW

    def test_c_doubling_consumption(self, analyzer):
        costs = analyzer.analyze(_profile(), [], _energy("100", "50"), Decimal("0.12"), now=NOW).costs
        assert costs.current_month_cost == Decimal("12.00")
        assert costs.previous_month_cost == Decimal("6.00")
        assert costs.difference == Decimal("6.00")
        assert costs.percent_change == Decimal("100.0")
        assert costs.trend == CostTrend.INCREASING
        assert costs.potential_savings == Decimal("1.80")

    def test_d_critical_maintenance_risk(self, analyzer):
        readings = _temperatures(SCENARIO_D_TEMPERATURES)
        report = analyzer.analyze(_profile(installed_days_ago=30 * 70), readings, [], now=NOW)

        assert report.health.standard_deviation == Decimal("3.50")
        assert report.health.range == Decimal("14.00")
        assert report.health.trend.direction == TrendDirection.RISING

        forecast = report.maintenance
        assert forecast.indicators.variance_score == 40
        assert forecast.indicators.efficiency_score == 30
        assert forecast.indicators.age_score == 20
        assert forecast.indicators.trend_score == 10
        assert forecast.risk_score == 100
        assert forecast.risk_level == RiskLevel.CRITICAL
        assert forecast.estimated_days_to_maintenance == 3
        assert forecast.estimated_cost == Decimal("200")
        assert len(forecast.reasons) == 4


# ── Report building ────────────────────────────────────────────────────────────

class TestEquipmentAnalyzer:

    def test_every_slot_filled(self, analyzer, registry):
        report = analyzer.analyze(
            _profile(installed_days_ago=400),
            _temperatures(["4.1", "4.0", "3.9", "4.0", "4.1", "4.0", "3.9", "4.0", "4.1", "4.0"]),
            _energy("90", "100"),
            now=NOW,
        )
        assert report.equipment_id == EQUIPMENT_ID
        assert report.generated_at == NOW
        assert None not in (report.health, report.anomaly, report.costs, report.maintenance)
        assert report.maintenance.risk_level == RiskLevel.LOW
        assert registry.get_sample_value("coldwatch_reports_total") == 1

    def test_readings_outside_windows_are_ignored(self, analyzer):
        stale = [
            TemperatureReading(equipment_id=EQUIPMENT_ID, temperature=Decimal("30"), timestamp=NOW - timedelta(days=8)),
        ]
        report = analyzer.analyze(_profile(), stale + _temperatures(["4"] * 5), [], now=NOW)
        assert report.health.readings_analyzed == 5
        assert report.health.health_score == 100

    def test_anomaly_window_is_last_twenty_four_hours(self, analyzer):
        early = _temperatures(["2.0", "2.6", "3.2"], spacing=timedelta(minutes=1))
        shifted = [r.model_copy(update={"timestamp": r.timestamp - timedelta(hours=30)}) for r in early]
        report = analyzer.analyze(_profile(), shifted, [], now=NOW)
        assert report.anomaly.type == AnomalyType.NORMAL
        assert "Insufficient data" in report.anomaly.message

    def test_failing_analysis_leaves_its_slot_empty(self, analyzer, registry, caplog):
        class BrokenCostAnalyzer:
            def analyze(self, *args, **kwargs):
                raise ArithmeticError("meter feed corrupted")

        analyzer.cost_analyzer = BrokenCostAnalyzer()
        with caplog.at_level(logging.ERROR, logger="test.report"):
            report = analyzer.analyze(_profile(), _temperatures(["4"] * 5), _energy("1", "1"), now=NOW)

        assert report.costs is None
        assert report.health is not None
        assert report.anomaly is not None
        assert report.maintenance is not None
        assert any("costs analysis failed" in r.getMessage() for r in caplog.records)
        assert registry.get_sample_value("coldwatch_analysis_failures_total", {"analysis": "costs"}) == 1

    def test_naive_timestamps_are_read_as_utc(self, analyzer):
        naive = [
            TemperatureReading(
                equipment_id=EQUIPMENT_ID,
                temperature=Decimal("4"),
                timestamp=(NOW - timedelta(hours=11 - i)).replace(tzinfo=None),
            )
            for i in range(12)
        ]
        energy = [
            EnergyReading(
                equipment_id=EQUIPMENT_ID,
                consumption=Decimal("50"),
                timestamp=(NOW - timedelta(days=10)).replace(tzinfo=None),
            )
        ]
        profile = EquipmentProfile(
            equipment_id=EQUIPMENT_ID,
            optimal_min=Decimal("2"),
            optimal_max=Decimal("8"),
            installation_date=(NOW - timedelta(days=30 * 70)).replace(tzinfo=None),
        )
        report = analyzer.analyze(profile, naive, energy, now=NOW)
        assert report.health.readings_analyzed == 12
        assert report.anomaly.type == AnomalyType.NORMAL
        assert report.costs.total_kwh == Decimal("50")
        assert report.maintenance.indicators.age_score == 20

    def test_foreign_readings_rejected(self, analyzer):
        foreign = [TemperatureReading(equipment_id=99, temperature=Decimal("4"), timestamp=NOW)]
        with pytest.raises(ValueError):
            analyzer.analyze(_profile(), foreign, [], now=NOW)

    def test_report_serialises(self, analyzer):
        report = analyzer.analyze(_profile(), _temperatures(["4"] * 5), _energy("100", "50"), now=NOW)
        payload = report.model_dump(mode="json")
        assert payload["costs"]["trend"] == "increasing"
        assert payload["health"]["health_score"] == "100"


# ── Simulated units ────────────────────────────────────────────────────────────

class TestSimulatedUnits:

    def test_compressor_failure_unit(self, analyzer, registry):
        profile, temperatures, energy = simulate_equipment(
            EQUIPMENT_ID, scenario="compressor_failure", seed=8, now=NOW
        )
        report = analyzer.analyze(profile, temperatures, energy, now=NOW)
        assert report.anomaly.type == AnomalyType.COMPRESSOR_FAILURE
        assert report.anomaly.should_alert is True
        assert report.costs.trend == CostTrend.INCREASING
        assert report.costs.days_analyzed == 30
        assert registry.get_sample_value(
            "coldwatch_anomalies_total", {"type": "compressor_failure", "severity": "critical"}
        ) == 1

    def test_normal_unit(self, analyzer):
        profile, temperatures, energy = simulate_equipment(EQUIPMENT_ID, seed=8, now=NOW)
        report = analyzer.analyze(profile, temperatures, energy, now=NOW)
        assert report.anomaly.has_anomaly is False
        assert report.costs.trend == CostTrend.STABLE
