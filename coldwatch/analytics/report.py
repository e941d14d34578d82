"""
report.py – Runs the four analyses for one piece of equipment.

Processing per call
-------------------
1. Check the snapshot belongs to the requested equipment.
2. Carve the default windows out of the snapshot (health: last
   ``window_health_days``; anomalies: last ``window_anomaly_hours``; costs:
   two consecutive ``window_cost_days`` periods; maintenance: the health
   window).
3. Run health, anomaly, cost and maintenance independently.  An analysis that
   raises is logged and left ``None``; the others are still returned.
4. Record the report into ``AnalyticsMetrics`` when one was supplied.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from decimal import Decimal
from typing import TypeVar

from coldwatch.analytics.anomaly_rules import AnomalyDetector
from coldwatch.analytics.costs import CostAnalyzer
from coldwatch.analytics.health import HealthScorer
from coldwatch.analytics.maintenance import MaintenanceForecaster
from coldwatch.analytics.windows import cost_periods, ensure_single_equipment, last_days, last_hours
from coldwatch.common.config import Settings, settings as default_settings
from coldwatch.common.models import (
    AnalyticsReport,
    EnergyReading,
    EquipmentProfile,
    TemperatureReading,
    assume_utc,
)
from coldwatch.common.observability import AnalyticsMetrics

T = TypeVar("T")


class EquipmentAnalyzer:
    """
    Facade over the analytics components.

    Usage
    -----
    >>> analyzer = EquipmentAnalyzer()
    >>> report = analyzer.analyze(profile, temperature_readings, energy_readings)
    >>> print(report.model_dump_json(indent=2))
    """

    def __init__(
        self,
        settings: Settings | None = None,
        logger: logging.Logger | None = None,
        metrics: AnalyticsMetrics | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.logger = logger or logging.getLogger(__name__)
        self.metrics = metrics
        self.health_scorer = HealthScorer(self.settings)
        self.anomaly_detector = AnomalyDetector(self.settings, logger=self.logger)
        self.cost_analyzer = CostAnalyzer(self.settings)
        self.forecaster = MaintenanceForecaster(self.settings, health_scorer=self.health_scorer)

    def analyze(
        self,
        profile: EquipmentProfile,
        temperature_readings: Sequence[TemperatureReading],
        energy_readings: Sequence[EnergyReading],
        electricity_rate: Decimal | None = None,
        now: datetime | None = None,
    ) -> AnalyticsReport:
        """
        Build an ``AnalyticsReport`` from a snapshot of readings.

        Raises
        ------
        ValueError
            A reading in either snapshot belongs to different equipment.
        """
        s = self.settings
        now = assume_utc(now) or datetime.now(timezone.utc)
        equipment_id = profile.equipment_id
        temperatures = ensure_single_equipment(temperature_readings, equipment_id)
        energy = ensure_single_equipment(energy_readings, equipment_id)

        health_window = last_days(temperatures, s.window_health_days, now)
        anomaly_window = last_hours(temperatures, s.window_anomaly_hours, now)
        current, previous = cost_periods(energy, s.window_cost_days, now)

        report = AnalyticsReport(
            equipment_id=equipment_id,
            generated_at=now,
            health=self._run("health", lambda: self.health_scorer.score(health_window)),
            anomaly=self._run(
                "anomaly",
                lambda: self.anomaly_detector.detect(
                    anomaly_window,
                    profile.optimal_min,
                    profile.optimal_max,
                    detected_at=now,
                ),
            ),
            costs=self._run(
                "costs",
                lambda: self.cost_analyzer.analyze(current, previous, electricity_rate),
            ),
            maintenance=self._run(
                "maintenance",
                lambda: self.forecaster.forecast(
                    health_window,
                    profile.installation_date,
                    profile.optimal_min,
                    profile.optimal_max,
                    now=now,
                ),
            ),
        )

        if self.metrics is not None:
            self.metrics.record_report(report)
        self.logger.debug(
            "Analytics report built",
            extra={
                "equipment_id": equipment_id,
                "temperature_readings": len(temperatures),
                "energy_readings": len(energy),
            },
        )
        return report

    def _run(self, analysis: str, compute: Callable[[], T]) -> T | None:
        try:
            return compute()
        except Exception:
            self.logger.exception("%s analysis failed", analysis)
            if self.metrics is not None:
                self.metrics.record_failure(analysis)
            return None
