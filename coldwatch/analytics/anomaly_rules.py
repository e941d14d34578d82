"""
anomaly_rules.py – Pure, stateless rate-of-change anomaly classification.

``AnomalyDetector.detect()`` averages the temperature change per minute of
the most recent readings and classifies it.  Rules, first match wins:

1. **DOOR_OPEN** (warning): rate > ``anomaly_door_open_rate``.
2. **RAPID_COOLING** (warning): rate < ``anomaly_rapid_cooling_rate``.
3. **COMPRESSOR_FAILURE** (critical, alert): ``anomaly_compressor_min_rate``
   < rate < ``anomaly_door_open_rate`` for more than
   ``anomaly_compressor_min_duration_minutes``.

Anything else is **NORMAL**.  ``optimal_min`` / ``optimal_max`` are accepted
but no rule reads them yet.
"""

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from coldwatch.analytics.statistics import sort_by_timestamp
from coldwatch.common.config import Settings, settings as default_settings
from coldwatch.common.models import (
    AnomalyDetection,
    AnomalySeverity,
    AnomalyType,
    TemperatureReading,
)

_MICROSECONDS_PER_MINUTE = Decimal(60_000_000)


def minutes_between(start: datetime, end: datetime) -> Decimal:
    """Exact elapsed minutes from ``start`` to ``end`` (negative if reversed)."""
    return Decimal((end - start) // timedelta(microseconds=1)) / _MICROSECONDS_PER_MINUTE


def _result(
    type: AnomalyType,
    severity: AnomalySeverity,
    message: str,
    recommendation: str,
    confidence: int,
    **measured,
) -> AnomalyDetection:
    return AnomalyDetection(
        has_anomaly=type != AnomalyType.NORMAL,
        type=type,
        severity=severity,
        message=message,
        recommendation=recommendation,
        should_alert=severity == AnomalySeverity.CRITICAL,
        confidence=confidence,
        **measured,
    )


class AnomalyDetector:
    """
    Stateless anomaly rule engine; one instance can be shared across threads.

    Usage
    -----
    >>> detector = AnomalyDetector()
    >>> result = detector.detect(readings, optimal_min=Decimal("2"), optimal_max=Decimal("8"))
    >>> if result.should_alert:
    ...     notify(result)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.logger = logger or logging.getLogger(__name__)

    def detect(
        self,
        readings: Sequence[TemperatureReading],
        optimal_min: Decimal | None = None,
        optimal_max: Decimal | None = None,
        detected_at: datetime | None = None,
    ) -> AnomalyDetection:
        """
        Classify the recent behaviour of a temperature window in any order.

        Windows smaller than ``anomaly_min_readings`` get a ``normal`` result
        with confidence 0.  ``detected_at`` defaults to now (UTC).
        """
        s = self.settings
        detected_at = detected_at or datetime.now(timezone.utc)

        if len(readings) < s.anomaly_min_readings:
            return AnomalyDetection(
                message="Insufficient data for anomaly detection",
                detected_at=detected_at,
            )

        ordered = sort_by_timestamp(readings)
        recent = ordered[-s.anomaly_recent_window:]

        rates: list[Decimal] = []
        for prev, curr in zip(recent, recent[1:]):
            minutes = minutes_between(prev.timestamp, curr.timestamp)
            if minutes > 0:
                rates.append((curr.temperature - prev.temperature) / minutes)

        if not rates:
            self.logger.debug("No increasing timestamps in recent window; skipping rate rules")
            return AnomalyDetection(detected_at=detected_at)

        avg_rate = sum(rates, Decimal(0)) / len(rates)
        duration = minutes_between(ordered[0].timestamp, recent[-1].timestamp)

        self.logger.debug(
            "Anomaly rates computed",
            extra={
                "equipment_id": recent[-1].equipment_id,
                "readings": len(readings),
                "recent": len(recent),
                "rates": [str(round(r, 2)) for r in rates],
                "avg_rate": str(round(avg_rate, 2)),
                "duration_minutes": str(round(duration, 1)),
            },
        )

        measured = {
            "change_rate": round(avg_rate, 2),
            "duration_minutes": round(duration, 1),
            "detected_at": detected_at,
        }

        if avg_rate > s.anomaly_door_open_rate:
            result = _result(
                AnomalyType.DOOR_OPEN,
                AnomalySeverity.WARNING,
                "Door likely open - temperature rising rapidly",
                "Check that the refrigerator door is closed properly",
                s.anomaly_door_open_confidence,
                **measured,
            )
        elif avg_rate < s.anomaly_rapid_cooling_rate:
            result = _result(
                AnomalyType.RAPID_COOLING,
                AnomalySeverity.WARNING,
                "Rapid cooling detected",
                "Check thermostat settings and door seal",
                s.anomaly_rapid_cooling_confidence,
                **measured,
            )
        elif (
            s.anomaly_compressor_min_rate < avg_rate < s.anomaly_door_open_rate
            and duration > s.anomaly_compressor_min_duration_minutes
        ):
            hours = round(duration / 60, 1)
            result = _result(
                AnomalyType.COMPRESSOR_FAILURE,
                AnomalySeverity.CRITICAL,
                f"Possible compressor failure - temperature rising slowly for {hours} hours",
                "URGENT: Call a technician immediately to avoid food spoilage",
                s.anomaly_compressor_failure_confidence,
                **measured,
            )
        else:
            return _result(
                AnomalyType.NORMAL,
                AnomalySeverity.NORMAL,
                "Temperature stable - no anomalies detected",
                "Equipment operating normally",
                s.anomaly_normal_confidence,
                **measured,
            )

        self.logger.info(
            "Anomaly detected",
            extra={
                "equipment_id": recent[-1].equipment_id,
                "type": result.type.value,
                "severity": result.severity.value,
                "change_rate": str(result.change_rate),
                "duration_minutes": str(result.duration_minutes),
            },
        )
        return result
