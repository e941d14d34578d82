"""
health.py – Temperature-stability health score.

The score starts at 100 and loses ``health_stddev_multiplier`` points per
degree of standard deviation, floored at 0.  Windows smaller than
``health_min_readings`` get a degraded zero-score result instead of an error.
"""

from collections.abc import Sequence
from decimal import Decimal

from coldwatch.analytics.statistics import StatisticsSummarizer
from coldwatch.common.config import Settings, settings as default_settings
from coldwatch.common.models import EquipmentHealth, TemperatureReading, TemperatureTrend


class HealthScorer:
    """
    Stateless health scorer.

    Usage
    -----
    >>> scorer = HealthScorer()
    >>> health = scorer.score(readings)
    >>> health.health_score, health.is_stable
    """

    def __init__(
        self,
        settings: Settings | None = None,
        summarizer: StatisticsSummarizer | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.summarizer = summarizer or StatisticsSummarizer(self.settings)

    def score(self, readings: Sequence[TemperatureReading]) -> EquipmentHealth:
        count = len(readings)
        if count < self.settings.health_min_readings:
            return EquipmentHealth(
                health_score=Decimal(0),
                is_stable=False,
                readings_analyzed=count,
                trend=TemperatureTrend(),
            )

        # Score and stability use the unrounded deviation.
        raw = self.summarizer.summarize(readings, precision=None)
        std_dev = raw.standard_deviation
        health_score = max(
            Decimal(0),
            Decimal(100) - std_dev * self.settings.health_stddev_multiplier,
        )

        return EquipmentHealth(
            health_score=round(health_score, 0),
            mean=round(raw.mean, 2),
            standard_deviation=round(std_dev, 2),
            variance=round(raw.variance, 2),
            range=round(raw.range, 2),
            min_temperature=round(raw.min_temperature, 2),
            max_temperature=round(raw.max_temperature, 2),
            is_stable=std_dev < self.settings.health_stability_threshold,
            trend=self.summarizer.fit_trend(readings),
            readings_analyzed=count,
        )
