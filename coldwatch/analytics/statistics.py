"""
statistics.py – Descriptive statistics and linear trend of a temperature window.

Both functions are pure: they never mutate the input sequence and allocate a
fresh result on every call.  All arithmetic is ``Decimal``; values are rounded
only when the result object is built.
"""

from collections.abc import Sequence
from decimal import Decimal
from operator import attrgetter

from coldwatch.common.config import Settings, settings as default_settings
from coldwatch.common.models import (
    TemperatureReading,
    TemperatureSummary,
    TemperatureTrend,
    TrendDirection,
)


def sort_by_timestamp(readings: Sequence[TemperatureReading]) -> list[TemperatureReading]:
    """Return a new list ordered oldest first."""
    return sorted(readings, key=attrgetter("timestamp"))


class StatisticsSummarizer:
    """
    Mean, population variance, standard deviation, extremes and trend.

    Usage
    -----
    >>> summarizer = StatisticsSummarizer()
    >>> summary = summarizer.summarize(readings)
    >>> trend = summarizer.fit_trend(readings)
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or default_settings

    def summarize(
        self,
        readings: Sequence[TemperatureReading],
        precision: int | None = 2,
    ) -> TemperatureSummary:
        """
        Compute the descriptive statistics of a window.

        Parameters
        ----------
        readings:
            Temperature window in any order.
        precision:
            Decimal places every statistic is rounded to.  ``None`` keeps the
            full-precision values so callers can threshold before rounding.

        An empty window yields an all-zero summary.
        """
        count = len(readings)
        if count == 0:
            return TemperatureSummary()

        temperatures = [r.temperature for r in readings]
        mean = sum(temperatures, Decimal(0)) / count
        variance = sum(((t - mean) ** 2 for t in temperatures), Decimal(0)) / count
        low = min(temperatures)
        high = max(temperatures)

        def _r(value: Decimal) -> Decimal:
            return value if precision is None else round(value, precision)

        return TemperatureSummary(
            count=count,
            mean=_r(mean),
            variance=_r(variance),
            standard_deviation=_r(variance.sqrt()),
            min_temperature=_r(low),
            max_temperature=_r(high),
            range=_r(high - low),
        )

    def fit_trend(self, readings: Sequence[TemperatureReading]) -> TemperatureTrend:
        """
        Ordinary least-squares slope of temperature against reading index.

        Readings are ordered by timestamp first; the index (not elapsed time)
        is the x axis, so ``projected_change_24h`` assumes hourly readings.

        Returns a trend with direction ``unknown`` below ``trend_min_readings``.
        """
        n = len(readings)
        if n < self.settings.trend_min_readings:
            return TemperatureTrend(direction=TrendDirection.UNKNOWN)

        ordered = sort_by_timestamp(readings)
        sum_x = sum_y = sum_xy = sum_x2 = Decimal(0)
        for i, reading in enumerate(ordered):
            sum_x += i
            sum_y += reading.temperature
            sum_xy += i * reading.temperature
            sum_x2 += i * i

        # n >= 2 keeps the denominator positive.
        slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)

        threshold = self.settings.trend_slope_threshold
        if slope > threshold:
            direction = TrendDirection.RISING
        elif slope < -threshold:
            direction = TrendDirection.FALLING
        else:
            direction = TrendDirection.STABLE

        return TemperatureTrend(
            direction=direction,
            slope=round(slope, 4),
            projected_change_24h=round(slope * self.settings.trend_projection_hours, 2),
        )
