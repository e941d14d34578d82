"""
costs.py – Comparative energy cost analysis.

Sums the kWh of a current and a previous period, prices both at the given
electricity rate and derives the trend, a yearly projection, and cost-saving
recommendations.  Empty periods and a zero previous cost are handled by
returning zeros rather than raising.
"""

from collections.abc import Sequence
from decimal import Decimal

from coldwatch.common.config import Settings, settings as default_settings
from coldwatch.common.models import CostAnalysis, CostTrend, EnergyReading

MAINTENANCE_CHECK_RECOMMENDATION = (
    "Energy consumption increased significantly - schedule maintenance check"
)
COIL_CLEANING_RECOMMENDATION = "Clean condenser coils to improve efficiency"


def total_kwh(readings: Sequence[EnergyReading]) -> Decimal:
    return sum((r.consumption for r in readings), Decimal(0))


def days_spanned(readings: Sequence[EnergyReading]) -> int:
    """Whole days between the first and last reading, inclusive; 0 when empty."""
    if not readings:
        return 0
    timestamps = [r.timestamp for r in readings]
    return (max(timestamps) - min(timestamps)).days + 1


class CostAnalyzer:
    """
    Stateless energy cost analyzer.

    Usage
    -----
    >>> analyzer = CostAnalyzer()
    >>> report = analyzer.analyze(current, previous, electricity_rate=Decimal("0.15"))
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or default_settings

    def analyze(
        self,
        current: Sequence[EnergyReading],
        previous: Sequence[EnergyReading],
        electricity_rate: Decimal | None = None,
    ) -> CostAnalysis:
        """
        Compare the cost of two disjoint energy windows.

        Parameters
        ----------
        current:
            Readings of the period being reported on.
        previous:
            Readings of the period it is compared against.
        electricity_rate:
            Price per kWh; defaults to ``cost_electricity_rate``.
        """
        s = self.settings
        rate = s.cost_electricity_rate if electricity_rate is None else electricity_rate

        current_kwh = total_kwh(current)
        current_cost = current_kwh * rate
        previous_cost = total_kwh(previous) * rate
        difference = current_cost - previous_cost
        percent_change = difference / previous_cost * 100 if previous_cost > 0 else Decimal(0)

        days = days_spanned(current)
        daily_average = current_cost / days if days > 0 else Decimal(0)
        projected_annual = daily_average * s.cost_days_per_year

        trend = CostTrend.STABLE
        if abs(percent_change) > s.cost_trend_threshold_percent:
            trend = CostTrend.INCREASING if percent_change > 0 else CostTrend.DECREASING

        # Both may apply.
        recommendations: list[str] = []
        if percent_change > s.cost_maintenance_check_percent:
            recommendations.append(MAINTENANCE_CHECK_RECOMMENDATION)
        if percent_change > s.cost_coil_cleaning_percent:
            recommendations.append(COIL_CLEANING_RECOMMENDATION)

        potential_savings = None
        if percent_change > s.cost_savings_trigger_percent:
            potential_savings = round(current_cost * s.cost_savings_fraction, 2)

        return CostAnalysis(
            current_month_cost=round(current_cost, 2),
            previous_month_cost=round(previous_cost, 2),
            difference=round(difference, 2),
            percent_change=round(percent_change, 1),
            trend=trend,
            projected_annual_cost=round(projected_annual, 2),
            daily_average_cost=round(daily_average, 2),
            total_kwh=round(current_kwh, 2),
            electricity_rate=rate,
            days_analyzed=days,
            potential_savings=potential_savings,
            recommendations=recommendations,
        )
