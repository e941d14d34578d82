"""
windows.py – In-memory reading window selection and daily aggregation.

The analytics rules expect already-filtered windows.  These helpers carve
those windows out of a snapshot of readings the same way the reading store
queries do: by explicit range, by hours back from a cutoff, or as two
consecutive cost periods.  Inputs are never mutated; every helper returns a
new list.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from operator import attrgetter
from typing import TypeVar

from coldwatch.common.models import DailyTemperatureAverage, EnergyReading, TemperatureReading, assume_utc

R = TypeVar("R", TemperatureReading, EnergyReading)


def ensure_single_equipment(readings: Iterable[R], equipment_id: int) -> list[R]:
    """
    Return the readings as a list, raising if any belongs to other equipment.

    Raises
    ------
    ValueError
        A reading carries an ``equipment_id`` other than the one requested.
    """
    window = list(readings)
    foreign = {r.equipment_id for r in window if r.equipment_id != equipment_id}
    if foreign:
        raise ValueError(
            f"window for equipment {equipment_id} contains readings for {sorted(foreign)}"
        )
    return window


def readings_between(readings: Iterable[R], start: datetime, end: datetime) -> list[R]:
    """Readings with ``start <= timestamp <= end``, oldest first."""
    if start > end:
        raise ValueError("start cannot be after end")
    return sorted(
        (r for r in readings if start <= r.timestamp <= end),
        key=attrgetter("timestamp"),
    )


def last_hours(readings: Iterable[R], hours: int, now: datetime | None = None) -> list[R]:
    """Readings from the ``hours`` leading up to ``now`` (default: current UTC time)."""
    if hours <= 0:
        raise ValueError("hours must be positive")
    now = assume_utc(now) or datetime.now(timezone.utc)
    return readings_between(readings, now - timedelta(hours=hours), now)


def last_days(readings: Iterable[R], days: int, now: datetime | None = None) -> list[R]:
    if days <= 0:
        raise ValueError("days must be positive")
    return last_hours(readings, days * 24, now)


def cost_periods(
    readings: Iterable[EnergyReading],
    days: int,
    now: datetime | None = None,
) -> tuple[list[EnergyReading], list[EnergyReading]]:
    """
    Split energy readings into the current and the previous cost period.

    The current period is ``[now - days, now]`` and the previous one is
    ``[now - 2 * days, now - days)``, so no reading lands in both.

    Returns
    -------
    tuple[list[EnergyReading], list[EnergyReading]]
        ``(current, previous)``, each oldest first.
    """
    if days <= 0:
        raise ValueError("days must be positive")
    now = assume_utc(now) or datetime.now(timezone.utc)
    current_start = now - timedelta(days=days)
    previous_start = current_start - timedelta(days=days)

    snapshot = list(readings)
    current = readings_between(snapshot, current_start, now)
    previous = [
        r for r in readings_between(snapshot, previous_start, current_start)
        if r.timestamp < current_start
    ]
    return current, previous


def average_consumption(readings: Sequence[EnergyReading]) -> Decimal:
    """Mean consumption per reading, rounded to 2 decimals; 0 when empty."""
    if not readings:
        return Decimal(0)
    return round(sum((r.consumption for r in readings), Decimal(0)) / len(readings), 2)


def daily_temperature_averages(
    readings: Iterable[TemperatureReading],
) -> list[DailyTemperatureAverage]:
    """Aggregate temperature readings per equipment and UTC calendar day."""
    buckets: dict[tuple[int, date], list[Decimal]] = defaultdict(list)
    for reading in readings:
        day = reading.timestamp.astimezone(timezone.utc).date()
        buckets[(reading.equipment_id, day)].append(reading.temperature)

    return [
        DailyTemperatureAverage(
            equipment_id=equipment_id,
            day=day,
            average_temperature=round(sum(temps, Decimal(0)) / len(temps), 2),
            min_temperature=min(temps),
            max_temperature=max(temps),
            readings_count=len(temps),
        )
        for (equipment_id, day), temps in sorted(buckets.items(), key=lambda item: (item[0][1], item[0][0]))
    ]
