"""
simulator.py – Synthetic refrigeration readings for tests and demos.

Design
------
Each simulated unit is assigned a **stable set point** inside the usual
2-8 °C refrigerator band, an optimal band three degrees either side of it,
and an installation date.  Baseline temperature readings are Gaussian noise
around the set point at a fixed cadence, and daily energy readings are
Gaussian noise around a per-unit consumption baseline.

A scenario then rewrites the tail of the temperature series so the anomaly
rules have something to find:

* ``normal``             – baseline only.
* ``door_open``          – last readings climb about 1 °C per minute.
* ``rapid_cooling``      – last readings drop about 1 °C per minute.
* ``compressor_failure`` – last readings creep up about 0.2 °C per minute and
  the current month draws a quarter more energy than the previous one.

All randomness flows through a ``random.Random`` instance so a seed makes the
output fully reproducible.

Usage
-----
>>> profile, temperatures, energy = simulate_equipment(1, scenario="door_open", seed=7)
"""

import random
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from coldwatch.common.models import EnergyReading, EquipmentProfile, TemperatureReading

SCENARIOS = ("normal", "door_open", "compressor_failure", "rapid_cooling")

# Tail readings per scenario: (count, spacing in minutes, change per reading in °C)
_SCENARIO_TAILS: dict[str, tuple[int, int, float]] = {
    "door_open": (5, 1, 1.0),
    "rapid_cooling": (5, 1, -1.0),
    "compressor_failure": (6, 10, 2.0),
}


def _to_decimal(value: float) -> Decimal:
    return Decimal(str(round(value, 2)))


def equipment_id_pool(equipment_count: int) -> list[int]:
    """Return ``[1, 2, ..., equipment_count]``."""
    return list(range(1, equipment_count + 1))


def _assign_set_point(rng: random.Random) -> float:
    """
    Stable set point for one unit, drawn around 4 °C and clipped to [2, 8].
    """
    return max(2.0, min(8.0, rng.gauss(mu=4.0, sigma=1.0)))


def build_profile(
    equipment_id: int,
    set_point: float,
    rng: random.Random,
    now: datetime,
) -> EquipmentProfile:
    """Registry entry with an optimal band of ±3 °C and a 6-96 month old install."""
    months_installed = rng.randint(6, 96)
    return EquipmentProfile(
        equipment_id=equipment_id,
        optimal_min=_to_decimal(set_point - 3.0),
        optimal_max=_to_decimal(set_point + 3.0),
        installation_date=now - timedelta(days=30 * months_installed),
    )


def temperature_series(
    equipment_id: int,
    set_point: float,
    count: int,
    interval_minutes: int,
    end: datetime,
    rng: random.Random,
    scenario: str = "normal",
) -> list[TemperatureReading]:
    """
    Build ``count`` baseline readings ending at ``end``, then apply the scenario tail.

    Raises
    ------
    ValueError
        Unknown scenario name.
    """
    if scenario not in SCENARIOS:
        raise ValueError(f"unknown scenario {scenario!r}; expected one of {SCENARIOS}")

    tail_count, tail_spacing, tail_step = _SCENARIO_TAILS.get(scenario, (0, 0, 0.0))
    tail_span = timedelta(minutes=tail_count * tail_spacing)
    baseline_end = end - tail_span

    readings = [
        TemperatureReading(
            equipment_id=equipment_id,
            temperature=_to_decimal(rng.gauss(mu=set_point, sigma=0.3)),
            timestamp=baseline_end - timedelta(minutes=interval_minutes * (count - 1 - i)),
        )
        for i in range(count)
    ]

    temperature = set_point
    for i in range(1, tail_count + 1):
        temperature += tail_step + rng.uniform(-0.05, 0.05) * abs(tail_step)
        readings.append(
            TemperatureReading(
                equipment_id=equipment_id,
                temperature=_to_decimal(temperature),
                timestamp=baseline_end + timedelta(minutes=tail_spacing * i),
            )
        )
    return readings


def energy_series(
    equipment_id: int,
    days: int,
    end: datetime,
    rng: random.Random,
    scenario: str = "normal",
    cost_period_days: int = 30,
) -> list[EnergyReading]:
    """
    One reading per day for ``days`` days, each stamped mid-interval before ``end``.

    In the ``compressor_failure`` scenario the most recent ``cost_period_days``
    draw 25% more energy.
    """
    baseline_kwh = rng.uniform(3.0, 6.0)
    readings = []
    for day in range(days):
        timestamp = end - timedelta(days=day, hours=12)
        kwh = max(0.0, rng.gauss(mu=baseline_kwh, sigma=0.2))
        if scenario == "compressor_failure" and day < cost_period_days:
            kwh *= 1.25
        readings.append(
            EnergyReading(
                equipment_id=equipment_id,
                consumption=_to_decimal(kwh),
                unit="kWh",
                timestamp=timestamp,
            )
        )
    readings.reverse()
    return readings


def simulate_equipment(
    equipment_id: int,
    scenario: str = "normal",
    temperature_readings: int = 48,
    interval_minutes: int = 60,
    energy_days: int = 60,
    seed: int | None = None,
    now: datetime | None = None,
) -> tuple[EquipmentProfile, list[TemperatureReading], list[EnergyReading]]:
    """
    Simulate one unit end to end.

    Returns
    -------
    tuple
        ``(profile, temperature_readings, energy_readings)``, readings oldest first.
    """
    rng = random.Random(seed)
    now = now or datetime.now(timezone.utc)
    set_point = _assign_set_point(rng)
    profile = build_profile(equipment_id, set_point, rng, now)
    temperatures = temperature_series(
        equipment_id,
        set_point,
        temperature_readings,
        interval_minutes,
        now,
        rng,
        scenario,
    )
    energy = energy_series(equipment_id, energy_days, now, rng, scenario)
    return profile, temperatures, energy
