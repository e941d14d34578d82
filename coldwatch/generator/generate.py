"""
generate.py – Simulate refrigeration units and print one analytics report each.

Knobs come from the ``sim_*`` settings, e.g.::

    SIM_SCENARIO=door_open SIM_EQUIPMENT_COUNT=2 SIM_SEED=42 coldwatch-generate
"""

import json
import logging
from datetime import datetime, timezone

from coldwatch.analytics.report import EquipmentAnalyzer
from coldwatch.common.config import settings
from coldwatch.common.observability import AnalyticsMetrics, configure_logging, start_metrics_server
from coldwatch.common.simulator import equipment_id_pool, simulate_equipment

logger = logging.getLogger(__name__)


def main() -> None:
    configure_logging(settings)

    metrics = AnalyticsMetrics()
    if settings.prometheus_port is not None:
        start_metrics_server(metrics, settings.prometheus_port)

    analyzer = EquipmentAnalyzer(settings, metrics=metrics)
    now = datetime.now(timezone.utc)
    logger.info(
        "Simulating %d unit(s), scenario=%s",
        settings.sim_equipment_count,
        settings.sim_scenario,
    )

    for equipment_id in equipment_id_pool(settings.sim_equipment_count):
        seed = None if settings.sim_seed is None else settings.sim_seed + equipment_id
        profile, temperatures, energy = simulate_equipment(
            equipment_id,
            scenario=settings.sim_scenario,
            temperature_readings=settings.sim_temperature_readings,
            interval_minutes=settings.sim_temperature_interval_minutes,
            energy_days=settings.sim_energy_days,
            seed=seed,
            now=now,
        )
        report = analyzer.analyze(profile, temperatures, energy, now=now)
        print(json.dumps(report.model_dump(mode="json")))


if __name__ == "__main__":
    main()
