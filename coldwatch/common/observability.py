"""
observability.py – Logging setup and Prometheus metrics for the analytics core.

The analytics rules themselves never touch global state.  Metrics are
recorded through an ``AnalyticsMetrics`` instance that owns its own
``CollectorRegistry``; callers that want /metrics pass the instance to the
report builder and expose the registry with ``start_metrics_server``.
"""

import logging

from prometheus_client import CollectorRegistry, Counter, Gauge, start_http_server

from coldwatch.common.config import Settings, settings as default_settings
from coldwatch.common.models import AnalyticsReport

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging once, from ``settings.log_level``."""
    settings = settings or default_settings
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)


class AnalyticsMetrics:
    """
    Prometheus counters and gauges for computed analyses.

    Labelled counters give one time series per (type, severity) pair, so a
    dashboard can break anomalies down by kind.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.reports = Counter(
            "coldwatch_reports_total",
            "Total analytics reports built.",
            registry=self.registry,
        )
        self.analysis_failures = Counter(
            "coldwatch_analysis_failures_total",
            "Analyses that raised instead of returning a result, by analysis.",
            ["analysis"],
            registry=self.registry,
        )
        self.anomalies = Counter(
            "coldwatch_anomalies_total",
            "Total anomalies detected, labelled by type and severity.",
            ["type", "severity"],
            registry=self.registry,
        )
        self.health_score = Gauge(
            "coldwatch_health_score",
            "Latest health score per equipment.",
            ["equipment_id"],
            registry=self.registry,
        )
        self.risk_score = Gauge(
            "coldwatch_maintenance_risk_score",
            "Latest maintenance risk score per equipment.",
            ["equipment_id"],
            registry=self.registry,
        )

    def record_failure(self, analysis: str) -> None:
        self.analysis_failures.labels(analysis=analysis).inc()

    def record_report(self, report: AnalyticsReport) -> None:
        equipment = str(report.equipment_id)
        self.reports.inc()
        if report.health is not None:
            self.health_score.labels(equipment_id=equipment).set(float(report.health.health_score))
        if report.anomaly is not None and report.anomaly.has_anomaly:
            self.anomalies.labels(
                type=report.anomaly.type.value,
                severity=report.anomaly.severity.value,
            ).inc()
        if report.maintenance is not None:
            self.risk_score.labels(equipment_id=equipment).set(report.maintenance.risk_score)


def start_metrics_server(metrics: AnalyticsMetrics, port: int) -> None:
    """Expose ``metrics.registry`` on ``http://0.0.0.0:{port}/metrics``."""
    start_http_server(port, registry=metrics.registry)
    logging.getLogger(__name__).info("Prometheus /metrics available on port %d", port)
