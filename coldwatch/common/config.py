"""
config.py – Centralised, validated analytics settings.

Uses pydantic-settings so every threshold the analytics rules depend on is:
  • Type-coerced (Decimal, int, str)
  • Range-checkable via Field
  • Auto-documented via the field descriptions
  • Tunable through environment variables without touching the rule code

Usage
-----
>>> from coldwatch.common.config import settings
>>> print(settings.anomaly_door_open_rate)

Every analytics component reads from the module-level ``settings`` singleton
unless a custom ``Settings`` instance is passed to its constructor.
"""

from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    All runtime configuration is pulled from environment variables (or .env).

    Sections
    --------
    health_*        – Health score gate, multiplier and stability threshold
    trend_*         – Linear trend fit gate, slope threshold, projection horizon
    anomaly_*       – Rate-of-change anomaly thresholds and confidences
    cost_*          – Energy cost analysis thresholds
    maintenance_*   – Risk sub-score tiers, risk levels, ETA and cost buckets
    window_*        – Default look-back windows used by the report builder
    sim_*           – Synthetic-data simulation knobs
    log_level       – Root Python logging level (DEBUG / INFO / WARNING / ERROR)
    prometheus_port – Port on which the CLI exposes /metrics when enabled
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Health score
    health_min_readings: int = Field(
        default=5,
        ge=1,
        description="Readings required before a health score is computed.",
    )
    health_stddev_multiplier: Decimal = Field(
        default=Decimal("20"),
        ge=0,
        description="Points deducted from 100 per degree of standard deviation.",
    )
    health_stability_threshold: Decimal = Field(
        default=Decimal("1.0"),
        ge=0,
        description="Standard deviation below which equipment is considered stable.",
    )

    # Trend fit
    trend_min_readings: int = Field(
        default=3,
        ge=2,
        description="Readings required before a linear trend is fitted.",
    )
    trend_slope_threshold: Decimal = Field(
        default=Decimal("0.05"),
        ge=0,
        description="Absolute slope (degrees per reading) above which a trend is rising/falling.",
    )
    trend_projection_hours: int = Field(
        default=24,
        ge=1,
        description="Readings (assumed hourly) the slope is projected over.",
    )

    # Anomaly detection
    anomaly_min_readings: int = Field(
        default=3,
        ge=2,
        description="Readings required before anomaly detection runs.",
    )
    anomaly_recent_window: int = Field(
        default=5,
        ge=2,
        description="Number of most recent readings whose change rates are averaged.",
    )
    anomaly_door_open_rate: Decimal = Field(
        default=Decimal("0.5"),
        description="Average rise (degrees/minute) above which the door is likely open.",
    )
    anomaly_rapid_cooling_rate: Decimal = Field(
        default=Decimal("-0.5"),
        description="Average change (degrees/minute) below which rapid cooling is reported.",
    )
    anomaly_compressor_min_rate: Decimal = Field(
        default=Decimal("0.1"),
        description="Average rise (degrees/minute) above which a slow compressor failure is suspected.",
    )
    anomaly_compressor_min_duration_minutes: Decimal = Field(
        default=Decimal("120"),
        ge=0,
        description="Observed duration (minutes) required before a compressor failure is reported.",
    )
    anomaly_door_open_confidence: int = Field(default=80, ge=0, le=100)
    anomaly_rapid_cooling_confidence: int = Field(default=75, ge=0, le=100)
    anomaly_compressor_failure_confidence: int = Field(default=85, ge=0, le=100)
    anomaly_normal_confidence: int = Field(default=90, ge=0, le=100)

    # Cost analysis
    cost_electricity_rate: Decimal = Field(
        default=Decimal("0.12"),
        ge=0,
        description="Default electricity price per kWh.",
    )
    cost_trend_threshold_percent: Decimal = Field(
        default=Decimal("5"),
        ge=0,
        description="Absolute percent change above which the cost trend is increasing/decreasing.",
    )
    cost_maintenance_check_percent: Decimal = Field(
        default=Decimal("20"),
        description="Percent increase above which a maintenance check is recommended.",
    )
    cost_coil_cleaning_percent: Decimal = Field(
        default=Decimal("10"),
        description="Percent increase above which condenser coil cleaning is recommended.",
    )
    cost_savings_trigger_percent: Decimal = Field(
        default=Decimal("15"),
        description="Percent increase above which potential savings are estimated.",
    )
    cost_savings_fraction: Decimal = Field(
        default=Decimal("0.15"),
        ge=0,
        le=1,
        description="Fraction of the current cost recoverable by restoring efficiency.",
    )
    cost_days_per_year: int = Field(default=365, ge=1)

    # Maintenance forecast
    maintenance_min_readings: int = Field(
        default=10,
        ge=1,
        description="Readings required before a maintenance forecast is produced.",
    )
    maintenance_stddev_high: Decimal = Field(default=Decimal("3.0"))
    maintenance_stddev_moderate: Decimal = Field(default=Decimal("2.0"))
    maintenance_stddev_low: Decimal = Field(default=Decimal("1.0"))
    maintenance_variance_high_score: int = Field(default=40, ge=0, le=40)
    maintenance_variance_moderate_score: int = Field(default=25, ge=0, le=40)
    maintenance_variance_low_score: int = Field(default=10, ge=0, le=40)
    maintenance_range_ratio_high: Decimal = Field(default=Decimal("2.0"))
    maintenance_range_ratio_moderate: Decimal = Field(default=Decimal("1.5"))
    maintenance_efficiency_high_score: int = Field(default=30, ge=0, le=30)
    maintenance_efficiency_moderate_score: int = Field(default=20, ge=0, le=30)
    maintenance_days_per_month: int = Field(default=30, ge=1)
    maintenance_age_old_months: int = Field(default=60, ge=0)
    maintenance_age_mid_months: int = Field(default=36, ge=0)
    maintenance_age_old_score: int = Field(default=20, ge=0, le=20)
    maintenance_age_mid_score: int = Field(default=10, ge=0, le=20)
    maintenance_trend_projection_threshold: Decimal = Field(
        default=Decimal("1.0"),
        description="Projected 24h rise above which a rising trend adds risk.",
    )
    maintenance_trend_score: int = Field(default=10, ge=0, le=10)
    maintenance_critical_threshold: int = Field(default=70, ge=0, le=100)
    maintenance_high_threshold: int = Field(default=50, ge=0, le=100)
    maintenance_moderate_threshold: int = Field(default=30, ge=0, le=100)
    maintenance_critical_days: int = Field(default=3, ge=0)
    maintenance_high_days: int = Field(default=14, ge=0)
    maintenance_moderate_days: int = Field(default=30, ge=0)
    maintenance_critical_cost: Decimal = Field(
        default=Decimal("200"),
        ge=0,
        description="Estimated emergency service cost.",
    )
    maintenance_high_cost: Decimal = Field(default=Decimal("150"), ge=0)
    maintenance_moderate_cost: Decimal = Field(default=Decimal("100"), ge=0)
    maintenance_high_confidence_readings: int = Field(
        default=100,
        ge=1,
        description="Readings above which forecast confidence is high.",
    )
    maintenance_medium_confidence_readings: int = Field(
        default=50,
        ge=1,
        description="Readings above which forecast confidence is medium.",
    )

    # Report look-back windows
    window_health_days: int = Field(default=7, ge=1)
    window_anomaly_hours: int = Field(default=24, ge=1)
    window_cost_days: int = Field(default=30, ge=1)

    # Simulation
    sim_equipment_count: int = Field(
        default=3,
        ge=1,
        description="Number of synthetic refrigeration units to simulate.",
    )
    sim_temperature_readings: int = Field(
        default=48,
        ge=0,
        description="Temperature readings generated per unit.",
    )
    sim_temperature_interval_minutes: int = Field(
        default=60,
        ge=1,
        description="Minutes between consecutive simulated temperature readings.",
    )
    sim_energy_days: int = Field(
        default=60,
        ge=0,
        description="Days of daily energy readings generated per unit.",
    )
    sim_scenario: str = Field(
        default="normal",
        description="One of: normal, door_open, compressor_failure, rapid_cooling.",
    )
    sim_seed: int | None = Field(
        default=None,
        description="Random seed for reproducible simulations.",
    )

    # Observability
    log_level: str = Field(
        default="INFO",
        description="Root Python logging level. One of: DEBUG, INFO, WARNING, ERROR, CRITICAL.",
    )
    prometheus_port: int | None = Field(
        default=None,
        ge=1024,
        le=65535,
        description="When set, the CLI exposes /metrics on this port for Prometheus scraping.",
    )


# Module-level singleton – import this everywhere instead of instantiating Settings again.
settings = Settings()
