"""
models.py – Shared Pydantic data-models used across the analytics core.

Design decisions
----------------
* All models are **frozen** (immutable after creation) so reading windows and
  computed results can be shared between threads without copying.
* Numeric measurements and money are ``Decimal``; rounding happens once, when
  a component builds its result.
* Field validators enforce the write-path rules (non-negative consumption,
  non-blank units) at construction time, so the rules never re-check them.
* Result objects are produced fresh on every call and serialise with
  ``model_dump(mode="json")`` for the response-formatting layer.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def assume_utc(value: datetime | None) -> datetime | None:
    """Naive timestamps are taken to be UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


# Input entities
# =======================================================================

class TemperatureReading(BaseModel):
    """
    A single temperature measurement taken inside a refrigeration unit.

    Fields
    ------
    equipment_id : Identifier of the equipment the reading belongs to.
    temperature  : Degrees Celsius. No physical bound is enforced here.
    timestamp    : Wall-clock time the reading was captured.
    """

    model_config = ConfigDict(frozen=True)

    equipment_id: int = Field(description="Equipment identifier.")
    temperature: Decimal = Field(description="Measured temperature in degrees Celsius.")
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="Timestamp of the reading.",
    )

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, value: datetime) -> datetime:
        return assume_utc(value)


class EnergyReading(BaseModel):
    """
    Energy consumed by a refrigeration unit over one metering interval.

    Fields
    ------
    equipment_id : Identifier of the equipment the reading belongs to.
    consumption  : Energy consumed, never negative.
    unit         : Unit label supplied by the meter, ``kWh`` by default.
    timestamp    : End of the metering interval.
    """

    model_config = ConfigDict(frozen=True)

    equipment_id: int = Field(description="Equipment identifier.")
    consumption: Decimal = Field(ge=0, description="Energy consumed (kWh).")
    unit: str = Field(default="kWh", description="Unit label of the consumption value.")
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="Timestamp of the reading.",
    )

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, value: datetime) -> datetime:
        return assume_utc(value)

    @field_validator("unit")
    @classmethod
    def validate_unit(cls, value: str) -> str:
        """Reject blank or whitespace-only unit labels."""
        stripped = value.strip()
        if not stripped:
            raise ValueError("unit cannot be empty or whitespace")
        return stripped


class EquipmentProfile(BaseModel):
    """
    Registry metadata for one piece of equipment.

    ``installation_date`` is optional; without it the maintenance forecast
    simply gets no age contribution.
    """

    model_config = ConfigDict(frozen=True)

    equipment_id: int
    optimal_min: Decimal = Field(description="Lower bound of the optimal temperature band.")
    optimal_max: Decimal = Field(description="Upper bound of the optimal temperature band.")
    installation_date: datetime | None = None

    @field_validator("installation_date")
    @classmethod
    def validate_installation_date(cls, value: datetime | None) -> datetime | None:
        return assume_utc(value)

    @model_validator(mode="after")
    def validate_band(self) -> "EquipmentProfile":
        if self.optimal_min > self.optimal_max:
            raise ValueError("optimal_min cannot be greater than optimal_max")
        return self


# Classification labels
# =======================================================================

class TrendDirection(str, Enum):
    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"
    UNKNOWN = "unknown"


class AnomalyType(str, Enum):
    NORMAL = "normal"
    DOOR_OPEN = "door_open"
    COMPRESSOR_FAILURE = "compressor_failure"
    # Reserved: no rate rule produces it yet.
    POWER_OUTAGE = "power_outage"
    RAPID_COOLING = "rapid_cooling"


class AnomalySeverity(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class CostTrend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class RiskLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class ForecastConfidence(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Computed value objects
# =======================================================================

class TemperatureTrend(BaseModel):
    """
    Linear trend of temperature against reading index.

    ``slope`` is degrees per reading; ``projected_change_24h`` assumes one
    reading per hour.
    """

    model_config = ConfigDict(frozen=True)

    direction: TrendDirection = TrendDirection.UNKNOWN
    slope: Decimal = Decimal("0")
    projected_change_24h: Decimal = Decimal("0")


class TemperatureSummary(BaseModel):
    """Descriptive statistics of one temperature window, rounded to 2 decimals."""

    model_config = ConfigDict(frozen=True)

    count: int = 0
    mean: Decimal = Decimal("0")
    variance: Decimal = Decimal("0")
    standard_deviation: Decimal = Decimal("0")
    min_temperature: Decimal = Decimal("0")
    max_temperature: Decimal = Decimal("0")
    range: Decimal = Decimal("0")


class EquipmentHealth(BaseModel):
    """
    Temperature-stability health of one piece of equipment.

    Fields
    ------
    health_score      : 0-100, higher is better.
    is_stable         : Standard deviation below the stability threshold.
    readings_analyzed : Size of the input window, even when it was too small.
    """

    model_config = ConfigDict(frozen=True)

    health_score: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    mean: Decimal = Decimal("0")
    standard_deviation: Decimal = Decimal("0")
    variance: Decimal = Decimal("0")
    range: Decimal = Decimal("0")
    min_temperature: Decimal = Decimal("0")
    max_temperature: Decimal = Decimal("0")
    is_stable: bool = False
    trend: TemperatureTrend = Field(default_factory=TemperatureTrend)
    readings_analyzed: int = 0


class AnomalyDetection(BaseModel):
    """
    Short-term operational anomaly inferred from the recent rate of change.

    Fields
    ------
    change_rate      : Average change of the recent window in degrees/minute.
    duration_minutes : Minutes from the first reading of the window to the
                       latest recent reading.
    should_alert     : Whether the caller should dispatch an alert.
    confidence       : 0-100.
    """

    model_config = ConfigDict(frozen=True)

    has_anomaly: bool = False
    type: AnomalyType = AnomalyType.NORMAL
    severity: AnomalySeverity = AnomalySeverity.NORMAL
    message: str = ""
    recommendation: str = ""
    change_rate: Decimal = Decimal("0")
    duration_minutes: Decimal = Decimal("0")
    should_alert: bool = False
    detected_at: datetime = Field(default_factory=_utcnow)
    confidence: int = Field(default=0, ge=0, le=100)


class CostAnalysis(BaseModel):
    """Energy cost of the current period compared with the previous one."""

    model_config = ConfigDict(frozen=True)

    current_month_cost: Decimal = Decimal("0")
    previous_month_cost: Decimal = Decimal("0")
    difference: Decimal = Decimal("0")
    percent_change: Decimal = Decimal("0")
    trend: CostTrend = CostTrend.STABLE
    projected_annual_cost: Decimal = Decimal("0")
    daily_average_cost: Decimal = Decimal("0")
    total_kwh: Decimal = Decimal("0")
    electricity_rate: Decimal = Decimal("0")
    days_analyzed: int = 0
    potential_savings: Decimal | None = None
    recommendations: list[str] = Field(default_factory=list)


class RiskIndicators(BaseModel):
    """Bounded sub-scores that add up to the maintenance risk score."""

    model_config = ConfigDict(frozen=True)

    variance_score: int = Field(default=0, ge=0, le=40)
    efficiency_score: int = Field(default=0, ge=0, le=30)
    age_score: int = Field(default=0, ge=0, le=20)
    trend_score: int = Field(default=0, ge=0, le=10)

    @property
    def total(self) -> int:
        return self.variance_score + self.efficiency_score + self.age_score + self.trend_score


class MaintenanceForecast(BaseModel):
    """
    Rule-based maintenance risk forecast.

    ``estimated_days_to_maintenance`` and ``estimated_cost`` are ``None`` when
    the risk is low.
    """

    model_config = ConfigDict(frozen=True)

    risk_score: int = Field(default=0, ge=0, le=100)
    risk_level: RiskLevel = RiskLevel.LOW
    estimated_days_to_maintenance: int | None = None
    confidence: ForecastConfidence = ForecastConfidence.LOW
    indicators: RiskIndicators = Field(default_factory=RiskIndicators)
    recommendation: str = ""
    estimated_cost: Decimal | None = None
    reasons: list[str] = Field(default_factory=list)


class DailyTemperatureAverage(BaseModel):
    """Per-day temperature aggregate of one piece of equipment."""

    model_config = ConfigDict(frozen=True)

    equipment_id: int
    day: date
    average_temperature: Decimal
    min_temperature: Decimal
    max_temperature: Decimal
    readings_count: int = Field(ge=1)


class AnalyticsReport(BaseModel):
    """
    The four analyses for one piece of equipment.

    A slot is ``None`` when that analysis raised; the others are unaffected.
    """

    model_config = ConfigDict(frozen=True)

    equipment_id: int
    generated_at: datetime = Field(default_factory=_utcnow)
    health: EquipmentHealth | None = None
    anomaly: AnomalyDetection | None = None
    costs: CostAnalysis | None = None
    maintenance: MaintenanceForecast | None = None
