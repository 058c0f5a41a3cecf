"""Traffic conditions — time-of-day / day-of-week tables and congestion zones."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TrafficZone(BaseModel):
    """A named circular geofence that slows every vehicle inside it.

    Static reference data: zones never change during a session.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Human label")
    center_lat: float = Field(ge=-90, le=90)
    center_lng: float = Field(ge=-180, le=180)
    radius_m: float = Field(gt=0, description="Zone radius (meters)")
    base_multiplier: float = Field(gt=0, description="Speed multiplier inside the zone (< 1 = congestion)")


def _default_hour_multipliers() -> list[float]:
    # 00–05 night, 07–09 morning rush, 12–13 midday, 16–19 evening rush
    return [
        1.15, 1.15, 1.15, 1.15, 1.15, 1.1,
        1.0, 0.7, 0.6, 0.75, 0.95, 0.95,
        0.85, 0.85, 0.95, 0.9, 0.75, 0.65,
        0.65, 0.8, 0.95, 1.0, 1.05, 1.1,
    ]


def _default_day_multipliers() -> list[float]:
    # Monday .. Sunday (Python weekday order)
    return [0.95, 1.0, 1.0, 1.0, 0.9, 1.05, 1.1]


def _default_zones() -> list[TrafficZone]:
    return [
        TrafficZone(name="Kurmi Market", center_lat=11.9925, center_lng=8.5122,
                    radius_m=1_200, base_multiplier=0.55),
        TrafficZone(name="Sabon Gari Market", center_lat=12.0140, center_lng=8.5340,
                    radius_m=1_000, base_multiplier=0.6),
        TrafficZone(name="Kano CBD", center_lat=12.0000, center_lng=8.5200,
                    radius_m=2_500, base_multiplier=0.75),
        TrafficZone(name="Airport Road", center_lat=12.0300, center_lng=8.5250,
                    radius_m=1_500, base_multiplier=0.8),
    ]


class TrafficConfig(BaseModel):
    """Inputs to the traffic-aware speed model."""

    hour_multipliers: list[float] = Field(
        default_factory=_default_hour_multipliers,
        min_length=24, max_length=24,
        description="Speed multiplier per hour of day, index 0 = midnight",
    )
    day_multipliers: list[float] = Field(
        default_factory=_default_day_multipliers,
        min_length=7, max_length=7,
        description="Speed multiplier per weekday, index 0 = Monday",
    )
    zones: list[TrafficZone] = Field(default_factory=_default_zones)
    jitter_min: float = Field(default=0.85, gt=0, description="Lower bound of the random speed perturbation")
    jitter_max: float = Field(default=1.15, gt=0, description="Upper bound of the random speed perturbation")
    min_speed_kmh: float = Field(default=5.0, ge=0, description="Absolute speed floor, applied last")
    center_slowdown_max: float = Field(
        default=0.2, ge=0, lt=1.0,
        description="Extra slowdown at a zone's exact center, fading linearly to 0 at its edge",
    )

    @model_validator(mode="after")
    def _check_tables(self) -> "TrafficConfig":
        if any(m <= 0 for m in self.hour_multipliers + self.day_multipliers):
            raise ValueError("time multipliers must be positive")
        if self.jitter_min > self.jitter_max:
            raise ValueError("jitter_min must not exceed jitter_max")
        return self
