"""Stochastic delay events — traffic jams, obstructions, breakdowns, fuel stops."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

DelayReason = Literal["traffic_jam", "road_obstruction", "vehicle_breakdown", "fuel_stop"]

DELAY_REASONS: tuple[DelayReason, ...] = (
    "traffic_jam",
    "road_obstruction",
    "vehicle_breakdown",
    "fuel_stop",
)
"""Selection order used when drawing a reason (index = floor(u × 4))."""


class DurationRange(BaseModel):
    """Uniform duration range in minutes."""

    min_minutes: float = Field(ge=0)
    max_minutes: float = Field(ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> "DurationRange":
        if self.min_minutes > self.max_minutes:
            raise ValueError("min_minutes must not exceed max_minutes")
        return self


def _default_durations() -> dict[DelayReason, DurationRange]:
    return {
        "traffic_jam": DurationRange(min_minutes=5, max_minutes=20),
        "road_obstruction": DurationRange(min_minutes=10, max_minutes=30),
        "vehicle_breakdown": DurationRange(min_minutes=30, max_minutes=90),
        "fuel_stop": DurationRange(min_minutes=10, max_minutes=20),
    }


def _default_speed_multipliers() -> dict[DelayReason, float]:
    # 0 = vehicle stopped for the whole event
    return {
        "traffic_jam": 0.4,
        "road_obstruction": 0.0,
        "vehicle_breakdown": 0.0,
        "fuel_stop": 0.0,
    }


class DelayConfig(BaseModel):
    """How often delays happen, how long they last, and how hard they slow a vehicle.

    Both per-reason tables must cover every reason in ``DELAY_REASONS``,
    since any reason can be drawn.
    """

    probability: float = Field(
        default=0.02, ge=0, le=1.0,
        description="Chance of a delay per vehicle per tick (0.02 = 2%)",
    )
    durations: dict[DelayReason, DurationRange] = Field(default_factory=_default_durations)
    speed_multipliers: dict[DelayReason, float] = Field(
        default_factory=_default_speed_multipliers,
        description="Speed multiplier while the event is active (0 = stopped, 1 = normal)",
    )

    @model_validator(mode="after")
    def _check_tables(self) -> "DelayConfig":
        for name, table in (("durations", self.durations), ("speed_multipliers", self.speed_multipliers)):
            missing = [r for r in DELAY_REASONS if r not in table]
            if missing:
                raise ValueError(f"{name} missing reasons: {', '.join(missing)}")
        if any(not 0.0 <= m <= 1.0 for m in self.speed_multipliers.values()):
            raise ValueError("speed_multipliers must lie in [0, 1]")
        return self
