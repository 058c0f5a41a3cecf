"""Top-level scenario — bundles every simulator input."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from fleetsim.config.fleet import FleetConfig
from fleetsim.config.traffic import TrafficConfig
from fleetsim.config.delay import DelayConfig


class SimulationConfig(BaseModel):
    """Tick-loop settings.

    ``operational`` starts the clock at ``start_time`` (or now);
    ``forensic`` replays the previous 24 hours, starting 24 h earlier.
    """

    mode: Literal["operational", "forensic"] = Field(default="operational")
    random_seed: int | None = Field(
        default=42,
        description="RNG seed for reproducible runs. None = non-deterministic.",
    )
    tick_interval_seconds: float = Field(default=2.0, gt=0, description="Simulated seconds per tick at 1x")
    playback_speed: float = Field(default=1.0, gt=0, description="Multiplier on tick_interval_seconds")
    ticks: int = Field(default=60, ge=0, description="Ticks executed by run_simulation")
    max_trail_points: int = Field(default=50, ge=1, description="Trail points kept per vehicle")
    start_time: datetime | None = Field(
        default=None,
        description="Clock origin; None = current time when the simulation is built",
    )


class Scenario(BaseModel):
    """Complete input bundle for one demo session."""

    fleet: FleetConfig = Field(default_factory=FleetConfig)
    vehicle_count: int | None = Field(
        default=None, ge=0,
        description="Vehicles to generate; None = fleet.default_count",
    )
    traffic: TrafficConfig = Field(default_factory=TrafficConfig)
    delays: DelayConfig = Field(default_factory=DelayConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
