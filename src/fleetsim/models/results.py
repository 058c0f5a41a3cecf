"""Entity and result types — the contract between engine, API, and dashboard.

Vehicles are created by the fleet generator and mutated in place by the
movement step every tick.  Everything else here is an immutable snapshot
handed to callers.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, computed_field, model_validator

from fleetsim.config.delay import DelayReason

VehicleType = Literal["truck", "van", "bike"]
VehicleStatus = Literal["active", "delayed", "idle"]

VEHICLE_TYPES: tuple[VehicleType, ...] = ("truck", "van", "bike")
"""Category cycle used by the fleet generator (index mod 3)."""


# ═══════════════════════════════════════════════════════════════════════════
# Vehicle
# ═══════════════════════════════════════════════════════════════════════════

class VehiclePosition(BaseModel):
    lat: float
    lng: float
    heading: float
    """Degrees clockwise from north, 0–359."""
    speed: float
    """Current speed (km/h)."""

    @property
    def point(self) -> tuple[float, float]:
        return (self.lat, self.lng)


class VehicleCapacity(BaseModel):
    """Cargo capacity.  ``total`` is fixed at generation time.

    ``available`` and ``utilization`` are derived, so
    ``available == total - used`` and ``utilization == used / total``
    hold after every mutation of ``used``.  ``used`` stays in ``[0, total]``.
    """

    total: int = Field(gt=0)
    used: float = Field(ge=0)

    @model_validator(mode="after")
    def _check_used(self) -> VehicleCapacity:
        if self.used > self.total:
            raise ValueError("used must not exceed total")
        return self

    @computed_field
    @property
    def available(self) -> float:
        return self.total - self.used

    @computed_field
    @property
    def utilization(self) -> float:
        return self.used / self.total

    def load(self, units: float) -> float:
        """Add cargo, clamped to ``total``.  Returns the units actually loaded."""
        assert units >= 0, f"negative load: {units}"
        loaded = min(units, self.available)
        self.used += loaded
        return loaded

    def unload(self, units: float) -> float:
        """Remove cargo, clamped to 0.  Returns the units actually unloaded."""
        assert units >= 0, f"negative unload: {units}"
        unloaded = min(units, self.used)
        self.used -= unloaded
        return unloaded


class VehicleMetadata(BaseModel):
    driver_id: str
    batch_id: str | None = None


class Vehicle(BaseModel):
    """A simulated delivery vehicle."""

    id: str
    type: VehicleType
    status: VehicleStatus
    position: VehiclePosition
    capacity: VehicleCapacity
    metadata: VehicleMetadata


# ═══════════════════════════════════════════════════════════════════════════
# Delay events
# ═══════════════════════════════════════════════════════════════════════════

class DelayEvent(BaseModel):
    """A delay drawn by the speed model; consumed immediately by the caller."""

    reason: DelayReason
    duration_min: float


class ActiveEvent(BaseModel):
    """A delay currently affecting one vehicle's movement."""

    type: Literal["delay"] = "delay"
    reason: DelayReason
    duration_min: float
    start_time: datetime
    end_time: datetime
    speed_multiplier: float
    """0 = stopped, 1 = normal speed."""


# ═══════════════════════════════════════════════════════════════════════════
# Simulation output
# ═══════════════════════════════════════════════════════════════════════════

class TrailPoint(BaseModel):
    lat: float
    lng: float
    ts: datetime


class VehicleTrail(BaseModel):
    vehicle_id: str
    points: list[TrailPoint]
    status: VehicleStatus = "active"


class SimulationEvent(BaseModel):
    """One entry of the simulation event log."""

    type: Literal["vehicle_delay", "delay_cleared"]
    vehicle_id: str
    timestamp: datetime
    reason: DelayReason | None = None
    duration_min: float | None = None


class SimulationState(BaseModel):
    is_running: bool
    simulation_time: datetime
    tick_count: int
    vehicle_count: int
    event_count: int
    delayed_vehicles: int
    idle_vehicles: int


class SimulationResult(BaseModel):
    """Snapshot of a demo session after ``run_simulation``."""

    state: SimulationState
    vehicles: list[Vehicle]
    trails: list[VehicleTrail]
    events: list[SimulationEvent]
    total_distance_m: float
    """Sum of every vehicle's odometer."""
