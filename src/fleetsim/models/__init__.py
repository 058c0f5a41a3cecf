"""Result models — entity and simulation output contracts."""

from fleetsim.models.results import (
    ActiveEvent,
    DelayEvent,
    SimulationEvent,
    SimulationResult,
    SimulationState,
    TrailPoint,
    Vehicle,
    VehicleCapacity,
    VehicleMetadata,
    VehiclePosition,
    VehicleTrail,
)

__all__ = [
    "ActiveEvent",
    "DelayEvent",
    "SimulationEvent",
    "SimulationResult",
    "SimulationState",
    "TrailPoint",
    "Vehicle",
    "VehicleCapacity",
    "VehicleMetadata",
    "VehiclePosition",
    "VehicleTrail",
]
