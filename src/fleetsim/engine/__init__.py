"""Engine — geo helpers, fleet generator, speed model, movement, and tick loop."""

from fleetsim.engine.geo import (
    DistanceMeasurement,
    bearing_degrees,
    distance_meters,
    interpolate_point,
    offset_point,
    polyline_distance_meters,
)
from fleetsim.engine.fleet import generate_demo_vehicles
from fleetsim.engine.speed import compute_speed_kmh, maybe_emit_delay
from fleetsim.engine.movement import VehicleSimState, add_delay_event, advance_vehicle
from fleetsim.engine.rng import make_rng
from fleetsim.engine.simulation import DemoSimulation, run_simulation

__all__ = [
    "DistanceMeasurement",
    "bearing_degrees",
    "distance_meters",
    "interpolate_point",
    "offset_point",
    "polyline_distance_meters",
    "generate_demo_vehicles",
    "compute_speed_kmh",
    "maybe_emit_delay",
    "VehicleSimState",
    "add_delay_event",
    "advance_vehicle",
    "make_rng",
    "DemoSimulation",
    "run_simulation",
]
