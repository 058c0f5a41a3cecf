"""Per-tick vehicle movement.

Each tick a vehicle:
  1. drops delay events whose end time has passed
  2. asks the speed model for its traffic speed
  3. scales it by the most restrictive active event (0 = stopped)
  4. moves ``speed × elapsed`` along its heading (flat-earth offset),
     folding back over a pole and wrapping longitude when it leaves the map

Status follows the active events: none → ``active``; any stopping event
→ ``idle``; only slowing events → ``delayed``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from fleetsim.config.delay import DelayConfig
from fleetsim.config.traffic import TrafficConfig
from fleetsim.engine.geo import distance_meters, fold_over_pole, offset_point
from fleetsim.engine.rng import UniformSource
from fleetsim.engine.speed import compute_speed_kmh
from fleetsim.models.results import ActiveEvent, DelayEvent, Vehicle, VehicleStatus


@dataclass
class VehicleSimState:
    """Mutable simulation state wrapped around one vehicle."""

    vehicle: Vehicle
    base_speed_kmh: float
    active_events: list[ActiveEvent] = field(default_factory=list)
    odometer_m: float = 0.0

    @classmethod
    def from_vehicle(cls, vehicle: Vehicle) -> VehicleSimState:
        """The vehicle's generated speed becomes its cruising speed."""
        return cls(vehicle=vehicle, base_speed_kmh=vehicle.position.speed)


def add_delay_event(
    state: VehicleSimState,
    event: DelayEvent,
    now: datetime,
    config: DelayConfig | None = None,
) -> ActiveEvent:
    """Attach a delay to the vehicle; it affects movement from the next advance."""
    config = config or DelayConfig()
    active = ActiveEvent(
        reason=event.reason,
        duration_min=event.duration_min,
        start_time=now,
        end_time=now + timedelta(minutes=event.duration_min),
        speed_multiplier=config.speed_multipliers[event.reason],
    )
    state.active_events.append(active)
    state.vehicle.status = derive_status(state.active_events)
    return active


def event_speed_multiplier(events: list[ActiveEvent]) -> float:
    if not events:
        return 1.0
    return min(e.speed_multiplier for e in events)


def derive_status(events: list[ActiveEvent]) -> VehicleStatus:
    if not events:
        return "active"
    if event_speed_multiplier(events) == 0.0:
        return "idle"
    return "delayed"


def expire_events(state: VehicleSimState, now: datetime) -> list[ActiveEvent]:
    """Drop events that have ended; returns the expired ones."""
    expired = [e for e in state.active_events if now >= e.end_time]
    state.active_events = [e for e in state.active_events if now < e.end_time]
    return expired


def advance_vehicle(
    state: VehicleSimState,
    delta_seconds: float,
    timestamp: datetime,
    rng: UniformSource | None = None,
    traffic: TrafficConfig | None = None,
) -> float:
    """Move the vehicle for ``delta_seconds`` ending at ``timestamp``.

    Mutates ``state.vehicle`` in place and returns the meters travelled.
    """
    assert delta_seconds >= 0, f"negative tick duration: {delta_seconds}"
    vehicle = state.vehicle
    pos = vehicle.position

    expire_events(state, timestamp)

    traffic_speed = compute_speed_kmh(state.base_speed_kmh, pos.point, timestamp, rng, traffic)
    speed = traffic_speed * event_speed_multiplier(state.active_events)

    distance_km = speed * delta_seconds / 3600.0
    start = pos.point
    lat, lng = offset_point(pos.lat, pos.lng, pos.heading, distance_km)
    pos.lat, pos.lng, pos.heading = fold_over_pole(lat, lng, pos.heading)
    pos.speed = speed

    travelled = distance_meters(start, pos.point)
    state.odometer_m += travelled
    vehicle.status = derive_status(state.active_events)
    return travelled
