"""Demo simulation loop — the tick driver around the fleet and speed engines.

Each tick, for every vehicle in fleet order:
  expire finished delays → maybe draw a new delay → advance → extend trail

The loop is synchronous and single-threaded.  One seeded generator feeds
the fleet generator, the delay draws, and the speed jitter in a fixed
order, so the same scenario and seed replay the same session.

Entry point: ``run_simulation(scenario)``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from fleetsim.config.scenario import Scenario
from fleetsim.engine.fleet import generate_demo_vehicles
from fleetsim.engine.movement import (
    VehicleSimState,
    add_delay_event,
    advance_vehicle,
    expire_events,
)
from fleetsim.engine.rng import make_rng
from fleetsim.engine.speed import maybe_emit_delay
from fleetsim.models.results import (
    SimulationEvent,
    SimulationResult,
    SimulationState,
    TrailPoint,
    Vehicle,
    VehicleTrail,
)

logger = logging.getLogger(__name__)

FORENSIC_LOOKBACK = timedelta(hours=24)


class DemoSimulation:
    """Owns the demo fleet, the clock, trails, and the event log for one session."""

    def __init__(self, scenario: Scenario | None = None) -> None:
        self.scenario = scenario or Scenario()
        self._playback_speed = self.scenario.simulation.playback_speed
        self.is_running = False
        self._initialize()

    # ── Setup ───────────────────────────────────────────────────────────

    def _origin_time(self) -> datetime:
        sim = self.scenario.simulation
        origin = sim.start_time or datetime.now()
        if sim.mode == "forensic":
            origin -= FORENSIC_LOOKBACK
        return origin

    def _initialize(self) -> None:
        sc = self.scenario
        self.simulation_time = self._origin_time()
        self.tick_count = 0
        self._rng = make_rng(sc.simulation.random_seed)

        vehicles = generate_demo_vehicles(sc.vehicle_count, sc.fleet, self._rng)
        self._states = [VehicleSimState.from_vehicle(v) for v in vehicles]
        self._trails = {
            v.id: VehicleTrail(
                vehicle_id=v.id,
                points=[TrailPoint(lat=v.position.lat, lng=v.position.lng, ts=self.simulation_time)],
            )
            for v in vehicles
        }
        self._events: list[SimulationEvent] = []

        logger.info(
            "Initialized %d vehicles (%s mode, seed=%s)",
            len(self._states), sc.simulation.mode, sc.simulation.random_seed,
        )

    # ── Controls ────────────────────────────────────────────────────────

    @property
    def playback_speed(self) -> float:
        return self._playback_speed

    def set_playback_speed(self, speed: float) -> None:
        """Change how many simulated seconds pass per tick (1x, 2x, 5x, ...)."""
        if speed <= 0:
            raise ValueError(f"playback speed must be positive, got {speed}")
        self._playback_speed = speed

    def reset(self) -> None:
        """Back to the start: same seed, regenerated fleet, empty log."""
        self._initialize()
        logger.info("Simulation reset")

    # ── Loop ────────────────────────────────────────────────────────────

    def tick(self) -> None:
        sc = self.scenario
        delta_seconds = sc.simulation.tick_interval_seconds * self._playback_speed
        self.simulation_time += timedelta(seconds=delta_seconds)
        now = self.simulation_time

        for state in self._states:
            vehicle_id = state.vehicle.id

            for expired in expire_events(state, now):
                self._log(SimulationEvent(
                    type="delay_cleared", vehicle_id=vehicle_id,
                    timestamp=now, reason=expired.reason,
                ))

            delay = maybe_emit_delay(self._rng, sc.delays)
            if delay is not None:
                add_delay_event(state, delay, now, sc.delays)
                self._log(SimulationEvent(
                    type="vehicle_delay", vehicle_id=vehicle_id, timestamp=now,
                    reason=delay.reason, duration_min=delay.duration_min,
                ))

            travelled = advance_vehicle(state, delta_seconds, now, self._rng, sc.traffic)
            self._extend_trail(state, travelled)

        self.tick_count += 1

    def run(self, ticks: int | None = None) -> SimulationResult:
        """Execute ``ticks`` ticks (default ``simulation.ticks``) and snapshot."""
        if ticks is None:
            ticks = self.scenario.simulation.ticks
        self.is_running = True
        try:
            for _ in range(ticks):
                self.tick()
        finally:
            self.is_running = False
        logger.debug("Ran %d ticks, %d events logged", ticks, len(self._events))
        return self.result()

    def _extend_trail(self, state: VehicleSimState, travelled: float) -> None:
        vehicle = state.vehicle
        trail = self._trails[vehicle.id]
        trail.status = vehicle.status
        if travelled <= 0.0:
            return
        trail.points.append(TrailPoint(
            lat=vehicle.position.lat, lng=vehicle.position.lng, ts=self.simulation_time,
        ))
        overflow = len(trail.points) - self.scenario.simulation.max_trail_points
        if overflow > 0:
            del trail.points[:overflow]

    def _log(self, event: SimulationEvent) -> None:
        self._events.append(event)
        logger.debug("Event %s for %s (%s)", event.type, event.vehicle_id, event.reason)

    # ── Read side ───────────────────────────────────────────────────────

    @property
    def vehicles(self) -> list[Vehicle]:
        return [s.vehicle for s in self._states]

    @property
    def sim_states(self) -> list[VehicleSimState]:
        return list(self._states)

    @property
    def trails(self) -> list[VehicleTrail]:
        return list(self._trails.values())

    def event_log(self) -> list[SimulationEvent]:
        return list(self._events)

    def state(self) -> SimulationState:
        statuses = [s.vehicle.status for s in self._states]
        return SimulationState(
            is_running=self.is_running,
            simulation_time=self.simulation_time,
            tick_count=self.tick_count,
            vehicle_count=len(self._states),
            event_count=len(self._events),
            delayed_vehicles=statuses.count("delayed"),
            idle_vehicles=statuses.count("idle"),
        )

    def result(self) -> SimulationResult:
        return SimulationResult(
            state=self.state(),
            vehicles=[v.model_copy(deep=True) for v in self.vehicles],
            trails=[t.model_copy(deep=True) for t in self.trails],
            events=self.event_log(),
            total_distance_m=sum(s.odometer_m for s in self._states),
        )


def run_simulation(scenario: Scenario | None = None) -> SimulationResult:
    """Build a session from ``scenario`` and run ``simulation.ticks`` ticks."""
    return DemoSimulation(scenario).run()
