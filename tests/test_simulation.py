"""Tests for engine/simulation.py — demo tick loop.

Covers:
  - Fleet initialization and clock origin per mode
  - Tick advances clock and vehicles, trails capped
  - Delay events logged and reflected in status
  - Reproducibility: same seed → same session; reset replays it
  - Playback speed scaling and validation
  - run_simulation snapshot
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from fleetsim.config import DelayConfig, Scenario, SimulationConfig
from fleetsim.engine.simulation import DemoSimulation, run_simulation


class TestInitialization:

    def test_fleet_generated(self, scenario: Scenario):
        sim = DemoSimulation(scenario)
        assert [v.id for v in sim.vehicles] == [f"veh-{i}" for i in range(1, 8)]
        assert all(len(t.points) == 1 for t in sim.trails)
        assert sim.event_log() == []

    def test_default_vehicle_count_from_fleet_config(self, scenario: Scenario):
        sim = DemoSimulation(scenario.model_copy(update={"vehicle_count": None}))
        assert len(sim.vehicles) == scenario.fleet.default_count

    def test_operational_clock_starts_at_start_time(self, scenario: Scenario):
        sim = DemoSimulation(scenario)
        assert sim.simulation_time == scenario.simulation.start_time

    def test_forensic_clock_starts_a_day_earlier(self, scenario: Scenario):
        forensic = scenario.model_copy(update={
            "simulation": scenario.simulation.model_copy(update={"mode": "forensic"}),
        })
        sim = DemoSimulation(forensic)
        assert sim.simulation_time == scenario.simulation.start_time - timedelta(hours=24)

    def test_default_scenario_builds(self):
        sim = DemoSimulation()
        assert len(sim.vehicles) == 7
        assert not sim.state().is_running


class TestTick:

    def test_tick_advances_clock_and_fleet(self, scenario: Scenario):
        sim = DemoSimulation(scenario)
        start_time = sim.simulation_time
        starts = [v.position.point for v in sim.vehicles]

        sim.tick()

        assert sim.simulation_time == start_time + timedelta(seconds=60)
        assert sim.tick_count == 1
        moved = [v.position.point != s for v, s in zip(sim.vehicles, starts)]
        idle = [v.status == "idle" for v in sim.vehicles]
        assert all(m or i for m, i in zip(moved, idle))

    def test_trails_are_capped(self, scenario: Scenario):
        capped = scenario.model_copy(update={
            "simulation": scenario.simulation.model_copy(update={"max_trail_points": 5}),
        })
        sim = DemoSimulation(capped)
        sim.run(20)
        assert all(len(t.points) <= 5 for t in sim.trails)
        for trail, vehicle in zip(sim.trails, sim.vehicles):
            assert trail.status == vehicle.status
            assert (trail.points[-1].lat, trail.points[-1].lng) == vehicle.position.point

    def test_capacity_invariant_holds_every_tick(self, scenario: Scenario):
        sim = DemoSimulation(scenario)
        for _ in range(10):
            sim.tick()
            for v in sim.vehicles:
                assert v.capacity.available == v.capacity.total - v.capacity.used
                assert 0.0 <= v.capacity.utilization <= 1.0

    def test_certain_delays_are_logged(self, scenario: Scenario):
        always = scenario.model_copy(update={"delays": DelayConfig(probability=1.0)})
        sim = DemoSimulation(always)
        sim.tick()

        events = sim.event_log()
        assert len(events) == 7
        assert {e.type for e in events} == {"vehicle_delay"}
        assert {e.vehicle_id for e in events} == {v.id for v in sim.vehicles}
        assert all(v.status in ("delayed", "idle") for v in sim.vehicles)

    def test_delays_clear_and_are_logged(self, scenario: Scenario):
        once = scenario.model_copy(update={"delays": DelayConfig(probability=1.0)})
        sim = DemoSimulation(once)
        sim.tick()
        sim.scenario.delays.probability = 0.0
        # longest delay is 90 minutes; ticks are 60 s
        sim.run(95)

        cleared = [e for e in sim.event_log() if e.type == "delay_cleared"]
        assert len(cleared) == 7
        assert all(v.status == "active" for v in sim.vehicles)

    def test_event_log_is_a_copy(self, scenario: Scenario):
        sim = DemoSimulation(scenario.model_copy(update={"delays": DelayConfig(probability=1.0)}))
        sim.tick()
        sim.event_log().clear()
        assert len(sim.event_log()) == 7


class TestControls:

    def test_playback_speed_scales_tick(self, scenario: Scenario):
        sim = DemoSimulation(scenario)
        start = sim.simulation_time
        sim.set_playback_speed(5)
        sim.tick()
        assert sim.simulation_time - start == timedelta(seconds=300)

    @pytest.mark.parametrize("speed", [0, -1])
    def test_non_positive_playback_speed_rejected(self, scenario: Scenario, speed):
        with pytest.raises(ValueError):
            DemoSimulation(scenario).set_playback_speed(speed)

    def test_reset_replays_session(self, scenario: Scenario):
        sim = DemoSimulation(scenario)
        first = sim.run(15)
        sim.reset()
        assert sim.tick_count == 0
        assert sim.event_log() == []
        second = sim.run(15)
        assert first.model_dump() == second.model_dump()


class TestReproducibility:

    def test_same_seed_same_result(self, scenario: Scenario):
        a = DemoSimulation(scenario).run(25)
        b = DemoSimulation(scenario).run(25)
        assert a.model_dump() == b.model_dump()

    def test_different_seed_different_result(self, scenario: Scenario):
        other = scenario.model_copy(update={
            "simulation": scenario.simulation.model_copy(update={"random_seed": 8}),
        })
        a = DemoSimulation(scenario).run(5)
        b = DemoSimulation(other).run(5)
        assert [v.position.lat for v in a.vehicles] != [v.position.lat for v in b.vehicles]


class TestRunSimulation:

    def test_snapshot(self, scenario: Scenario):
        result = run_simulation(scenario)
        assert result.state.tick_count == scenario.simulation.ticks
        assert result.state.vehicle_count == 7
        assert result.state.event_count == len(result.events)
        assert not result.state.is_running
        assert result.total_distance_m > 0
        assert len(result.trails) == 7

    def test_snapshot_is_detached(self, scenario: Scenario):
        sim = DemoSimulation(scenario)
        result = sim.run(2)
        lat = result.vehicles[0].position.lat
        sim.run(3)
        assert result.vehicles[0].position.lat == lat

    def test_zero_ticks(self, scenario: Scenario):
        zero = scenario.model_copy(update={"simulation": SimulationConfig(ticks=0, start_time=scenario.simulation.start_time)})
        result = run_simulation(zero)
        assert result.state.tick_count == 0
        assert result.total_distance_m == 0.0


class TestLongRuns:

    def test_positions_stay_on_the_globe(self, scenario: Scenario):
        """Ten simulated hours per tick carries vehicles across poles and the antimeridian."""
        fast = scenario.model_copy(update={
            "vehicle_count": 3,
            "simulation": scenario.simulation.model_copy(update={
                "tick_interval_seconds": 600, "playback_speed": 60, "ticks": 200,
            }),
        })
        result = run_simulation(fast)
        for v in result.vehicles:
            assert -90.0 <= v.position.lat <= 90.0
            assert -180.0 <= v.position.lng < 180.0
            assert 0.0 <= v.position.heading < 360.0
        for trail in result.trails:
            assert all(-90.0 <= p.lat <= 90.0 and -180.0 <= p.lng < 180.0 for p in trail.points)
