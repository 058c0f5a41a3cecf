"""Shared test fixtures — neutral traffic tables and fixed random sources."""

from __future__ import annotations

from datetime import datetime

import pytest

from fleetsim.config import (
    DelayConfig,
    FleetConfig,
    Scenario,
    SimulationConfig,
    TrafficConfig,
    TrafficZone,
)


class ConstantRandom:
    """Random source that always returns the same value."""

    def __init__(self, value: float) -> None:
        self.value = value
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.value


class SequenceRandom:
    """Random source replaying a fixed sequence, then repeating the last value."""

    def __init__(self, values: list[float]) -> None:
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value


@pytest.fixture
def half_random() -> ConstantRandom:
    return ConstantRandom(0.5)


@pytest.fixture
def test_zone() -> TrafficZone:
    return TrafficZone(
        name="Test Market",
        center_lat=12.0,
        center_lng=8.52,
        radius_m=1_000,
        base_multiplier=0.5,
    )


@pytest.fixture
def neutral_traffic() -> TrafficConfig:
    """Every hour and weekday multiplier 1.0, no zones."""
    return TrafficConfig(hour_multipliers=[1.0] * 24, day_multipliers=[1.0] * 7, zones=[])


@pytest.fixture
def zoned_traffic(test_zone: TrafficZone) -> TrafficConfig:
    """Neutral tables except 08:00 (0.6) and Saturday (0.9), one test zone."""
    hours = [1.0] * 24
    hours[8] = 0.6
    days = [1.0] * 7
    days[5] = 0.9
    return TrafficConfig(hour_multipliers=hours, day_multipliers=days, zones=[test_zone])


@pytest.fixture
def noon_wednesday() -> datetime:
    return datetime(2026, 10, 14, 12, 0, 0)


@pytest.fixture
def fleet() -> FleetConfig:
    return FleetConfig()


@pytest.fixture
def sim_config() -> SimulationConfig:
    return SimulationConfig(
        mode="operational",
        random_seed=7,
        tick_interval_seconds=60.0,
        ticks=30,
        start_time=datetime(2026, 10, 14, 9, 0, 0),
    )


@pytest.fixture
def scenario(fleet: FleetConfig, neutral_traffic: TrafficConfig, sim_config: SimulationConfig) -> Scenario:
    return Scenario(
        fleet=fleet,
        vehicle_count=7,
        traffic=neutral_traffic,
        delays=DelayConfig(),
        simulation=sim_config,
    )
