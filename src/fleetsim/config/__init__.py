"""Configuration models — all simulator input types."""

from fleetsim.config.fleet import FleetConfig
from fleetsim.config.traffic import TrafficConfig, TrafficZone
from fleetsim.config.delay import DELAY_REASONS, DelayConfig, DelayReason, DurationRange
from fleetsim.config.scenario import Scenario, SimulationConfig

__all__ = [
    "FleetConfig",
    "TrafficConfig",
    "TrafficZone",
    "DELAY_REASONS",
    "DelayConfig",
    "DelayReason",
    "DurationRange",
    "SimulationConfig",
    "Scenario",
]
