"""Context manifest — makes the simulator API self-describing.

``GET /context`` returns every configurable parameter (pulled from the
Pydantic models), the endpoints, and the speed formula, so a client can
build requests without reading the source.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from fleetsim.config import DelayConfig, FleetConfig, Scenario, SimulationConfig, TrafficConfig


class ParameterInfo(BaseModel):
    """One configurable parameter, machine-readable."""
    name: str
    type: str
    default: Any
    description: str
    constraints: dict[str, Any] = Field(default_factory=dict)


class SectionSchema(BaseModel):
    """Schema for one configuration section (e.g. fleet, traffic)."""
    section: str
    description: str
    parameters: list[ParameterInfo]


class EndpointInfo(BaseModel):
    method: str
    path: str
    description: str


class SimulatorContext(BaseModel):
    simulator_name: str
    version: str
    description: str
    speed_formula: str
    input_sections: list[SectionSchema]
    endpoints: list[EndpointInfo]


def _extract_params(model_cls: type[BaseModel]) -> list[ParameterInfo]:
    """Extract parameter info from a Pydantic model class."""
    params: list[ParameterInfo] = []
    for name, field_info in model_cls.model_fields.items():
        constraints: dict[str, Any] = {}
        for m in field_info.metadata:
            for attr in ("ge", "gt", "le", "lt", "min_length", "max_length"):
                if getattr(m, attr, None) is not None:
                    constraints[attr] = getattr(m, attr)

        # default_factory fields (tables, zones) are reported as None
        default = field_info.default
        default_val = default if default is not None and not callable(default) else None
        if not isinstance(default_val, (str, int, float, bool, type(None))):
            default_val = None

        type_str = str(field_info.annotation) if field_info.annotation else "Any"
        type_str = type_str.replace("typing.", "").replace("<class '", "").replace("'>", "")

        params.append(ParameterInfo(
            name=name,
            type=type_str,
            default=default_val,
            description=field_info.description or "",
            constraints=constraints,
        ))
    return params


_INPUT_SECTIONS: list[tuple[str, type[BaseModel], str]] = [
    ("fleet", FleetConfig, "Demo fleet scatter — center, radius, speed and cargo ranges"),
    ("traffic", TrafficConfig, "Speed model — hour/weekday tables, congestion zones, jitter, floor"),
    ("delays", DelayConfig, "Delay events — per-tick probability, durations, speed multipliers"),
    ("simulation", SimulationConfig, "Tick loop — mode, seed, tick length, playback speed, trails"),
]

_SPEED_FORMULA = (
    "speed = max(min_speed_kmh, base_speed × hour[h] × weekday[d] × "
    "Π(zone.base_multiplier × (1 − (1 − dist/radius) × center_slowdown_max)) × U[jitter_min, jitter_max])"
)

_ENDPOINTS = [
    EndpointInfo(method="GET", path="/context", description="This manifest"),
    EndpointInfo(method="GET", path="/schema", description="JSON Schema for Scenario"),
    EndpointInfo(method="GET", path="/scenario/defaults", description="Default Scenario as JSON"),
    EndpointInfo(method="POST", path="/fleet/generate", description="Generate demo vehicles"),
    EndpointInfo(method="POST", path="/speed", description="Traffic-aware speed for one vehicle"),
    EndpointInfo(method="POST", path="/distance", description="Haversine length of a clicked path"),
    EndpointInfo(method="POST", path="/simulate", description="Run the tick loop and return a snapshot"),
]


def build_context() -> SimulatorContext:
    """Build the self-describing context manifest."""
    return SimulatorContext(
        simulator_name="Fleet Demo Simulator",
        version="1.0",
        description=(
            "Synthetic vehicle fleet for dispatch-map demos: scattered demo vehicles, "
            "traffic-aware speeds, random delay events, and a tick loop producing trails."
        ),
        speed_formula=_SPEED_FORMULA,
        input_sections=[
            SectionSchema(section=name, description=desc, parameters=_extract_params(cls))
            for name, cls, desc in _INPUT_SECTIONS
        ],
        endpoints=_ENDPOINTS,
    )


def get_scenario_schema() -> dict:
    """Return the full JSON Schema for Scenario."""
    return Scenario.model_json_schema()


def get_default_scenario() -> dict:
    """Return default Scenario as a JSON-serializable dict."""
    return Scenario().model_dump(mode="json")
