"""FastAPI server — HTTP access to the fleet demo simulator.

Run with:
    uvicorn fleetsim.api.server:app --reload --port 8000

Or:
    python -m fleetsim.api.server

Endpoints:
    GET  /context            — self-describing manifest (parameters + endpoints)
    GET  /schema             — full JSON Schema for Scenario inputs
    GET  /scenario/defaults  — complete default scenario as JSON
    POST /fleet/generate     — scatter demo vehicles around a center
    POST /speed              — traffic-aware speed at a point and time
    POST /distance           — haversine length of a clicked path
    POST /simulate           — run the tick loop (partial or full Scenario)
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from fleetsim.api.context import build_context, get_default_scenario, get_scenario_schema
from fleetsim.config.fleet import FleetConfig
from fleetsim.config.scenario import Scenario
from fleetsim.config.traffic import TrafficConfig
from fleetsim.engine.fleet import generate_demo_vehicles
from fleetsim.engine.geo import DistanceMeasurement
from fleetsim.engine.rng import make_rng
from fleetsim.engine.simulation import run_simulation
from fleetsim.engine.speed import compute_speed_kmh
from fleetsim.models.results import SimulationResult, Vehicle

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# App setup
# ═══════════════════════════════════════════════════════════════════════════

app = FastAPI(
    title="Fleet Demo Simulator API",
    version="1.0",
    description=(
        "Synthetic fleet data for dispatch-map demos. Generate demo vehicles, "
        "compute traffic-aware speeds, measure paths, and run the tick loop. "
        "Start by calling GET /context."
    ),
)

# The map front-end is served from a different origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def scenario_validation_error(request: Request, exc: ValidationError):
    """Merged config overrides that fail validation are client errors, not 500s."""
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(exc.errors(include_url=False, include_context=False))},
    )


# ═══════════════════════════════════════════════════════════════════════════
# Request / response models
# ═══════════════════════════════════════════════════════════════════════════

class GenerateFleetRequest(BaseModel):
    """Request body for /fleet/generate."""
    count: int | None = Field(default=None, description="Vehicles to generate; None = fleet default (7)")
    seed: int | None = Field(default=None, description="RNG seed; None = random")
    fleet: dict[str, Any] = Field(
        default_factory=dict,
        description="Partial FleetConfig. Example: {'center_lat': 9.06, 'center_lng': 7.49}",
    )


class SpeedRequest(BaseModel):
    """Request body for /speed."""
    base_speed_kmh: float = Field(gt=0)
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    timestamp: datetime
    seed: int | None = None
    traffic: dict[str, Any] = Field(default_factory=dict, description="Partial TrafficConfig")


class SpeedResponse(BaseModel):
    speed_kmh: float


class DistanceRequest(BaseModel):
    """Request body for /distance — points as [lat, lng] pairs, in click order."""
    points: list[tuple[float, float]] = Field(default_factory=list)


class DistanceResponse(BaseModel):
    segments_m: list[float]
    total_m: float


class SimulateRequest(BaseModel):
    """Request body for /simulate. All fields optional — defaults used for missing."""
    scenario: dict[str, Any] = Field(
        default_factory=dict,
        description="Partial or full Scenario JSON. Missing fields use defaults. "
                    "Example: {'vehicle_count': 12, 'simulation': {'ticks': 300, 'random_seed': 7}}",
    )


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def _build_scenario(overrides: dict[str, Any]) -> Scenario:
    """Build a Scenario from partial overrides merged onto defaults."""
    defaults = get_default_scenario()
    _deep_merge(defaults, overrides)
    return Scenario(**defaults)


def _deep_merge(base: dict, overrides: dict) -> dict:
    """Recursively merge overrides into base dict."""
    for key, val in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(val, dict):
            _deep_merge(base[key], val)
        else:
            base[key] = val
    return base


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════

@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/")
def root():
    """API root — returns a welcome message and pointer to /context."""
    return {
        "name": "Fleet Demo Simulator API",
        "version": "1.0",
        "start_here": "GET /context",
        "docs": "GET /docs (interactive Swagger UI)",
    }


@app.get("/context")
def get_context():
    return build_context()


@app.get("/schema")
def get_schema():
    """Full JSON Schema for Scenario — all input parameters with types, defaults, constraints."""
    return get_scenario_schema()


@app.get("/scenario/defaults")
def get_defaults():
    """Complete default Scenario as JSON. Use as a starting point for modifications."""
    return get_default_scenario()


@app.post("/fleet/generate", response_model=list[Vehicle])
def generate_fleet(req: GenerateFleetRequest):
    """Scatter demo vehicles around the configured center."""
    fleet = FleetConfig(**_deep_merge(FleetConfig().model_dump(), req.fleet))
    vehicles = generate_demo_vehicles(req.count, fleet, make_rng(req.seed))
    logger.info("Generated %d demo vehicles", len(vehicles))
    return vehicles


@app.post("/speed", response_model=SpeedResponse)
def speed(req: SpeedRequest):
    """Effective speed for one vehicle at a point and time."""
    traffic = TrafficConfig(**_deep_merge(TrafficConfig().model_dump(), req.traffic))
    value = compute_speed_kmh(
        req.base_speed_kmh, (req.lat, req.lng), req.timestamp, make_rng(req.seed), traffic,
    )
    return SpeedResponse(speed_kmh=value)


@app.post("/distance", response_model=DistanceResponse)
def distance(req: DistanceRequest):
    """Per-leg and total great-circle length of a path (meters)."""
    path = DistanceMeasurement(req.points)
    return DistanceResponse(segments_m=path.segment_distances, total_m=path.total_meters)


@app.post("/simulate", response_model=SimulationResult)
def simulate(req: SimulateRequest):
    """Run the tick loop on a partial Scenario and return the final snapshot.

    Example minimal request:
    ```json
    {"scenario": {"vehicle_count": 10, "simulation": {"ticks": 120}}}
    ```
    """
    scenario = _build_scenario(req.scenario)
    return run_simulation(scenario)


# ═══════════════════════════════════════════════════════════════════════════
# CLI entry point
# ═══════════════════════════════════════════════════════════════════════════

def main():
    """Run the API server."""
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(
        "fleetsim.api.server:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
