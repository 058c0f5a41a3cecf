"""Synthetic demo fleet generator.

Scatters vehicles around ``FleetConfig.center`` when no live fleet data is
available.  Per vehicle the random source is drawn, in order:

  1. bearing   θ = 2π·u
  2. radius    r = min_radius + (max_radius − min_radius)·u   (km)
  3. heading   floor(360·u)
  4. speed     min_speed + (max_speed − min_speed)·u          (km/h)
  5. used      floor(min_used + (max_used − min_used)·u)

The radius is uniform *by distance*, not by area, so points cluster
towards the outer ring.
"""

from __future__ import annotations

import math

from fleetsim.config.fleet import FleetConfig
from fleetsim.engine.geo import offset_point
from fleetsim.engine.rng import UniformSource, draw_uniform, ensure_rng
from fleetsim.models.results import (
    VEHICLE_TYPES,
    Vehicle,
    VehicleCapacity,
    VehicleMetadata,
    VehiclePosition,
)


def generate_demo_vehicles(
    count: int | None = None,
    config: FleetConfig | None = None,
    rng: UniformSource | None = None,
) -> list[Vehicle]:
    """Generate ``count`` demo vehicles, ids ``veh-1`` .. ``veh-{count}``.

    Parameters
    ----------
    count : int, optional
        Number of vehicles; defaults to ``config.default_count``.
        Non-positive counts give an empty list.
    config : FleetConfig, optional
        Scatter center, radius, speed and capacity ranges.
    rng : UniformSource, optional
        Random source; ``None`` = unseeded NumPy generator.
    """
    config = config or FleetConfig()
    rng = ensure_rng(rng)
    if count is None:
        count = config.default_count

    return [_build_vehicle(i, config, rng) for i in range(max(count, 0))]


def _build_vehicle(index: int, config: FleetConfig, rng: UniformSource) -> Vehicle:
    angle = draw_uniform(rng, 0.0, 2 * math.pi)
    radius_km = draw_uniform(rng, config.min_radius_km, config.max_radius_km)
    lat, lng = offset_point(config.center_lat, config.center_lng, math.degrees(angle), radius_km)

    heading = math.floor(draw_uniform(rng, 0.0, 360.0))
    speed = draw_uniform(rng, config.min_speed_kmh, config.max_speed_kmh)
    used = math.floor(draw_uniform(rng, config.min_used, config.max_used))

    return Vehicle(
        id=f"veh-{index + 1}",
        type=VEHICLE_TYPES[index % len(VEHICLE_TYPES)],
        status="active",
        position=VehiclePosition(lat=lat, lng=lng, heading=heading, speed=speed),
        capacity=VehicleCapacity(total=config.capacity_total, used=used),
        metadata=VehicleMetadata(
            driver_id=f"drv-{index + 1}",
            batch_id=f"batch-{index // 2 + 1}",
        ),
    )
