"""Traffic-aware speed model and stochastic delay generator.

Effective speed for one vehicle at one instant:

  multiplier = hour[h] × weekday[d] × Π zones × jitter
  zone       = base_multiplier × (1 − (1 − dist/radius) × center_slowdown_max)
               for every zone with dist < radius (overlaps compound)
  jitter     ~ U[jitter_min, jitter_max]
  speed      = max(min_speed_kmh, base_speed × multiplier)

The floor is applied last, after all compounding.  The only random draw
is the jitter, so the result is deterministic given the random source.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import datetime

from fleetsim.config.delay import DELAY_REASONS, DelayConfig
from fleetsim.config.traffic import TrafficConfig, TrafficZone
from fleetsim.engine.geo import Point, distance_meters
from fleetsim.engine.rng import UniformSource, draw_uniform, ensure_rng
from fleetsim.models.results import DelayEvent


def time_of_day_multiplier(hour: int, config: TrafficConfig) -> float:
    assert 0 <= hour <= 23, f"hour out of range: {hour}"
    return config.hour_multipliers[hour]


def day_of_week_multiplier(weekday: int, config: TrafficConfig) -> float:
    """Multiplier for a Python weekday (Monday = 0 .. Sunday = 6)."""
    assert 0 <= weekday <= 6, f"weekday out of range: {weekday}"
    return config.day_multipliers[weekday]


def zone_multiplier(
    position: Point,
    zones: Iterable[TrafficZone],
    center_slowdown_max: float = 0.2,
) -> float:
    """Compound slowdown from every zone containing ``position`` (1.0 if none)."""
    multiplier = 1.0
    for zone in zones:
        distance = distance_meters(position, (zone.center_lat, zone.center_lng))
        if distance < zone.radius_m:
            center_factor = 1.0 - distance / zone.radius_m
            center_slowdown = 1.0 - center_factor * center_slowdown_max
            multiplier *= zone.base_multiplier * center_slowdown
    return multiplier


def compute_speed_kmh(
    base_speed_kmh: float,
    position: Point,
    timestamp: datetime,
    rng: UniformSource | None = None,
    config: TrafficConfig | None = None,
) -> float:
    """Instantaneous speed (km/h) for a vehicle cruising at ``base_speed_kmh``.

    Parameters
    ----------
    base_speed_kmh : float
        Nominal cruising speed, > 0.
    position : (lat, lng)
        Current location, checked against every traffic zone.
    timestamp : datetime
        Hour of day and weekday are taken from it as-is (no tz conversion).
    rng : UniformSource, optional
        One draw for the jitter.
    config : TrafficConfig, optional
        Multiplier tables and zones; defaults to the Kano tables.
    """
    assert math.isfinite(base_speed_kmh), f"non-finite base speed: {base_speed_kmh}"
    config = config or TrafficConfig()
    rng = ensure_rng(rng)

    multiplier = 1.0
    multiplier *= time_of_day_multiplier(timestamp.hour, config)
    multiplier *= day_of_week_multiplier(timestamp.weekday(), config)
    multiplier *= zone_multiplier(position, config.zones, config.center_slowdown_max)
    multiplier *= draw_uniform(rng, config.jitter_min, config.jitter_max)

    return max(config.min_speed_kmh, base_speed_kmh * multiplier)


def maybe_emit_delay(
    rng: UniformSource | None = None,
    config: DelayConfig | None = None,
) -> DelayEvent | None:
    """Draw at most one delay event; ``None`` most of the time.

    Call once per vehicle per tick.  Draws: trigger, then reason
    (``floor(u × 4)``), then a reason-specific uniform duration in minutes.
    """
    config = config or DelayConfig()
    rng = ensure_rng(rng)

    if float(rng.random()) >= config.probability:
        return None

    index = min(int(math.floor(float(rng.random()) * len(DELAY_REASONS))), len(DELAY_REASONS) - 1)
    reason = DELAY_REASONS[index]
    span = config.durations[reason]
    duration = draw_uniform(rng, span.min_minutes, span.max_minutes)

    return DelayEvent(reason=reason, duration_min=duration)
