"""Geographic helpers shared by the generator, speed model, and movement step.

Points are ``(lat, lng)`` tuples in degrees.  Distances are meters unless
the name says otherwise; the small-distance offset works in kilometers
because generator radii and speed × time are naturally km.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

EARTH_RADIUS_M = 6_371_000.0
"""Mean Earth radius (meters) — haversine and zone radii."""

EARTH_RADIUS_KM = EARTH_RADIUS_M / 1000.0
"""Same radius in kilometers — equirectangular offsets."""

Point = tuple[float, float]


def distance_meters(a: Point, b: Point) -> float:
    """Great-circle (haversine) distance between two points in meters."""
    lat1, lng1 = a
    lat2, lng2 = b

    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    # Rounding can push h a hair above 1 for antipodal points.
    h = min(1.0, h)
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def offset_point(lat: float, lng: float, bearing_deg: float, distance_km: float) -> Point:
    """Move ``distance_km`` along ``bearing_deg`` with a flat-earth approximation.

    The angular delta ``distance_km / EARTH_RADIUS_KM`` is split into a
    latitude part ``delta × cos θ`` and a longitude part
    ``delta × sin θ / cos(lat)``.  Fine for a few tens of km; not a geodesic.
    """
    theta = math.radians(bearing_deg)
    delta = distance_km / EARTH_RADIUS_KM

    d_lat = delta * math.cos(theta)
    d_lng = delta * math.sin(theta) / math.cos(math.radians(lat))

    return (lat + math.degrees(d_lat), lng + math.degrees(d_lng))


def normalize_longitude(lng: float) -> float:
    """Wrap a longitude into [-180, 180)."""
    if -180.0 <= lng < 180.0:
        return lng
    return (lng + 180.0) % 360.0 - 180.0


def fold_over_pole(lat: float, lng: float, heading: float) -> tuple[float, float, float]:
    """Bring a position that overshot a pole back onto the globe.

    Crossing a pole lands on the opposite meridian, travelling the other
    way, so each fold mirrors the latitude, shifts the longitude by 180°
    and turns the heading to ``180 − heading``.  Returns
    ``(lat, lng, heading)`` with lat in [-90, 90] and lng in [-180, 180).
    """
    while lat > 90.0 or lat < -90.0:
        lat = (180.0 if lat > 90.0 else -180.0) - lat
        lng += 180.0
        heading = (180.0 - heading) % 360.0
    return lat, normalize_longitude(lng), heading


def bearing_degrees(a: Point, b: Point) -> float:
    """Initial great-circle bearing from ``a`` to ``b``, in [0, 360)."""
    lat1, lat2 = math.radians(a[0]), math.radians(b[0])
    d_lng = math.radians(b[1] - a[1])

    y = math.sin(d_lng) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lng)
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


def interpolate_point(a: Point, b: Point, t: float) -> Point:
    """Linear interpolation between two points; ``t`` is clamped to [0, 1]."""
    t = max(0.0, min(1.0, t))
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def polyline_distance_meters(points: Sequence[Point]) -> float:
    """Total length of a polyline (sum of haversine legs); 0 for < 2 points."""
    return sum(distance_meters(p, q) for p, q in zip(points, points[1:]))


class DistanceMeasurement:
    """Click-to-measure path: accumulates points and sums the legs between them.

    Mirrors the map's ruler tool, so on-map measurements use exactly the
    same formula and units as the speed model's zone checks.
    """

    def __init__(self, points: Sequence[Point] | None = None) -> None:
        self._points: list[Point] = list(points or [])

    @property
    def points(self) -> list[Point]:
        return list(self._points)

    def add_point(self, lat: float, lng: float) -> float:
        """Append a point; returns the length of the new leg (0 for the first point)."""
        point = (lat, lng)
        leg = distance_meters(self._points[-1], point) if self._points else 0.0
        self._points.append(point)
        return leg

    def undo(self) -> Point | None:
        """Remove and return the last point, or None when empty."""
        return self._points.pop() if self._points else None

    def clear(self) -> None:
        self._points.clear()

    @property
    def segment_distances(self) -> list[float]:
        return [distance_meters(p, q) for p, q in zip(self._points, self._points[1:])]

    @property
    def total_meters(self) -> float:
        return polyline_distance_meters(self._points)

    def __len__(self) -> int:
        return len(self._points)
