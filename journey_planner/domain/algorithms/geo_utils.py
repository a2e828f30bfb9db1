from __future__ import annotations

import math

from journey_planner.domain.models import GeoPoint

EARTH_RADIUS_M = 6371000.0
DEFAULT_WALKING_SPEED_MPS = 1.4


def haversine_distance_m(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters."""

    lat1 = math.radians(a.lat)
    lon1 = math.radians(a.lon)
    lat2 = math.radians(b.lat)
    lon2 = math.radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    s = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    )
    return 2.0 * EARTH_RADIUS_M * math.asin(math.sqrt(min(1.0, s)))


def walk_seconds(
    distance_m: float, speed_mps: float = DEFAULT_WALKING_SPEED_MPS
) -> int:
    """Walking time for a straight-line distance, halves rounded up."""

    return max(0, int(math.floor(float(distance_m) / float(speed_mps) + 0.5)))
