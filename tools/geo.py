# tools/geo.py
"""Great-circle distance and rough travel-time estimates for display."""
from __future__ import annotations

import math

from workflows.schemas import Coordinate

EARTH_RADIUS_KM = 6371.0
# Mixed urban transport; good enough for "how far is it" hints.
AVERAGE_SPEED_KMH = 40.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """Distance between two coordinates in kilometers (haversine formula)."""
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = lat2 - lat1
    dlng = math.radians(b.lng - a.lng)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def estimate_travel_minutes(distance_km: float) -> int:
    return _round_half_up(distance_km / AVERAGE_SPEED_KMH * 60)


def format_distance(distance_km: float) -> str:
    """``850m`` below one kilometer, ``12.3km`` otherwise."""
    if distance_km < 1:
        return f"{_round_half_up(distance_km * 1000)}m"
    return f"{distance_km:.1f}km"


def format_duration(minutes: int) -> str:
    """``45min`` below one hour, ``2h 5min`` otherwise."""
    if minutes < 60:
        return f"{minutes}min"
    return f"{minutes // 60}h {minutes % 60}min"
