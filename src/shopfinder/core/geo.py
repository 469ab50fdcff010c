from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt

"""
Geospatial helpers.

A tiny geometry layer so discovery code can compute "how far is this shop"
without pulling in heavier GIS dependencies. Distances are kilometers.
"""

EARTH_RADIUS_KM = 6371.0


def distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Compute great-circle (haversine) distance in kilometers between two points."""
    dlat = radians(lat2 - lat1)
    dlng = radians(lng2 - lng1)

    a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlng / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def format_distance(km: float) -> str:
    """Render a distance badge: meters below 1 km, otherwise km with one decimal."""
    if km < 1:
        return f"{km * 1000:.0f}m away"
    return f"{km:.1f}km away"
