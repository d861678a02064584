"""
Purpose: Great-circle distance helpers for drawn paths.
What it does:
- haversine distance between two (lat, lon) points, in kilometers
- cumulative length of an ordered path
- coordinate range check
- "is this path short enough to rate?" check

Rule: Pure functions only. No HTTP, no simplification policy.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

# Internal coordinate type: (lat, lon)
LatLon = Tuple[float, float]

EARTH_RADIUS_KM = 6371.0

# Longest road a user may draw in one go (web client limit).
MAX_ROAD_DISTANCE_KM = 5.0


def haversine_km(a: LatLon, b: LatLon) -> float:
    """Great-circle distance between two (lat, lon) points in kilometers."""
    lat1, lon1 = a
    lat2, lon2 = b
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    h = min(1.0, h)  # float rounding near antipodes
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def path_length_km(path: Sequence[LatLon]) -> float:
    """
    Sum of the distances between consecutive points.
    Paths with fewer than 2 points have length 0.
    """
    if len(path) < 2:
        return 0.0
    return sum(haversine_km(path[i], path[i + 1]) for i in range(len(path) - 1))


def is_valid_coordinate(coord: LatLon) -> bool:
    lat, lon = coord
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


@dataclass(frozen=True)
class PathDistanceCheck:
    """
    Result of checking a drawn path against the maximum road length.
    distance_km is rounded to 2 decimals for display.
    """
    valid: bool
    distance_km: float
    max_distance_km: float


def validate_path_distance(
        path: Sequence[LatLon],
        max_distance_km: float = MAX_ROAD_DISTANCE_KM,
) -> PathDistanceCheck:
    distance = path_length_km(path)
    return PathDistanceCheck(
        valid=distance <= max_distance_km,
        distance_km=round(distance, 2),
        max_distance_km=max_distance_km,
    )
