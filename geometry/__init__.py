"""
Geometry package for hand-drawn route paths.

Public API:
- Distances: haversine_km, path_length_km, validate_path_distance
- Thinning: distance_filter, select_waypoints
- Shape simplification: rdp_simplify, perpendicular_deviation_km
- Wire format: decode_polyline
"""

from .distance import (
    LatLon,
    PathDistanceCheck,
    haversine_km,
    is_valid_coordinate,
    path_length_km,
    validate_path_distance,
)
from .filters import distance_filter, select_waypoints
from .rdp import perpendicular_deviation_km, rdp_simplify
from .polyline import decode_polyline

__all__ = [
    "LatLon",
    "PathDistanceCheck",
    "haversine_km",
    "is_valid_coordinate",
    "path_length_km",
    "validate_path_distance",
    "distance_filter",
    "select_waypoints",
    "perpendicular_deviation_km",
    "rdp_simplify",
    "decode_polyline",
]
