"""
Purpose: Cheap point-thinning passes for raw touch-sampled paths.
What it does:
- distance_filter: greedy minimum-spacing thinning
- decimate: uniform stride sampling down to a point budget
- select_waypoints: evenly spaced waypoints for previews

Every function keeps the first and last point of the input and returns a new list.
"""

from __future__ import annotations

import math
from typing import List, Sequence

from .distance import LatLon, haversine_km


def distance_filter(path: Sequence[LatLon], min_distance_km: float) -> List[LatLon]:
    """
    Keep a point only if it is at least `min_distance_km` away from the last kept point.

    The first point is always kept, and so is the last one even when it sits
    closer than the threshold to its predecessor.
    """
    if len(path) <= 2:
        return list(path)

    kept: List[LatLon] = [path[0]]
    for point in path[1:-1]:
        if haversine_km(kept[-1], point) >= min_distance_km:
            kept.append(point)

    kept.append(path[-1])
    return kept


def decimate(path: Sequence[LatLon], max_points: int) -> List[LatLon]:
    """
    Uniform decimation: keep every `ceil(n / max_points)`-th point.

    The last point is forced in. If the stride sampling already filled the
    budget, the last sampled point is swapped for the real last point so the
    result never exceeds `max_points`.
    """
    n = len(path)
    if n <= max_points:
        return list(path)

    stride = math.ceil(n / max_points)
    sampled = list(path[::stride])

    if (n - 1) % stride != 0:
        if len(sampled) < max_points:
            sampled.append(path[-1])
        else:
            sampled[-1] = path[-1]
    return sampled


def select_waypoints(path: Sequence[LatLon], max_count: int) -> List[LatLon]:
    """
    Pick `max_count` evenly spaced points (by index), always including the endpoints.
    """
    if max_count < 2:
        raise ValueError("max_count must be >= 2")
    if len(path) <= max_count:
        return list(path)

    step = (len(path) - 1) / (max_count - 1)
    waypoints = [path[0]]
    for i in range(1, max_count - 1):
        waypoints.append(path[int(i * step)])
    waypoints.append(path[-1])
    return waypoints
