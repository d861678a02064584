"""
Purpose: Ramer-Douglas-Peucker shape simplification for drawn paths.

Deviation of a point from a chord is measured with a hybrid:
- the projection onto the chord is done in plain lat/lon degrees (cheap),
- the distance from the point to its projection is geodesic (km).

The recursion is unrolled onto an explicit work stack so that very long raw
paths cannot blow the interpreter's call stack.
"""

from __future__ import annotations

from typing import List, Sequence

from .distance import LatLon, haversine_km


def perpendicular_deviation_km(point: LatLon, start: LatLon, end: LatLon) -> float:
    """
    Geodesic distance (km) from `point` to its clamped planar projection on the chord start-end.
    Collapses to the plain distance to `start` when the chord is a single point.
    """
    if start == end:
        return haversine_km(point, start)

    dx = end[0] - start[0]
    dy = end[1] - start[1]
    t = ((point[0] - start[0]) * dx + (point[1] - start[1]) * dy) / (dx * dx + dy * dy)
    t = max(0.0, min(1.0, t))

    projected = (start[0] + t * dx, start[1] + t * dy)
    return haversine_km(point, projected)


def rdp_simplify(path: Sequence[LatLon], epsilon_km: float) -> List[LatLon]:
    """
    Drop every point that deviates no more than `epsilon_km` from the chord of its span.

    Equivalent to the recursive formulation: split at the first point of maximal
    deviation when it exceeds epsilon, otherwise collapse the span to its endpoints.
    """
    n = len(path)
    if n <= 2:
        return list(path)

    keep = [False] * n
    keep[0] = keep[n - 1] = True

    stack = [(0, n - 1)]
    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue

        max_deviation = -1.0
        split = first + 1
        for i in range(first + 1, last):
            deviation = perpendicular_deviation_km(path[i], path[first], path[last])
            if deviation > max_deviation:
                max_deviation = deviation
                split = i

        if max_deviation > epsilon_km:
            keep[split] = True
            stack.append((split, last))
            stack.append((first, split))

    return [point for point, kept in zip(path, keep) if kept]
