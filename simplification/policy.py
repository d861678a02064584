"""
Purpose: Central configuration for path simplification and snap requests (single source of truth).
What it does:

Stores the tunable thresholds for turning a raw drawn path into a request-sized one:

- distance buckets: total length -> (epsilon_km, min_distance_km)
- point budgets: total length -> max_points
- RDP escalation: epsilon growth factor and upper bound
- request shaping: timeout, per-point search radius, overview, geometry format

Two named presets share one pipeline:

- precision_policy(): bucketed, RDP enabled, patient timeout (the default)
- fast_policy(): fixed spacing, no RDP, tight point budget and timeout

Rule: No logic here beyond bucket lookups. The pipeline lives in simplification/engine.py.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

INF = math.inf

# (upper bound of total length in km, epsilon_km, min_distance_km)
DistanceBucket = Tuple[float, float, float]

# (upper bound of total length in km, max_points)
PointBudget = Tuple[float, int]


@dataclass(frozen=True)
class SimplificationConfig:
    """
    Parameters selected for one path.
    """
    epsilon_km: float
    min_distance_km: float
    max_points: int

    def validate(self) -> None:
        if self.epsilon_km < 0:
            raise ValueError("epsilon_km must be >= 0")

        if self.min_distance_km < 0:
            raise ValueError("min_distance_km must be >= 0")

        if self.max_points < 2:
            raise ValueError("max_points must be >= 2")


@dataclass(frozen=True)
class SimplificationPolicy:
    """
    Central configuration for simplifying a drawn path and shaping its snap request.

    Notes:
    - buckets are scanned in order; the first one whose upper bound is >= the
      total path length wins, so the last bucket should be open-ended (INF).
    - when use_rdp is False the pipeline goes straight from distance filtering
      to uniform decimation.
    """

    name: str = "precision"

    # --- Simplification buckets ---
    distance_buckets: Tuple[DistanceBucket, ...] = (
        (2.0, 0.005, 0.02),
        (5.0, 0.01, 0.03),
        (10.0, 0.02, 0.05),
        (INF, 0.03, 0.08),
    )
    point_budgets: Tuple[PointBudget, ...] = (
        (5.0, 50),
        (10.0, 80),
        (INF, 100),
    )

    # --- RDP escalation ---
    use_rdp: bool = True
    epsilon_growth: float = 1.5
    max_epsilon_km: float = 0.5

    # --- Request shaping ---
    timeout_s: float = 30.0

    # Search radius (meters) sent for every coordinate.
    radius_m: int = 50
    # Paths longer than long_path_km use the wider radius.
    long_path_km: float = 10.0
    long_path_radius_m: int = 75

    # None means always "full"; otherwise "full" only above this length.
    full_overview_above_km: Optional[float] = 5.0

    geometries: str = "polyline"  # "polyline" | "geojson"

    def select_config(self, total_km: float) -> SimplificationConfig:
        """
        Pick epsilon/min distance/max points for a path of the given total length.
        """
        epsilon_km, min_distance_km = _lookup(self.distance_buckets, total_km)
        (max_points,) = _lookup(self.point_budgets, total_km)
        return SimplificationConfig(
            epsilon_km=epsilon_km,
            min_distance_km=min_distance_km,
            max_points=max_points,
        )

    def search_radius_m(self, total_km: float) -> int:
        if total_km > self.long_path_km:
            return self.long_path_radius_m
        return self.radius_m

    def overview(self, total_km: float) -> str:
        if self.full_overview_above_km is None or total_km > self.full_overview_above_km:
            return "full"
        return "simplified"

    def validate(self) -> None:
        """
        Basic sanity checks. Called by the preset factories.
        """
        if not self.distance_buckets or not self.point_budgets:
            raise ValueError("distance_buckets and point_budgets must not be empty")

        if self.distance_buckets[-1][0] != INF or self.point_budgets[-1][0] != INF:
            raise ValueError("last bucket must be open-ended (INF)")

        for upper, epsilon_km, min_distance_km in self.distance_buckets:
            SimplificationConfig(epsilon_km, min_distance_km, 2).validate()
            if self.use_rdp and epsilon_km <= 0:
                raise ValueError("epsilon_km must be > 0 when use_rdp is enabled")

        for upper, max_points in self.point_budgets:
            if max_points < 2:
                raise ValueError("max_points must be >= 2")

        if self.use_rdp and self.epsilon_growth <= 1.0:
            raise ValueError("epsilon_growth must be > 1.0")

        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")

        if self.radius_m <= 0 or self.long_path_radius_m <= 0:
            raise ValueError("search radii must be > 0")

        if self.geometries not in ("polyline", "geojson"):
            raise ValueError("geometries must be 'polyline' or 'geojson'")


def _lookup(buckets, total_km: float) -> tuple:
    for bucket in buckets:
        if total_km <= bucket[0]:
            return bucket[1:]
    return buckets[-1][1:]


def precision_policy() -> SimplificationPolicy:
    """
    Default: bucketed parameters, RDP escalation, 30s timeout, polyline geometry.
    """
    p = SimplificationPolicy()
    p.validate()
    return p


def fast_policy() -> SimplificationPolicy:
    """
    Speed-first: fixed 50 m spacing, at most 25 points, no RDP, 5s timeout, geojson geometry.
    """
    p = SimplificationPolicy(
        name="fast",
        distance_buckets=((INF, 0.0, 0.05),),
        point_budgets=((INF, 25),),
        use_rdp=False,
        timeout_s=5.0,
        long_path_radius_m=50,
        full_overview_above_km=None,
        geometries="geojson",
    )
    p.validate()
    return p
