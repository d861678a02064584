# simplification/engine.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from geometry.distance import LatLon, path_length_km
from geometry.filters import decimate, distance_filter
from geometry.rdp import rdp_simplify

from .policy import SimplificationConfig, SimplificationPolicy, precision_policy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimplificationResult:
    """
    Output of the simplification pipeline for one path.
    """
    path: List[LatLon]
    config: SimplificationConfig
    total_km: float

    # Diagnostics
    filtered_points: int = 0
    rdp_rounds: int = 0
    decimated: bool = False


def run_simplification(
    path: Sequence[LatLon],
    policy: Optional[SimplificationPolicy] = None,
    *,
    total_km: Optional[float] = None,
) -> SimplificationResult:
    """
    Reduce a raw drawn path to at most `max_points` points while keeping its shape.

    Steps (shared by every policy):
      1. distance filter with the selected min_distance_km
      2. if the policy uses RDP and the path is still over budget: RDP with an
         epsilon that grows by `epsilon_growth` each round, until the path fits
         or epsilon passes `max_epsilon_km`
      3. if still over budget: uniform decimation

    The input is never mutated. First and last points survive every step.
    """
    policy = policy or precision_policy()
    if total_km is None:
        total_km = path_length_km(path)

    config = policy.select_config(total_km)
    max_points = config.max_points

    filtered = distance_filter(path, config.min_distance_km)
    simplified = filtered

    rounds = 0
    if policy.use_rdp and len(simplified) > max_points:
        epsilon_km = config.epsilon_km
        while len(simplified) > max_points and epsilon_km <= policy.max_epsilon_km:
            simplified = rdp_simplify(filtered, epsilon_km)
            rounds += 1
            epsilon_km *= policy.epsilon_growth

    decimated = False
    if len(simplified) > max_points:
        simplified = decimate(simplified, max_points)
        decimated = True

    logger.debug(
        "simplified path (%s): %d -> %d points (filtered=%d, rdp_rounds=%d, decimated=%s, %.2f km)",
        policy.name, len(path), len(simplified), len(filtered), rounds, decimated, total_km,
    )

    return SimplificationResult(
        path=simplified,
        config=config,
        total_km=total_km,
        filtered_points=len(filtered),
        rdp_rounds=rounds,
        decimated=decimated,
    )


def simplify_path(
    path: Sequence[LatLon],
    policy: Optional[SimplificationPolicy] = None,
) -> List[LatLon]:
    """Convenience wrapper returning only the simplified path."""
    return run_simplification(path, policy).path
