"""
Purpose: The "one call" entry point for snapping a hand-drawn path to roads.
What it does:
- validates the drawn path (the only hard failure: fewer than 2 points)
- picks simplification parameters from the policy and shrinks the path
- issues exactly one OSRM /match request with the policy's timeout
- turns every service or network problem into a degraded success that
  carries the original drawing and a warning

Rule: never block the user from saving their route because OSRM is flaky.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import requests

from geometry.distance import LatLon, path_length_km
from routing.osrm_client import OSRMClient, OSRMError, OSRMNoMatchError
from simplification.engine import run_simplification
from simplification.policy import SimplificationPolicy, precision_policy

from .models import (
    REASON_PATH_TOO_SHORT,
    WARNING_NO_MATCH,
    WARNING_TIMEOUT,
    WARNING_UNAVAILABLE,
    SnapFailure,
    SnapOk,
    SnapOutcome,
    SnapState,
)
from .state_machine import SnapTrace

logger = logging.getLogger(__name__)


def snap_to_road(
        osrm: OSRMClient,
        path: Sequence[LatLon],
        *,
        policy: Optional[SimplificationPolicy] = None,
) -> SnapOutcome:
    """
    Snap a drawn (lat, lon) path to the road network.

    Args:
        osrm: OSRMClient instance (HTTP adapter)
        path: raw drawn path, in drawing order
        policy: simplification/request policy (defaults to precision_policy())

    Returns:
        SnapFailure if the path has fewer than 2 points (no request is made),
        otherwise SnapOk. SnapOk.warning is set when the original path is
        returned instead of a matched one.
    """
    policy = policy or precision_policy()
    original: List[LatLon] = list(path)
    trace = SnapTrace()

    trace.advance(SnapState.VALIDATING)
    if len(original) < 2:
        trace.advance(SnapState.FAILED)
        return SnapFailure(reason=REASON_PATH_TOO_SHORT, states=trace.as_tuple())

    trace.advance(SnapState.SIMPLIFYING)
    total_km = path_length_km(original)
    simplified = run_simplification(original, policy, total_km=total_km)
    request_path = simplified.path

    radius_m = policy.search_radius_m(total_km)
    trace.advance(SnapState.REQUESTING)

    warning: Optional[str] = None
    snapped: List[LatLon] = original
    try:
        snapped = osrm.match(
            request_path,
            [radius_m] * len(request_path),
            overview=policy.overview(total_km),
            geometries=policy.geometries,
            timeout=policy.timeout_s,
        )
    except OSRMNoMatchError as e:
        logger.warning("road snapping found no match: %s", e)
        warning = WARNING_NO_MATCH
    except requests.Timeout:
        logger.warning("road snapping timed out after %.1fs", policy.timeout_s)
        warning = WARNING_TIMEOUT
    except (requests.RequestException, OSRMError) as e:
        logger.warning("road snapping service unavailable: %s", e)
        warning = WARNING_UNAVAILABLE

    if warning is None:
        trace.advance(SnapState.MATCHED)
        logger.info(
            "snapped %d drawn points (%d sent, %.2f km, %s policy) to %d road points",
            len(original), len(request_path), total_km, policy.name, len(snapped),
        )
    else:
        trace.advance(SnapState.DEGRADED)
        snapped = original

    trace.advance(SnapState.DONE)
    return SnapOk(
        snapped_path=snapped,
        warning=warning,
        request_points=len(request_path),
        states=trace.as_tuple(),
    )
