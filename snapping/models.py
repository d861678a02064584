"""
Purpose: Result and state models for road snapping.
What it does:
- SnapState: the states a single snap call moves through
- SnapOk / SnapFailure: the tagged outcome returned to callers

Only a structural input error becomes a SnapFailure. Every service-side or
network problem is a SnapOk carrying the original path and a warning.

Rule: No HTTP, no simplification logic. Models only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from geometry.distance import LatLon

# Warnings attached to degraded (original path) outcomes
WARNING_NO_MATCH = "could not snap to road network"
WARNING_TIMEOUT = "road snapping timed out"
WARNING_UNAVAILABLE = "road snapping service unavailable"

REASON_PATH_TOO_SHORT = "path too short"


class SnapState(Enum):
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    SIMPLIFYING = "SIMPLIFYING"
    REQUESTING = "REQUESTING"
    MATCHED = "MATCHED"
    DEGRADED = "DEGRADED"
    DONE = "DONE"
    FAILED = "FAILED"


@dataclass(frozen=True)
class SnapOk:
    """
    The call succeeded. `warning` is set when snapped_path is the original
    drawing rather than a road-matched path.
    """
    snapped_path: List[LatLon]
    warning: Optional[str] = None

    # Diagnostics
    request_points: int = 0
    states: Tuple[SnapState, ...] = field(default=())

    @property
    def success(self) -> bool:
        return True

    @property
    def degraded(self) -> bool:
        return self.warning is not None


@dataclass(frozen=True)
class SnapFailure:
    """
    The input itself is unusable. No request was made.
    """
    reason: str
    states: Tuple[SnapState, ...] = field(default=())

    @property
    def success(self) -> bool:
        return False


SnapOutcome = Union[SnapOk, SnapFailure]
