#Expose the road snapping pipeline pieces:
#Outcome models (SnapOk / SnapFailure)
#State machine for one snap call
#snap_to_road orchestrator (the "one call" entry point)

from .models import SnapFailure, SnapOk, SnapOutcome, SnapState
from .state_machine import SnapStateException, SnapTrace
from .service import snap_to_road #the main function to call to snap a drawn path

__all__ = [
    "SnapFailure",
    "SnapOk",
    "SnapOutcome",
    "SnapState",
    "SnapStateException",
    "SnapTrace",
    "snap_to_road",
]
