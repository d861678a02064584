from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Tuple

from .models import SnapState


class SnapStateException(Exception):
    """Raised when an invalid state transition is attempted."""
    pass


ALLOWED_TRANSITIONS: Dict[SnapState, FrozenSet[SnapState]] = {
    SnapState.IDLE: frozenset({SnapState.VALIDATING}),
    SnapState.VALIDATING: frozenset({SnapState.SIMPLIFYING, SnapState.FAILED}),
    SnapState.SIMPLIFYING: frozenset({SnapState.REQUESTING}),
    SnapState.REQUESTING: frozenset({SnapState.MATCHED, SnapState.DEGRADED}),
    SnapState.MATCHED: frozenset({SnapState.DONE}),
    SnapState.DEGRADED: frozenset({SnapState.DONE}),
    SnapState.DONE: frozenset(),
    SnapState.FAILED: frozenset(),
}


def can_transition(current: SnapState, target: SnapState) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def transition(current: SnapState, target: SnapState) -> SnapState:
    if not can_transition(current, target):
        raise SnapStateException(f"Cannot transition snap from {current.value} to {target.value}")
    return target


@dataclass
class SnapTrace:
    """
    Records the states one snap call has visited, starting at IDLE.
    """
    states: List[SnapState] = field(default_factory=lambda: [SnapState.IDLE])

    @property
    def current(self) -> SnapState:
        return self.states[-1]

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self.current]

    def advance(self, target: SnapState) -> SnapState:
        self.states.append(transition(self.current, target))
        return target

    def as_tuple(self) -> Tuple[SnapState, ...]:
        return tuple(self.states)
