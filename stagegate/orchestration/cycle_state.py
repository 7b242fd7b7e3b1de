"""Formal per-cycle state model (idle/invalidated/compiling/merging/success/failure)."""

from __future__ import annotations

from enum import Enum

from .logging import get_logger

_LOG = get_logger("orchestration.cycle_state")


class CycleState(str, Enum):
    """Runtime state of the compile cycle currently owned by the orchestrator."""

    IDLE = "idle"
    INVALIDATED = "invalidated"
    COMPILING = "compiling"
    MERGING = "merging"
    SUCCESS = "success"
    FAILURE = "failure"


# Success and failure are transient: both settle back to idle once reported.
# The initial cycle starts at compiling without an invalidation.
_ALLOWED: dict[CycleState, frozenset[CycleState]] = {
    CycleState.IDLE: frozenset({CycleState.INVALIDATED, CycleState.COMPILING}),
    CycleState.INVALIDATED: frozenset({CycleState.INVALIDATED, CycleState.COMPILING}),
    CycleState.COMPILING: frozenset({CycleState.MERGING, CycleState.FAILURE}),
    CycleState.MERGING: frozenset({CycleState.SUCCESS, CycleState.FAILURE}),
    CycleState.SUCCESS: frozenset({CycleState.IDLE}),
    CycleState.FAILURE: frozenset({CycleState.IDLE}),
}


class InvalidTransition(RuntimeError):
    """Raised when the engine's hook ordering breaks the cycle state machine."""


class CycleStateMachine:
    """Tracks the current state and the history of the running cycle."""

    def __init__(self) -> None:
        self.state = CycleState.IDLE
        self.history: list[CycleState] = [CycleState.IDLE]

    def transition(self, target: CycleState) -> None:
        if target not in _ALLOWED[self.state]:
            raise InvalidTransition(f"{self.state.value} -> {target.value}")
        _LOG.debug("cycle state: %s -> %s", self.state.value, target.value)
        self.state = target
        if target == CycleState.IDLE:
            self.history = [CycleState.IDLE]
        else:
            self.history.append(target)

    def settle(self) -> None:
        """Return to idle after a success/failure verdict has been reported."""
        if self.state in (CycleState.SUCCESS, CycleState.FAILURE):
            self.transition(CycleState.IDLE)


def is_valid_state_history(history: list[str]) -> bool:
    """Validate that a recorded history follows allowed transitions from idle."""
    if not history or history[0] != CycleState.IDLE.value:
        return False
    try:
        states = [CycleState(h) for h in history]
    except ValueError:
        return False
    return all(b in _ALLOWED[a] for a, b in zip(states, states[1:]))
