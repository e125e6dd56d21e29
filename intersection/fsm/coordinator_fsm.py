"""Coordinator lifecycle FSM: IDLE -> RUNNING <-> PAUSED.

Transition implementation (engine/coordinator.py):
- IDLE -> RUNNING: start() (first tick, then tick source started)
- RUNNING -> PAUSED: pause() or presenter toggle while running
- PAUSED -> RUNNING: resume() or presenter toggle while paused
RUNNING -> RUNNING is not a transition: resume() while running only replaces the tick source.
"""

import enum
import logging
from typing import Callable, Optional

from intersection.core.logging_utils import log_fsm_transition

logger = logging.getLogger(__name__)


class CoordinatorState(str, enum.Enum):
    """Coordinator lifecycle states."""

    IDLE = "idle"  # constructed, start() not called yet
    RUNNING = "running"  # periodic tick active
    PAUSED = "paused"  # ticking suspended, signal state retained


# Valid transitions: from_state -> set of allowed to_states
_TRANSITIONS: dict[CoordinatorState, set[CoordinatorState]] = {
    CoordinatorState.IDLE: {CoordinatorState.RUNNING},
    CoordinatorState.RUNNING: {CoordinatorState.PAUSED},
    CoordinatorState.PAUSED: {CoordinatorState.RUNNING},
}


class CoordinatorFSM:
    """Tracks coordinator lifecycle state and validates transitions."""

    def __init__(
        self,
        on_transition: Optional[Callable[[CoordinatorState, CoordinatorState], None]] = None,
    ):
        self._current = CoordinatorState.IDLE
        self._on_transition = on_transition

    @property
    def current(self) -> CoordinatorState:
        return self._current

    def can_transition_to(self, to_state: CoordinatorState) -> bool:
        allowed = _TRANSITIONS.get(self._current, set())
        return to_state in allowed

    def transition(self, to_state: CoordinatorState, event: str = "") -> bool:
        """
        Transition to new state if valid. Returns True on success, False otherwise.
        Calls on_transition(from, to) callback if provided.
        """
        if not self.can_transition_to(to_state):
            logger.warning(
                "Invalid transition: %s -> %s (allowed: %s)",
                self._current.value,
                to_state.value,
                [s.value for s in _TRANSITIONS.get(self._current, set())],
            )
            return False
        from_state = self._current
        self._current = to_state
        log_fsm_transition(from_state.value, to_state.value, event or to_state.value)
        if self._on_transition:
            try:
                self._on_transition(from_state, to_state)
            except Exception as e:
                logger.debug("on_transition callback error: %s", e)
        return True

    def is_running(self) -> bool:
        return self._current == CoordinatorState.RUNNING

    def is_paused(self) -> bool:
        return self._current == CoordinatorState.PAUSED

    def is_started(self) -> bool:
        """True once start() has moved the coordinator out of IDLE."""
        return self._current != CoordinatorState.IDLE
