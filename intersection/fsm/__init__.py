"""FSM package: store actions and coordinator lifecycle."""

from intersection.fsm.coordinator_fsm import CoordinatorFSM, CoordinatorState
from intersection.fsm.events import Action, ChangeColor, IncrementTime

__all__ = [
    "Action",
    "ChangeColor",
    "IncrementTime",
    "CoordinatorFSM",
    "CoordinatorState",
]
