"""Pure reducer: (state, action) -> next state. Never mutates its input."""

from intersection.core.state.enums import Color, Position
from intersection.core.state.snapshot import SignalState
from intersection.fsm.events import ChangeColor, IncrementTime


def reduce(state: SignalState, action) -> SignalState:
    """
    ChangeColor: the named position takes new_color and every other position goes red,
    which is the only rule needed to keep at most one position non-red.
    IncrementTime: elapsed_time = (elapsed_time + 1) % cycle.
    Unknown actions return state unchanged.
    """
    if isinstance(action, ChangeColor):
        signals = {
            p: (action.new_color if p == action.position else Color.RED) for p in Position
        }
        return state.with_signals(signals)
    if isinstance(action, IncrementTime):
        return state.with_elapsed_time((state.elapsed_time + 1) % action.cycle)
    return state
