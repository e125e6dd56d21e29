"""SignalState: immutable position -> color mapping plus elapsed seconds in the current cycle."""

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from intersection.core.state.enums import Color, Position, coerce_enum


def _freeze_signals(signals: Mapping[Any, Any]) -> Mapping[Position, Color]:
    """
    Coerce keys to Position and known color names to Color, require exactly the two positions,
    return a read-only view. Other color values are kept as given: the reducer does not judge them.
    """
    frozen = {Position(k): coerce_enum(Color, v) for k, v in signals.items()}
    missing = [p.value for p in Position if p not in frozen]
    if missing:
        raise ValueError(f"signals missing positions: {missing}")
    # Canonical order (north, east) so iteration is stable across states.
    return MappingProxyType({p: frozen[p] for p in Position})


def non_red_positions(signals: Mapping[Position, Color]) -> List[Position]:
    return [p for p in Position if signals.get(p, Color.RED) != Color.RED]


def is_mutually_exclusive(signals: Mapping[Position, Color]) -> bool:
    """True when at most one position shows a non-red color."""
    return len(non_red_positions(signals)) <= 1


@dataclass(frozen=True)
class SignalState:
    """
    Immutable intersection state. A new instance is produced by the reducer for every action;
    callers never mutate a state shared with the store.
    """

    signals: Mapping[Position, Color]
    elapsed_time: int = 0

    def __post_init__(self):
        object.__setattr__(self, "signals", _freeze_signals(self.signals))

    @property
    def active_position(self) -> Optional[Position]:
        return active_position(self)

    def color(self, position: Position) -> Color:
        return self.signals[Position(position)]

    def with_signals(self, signals: Mapping[Position, Color]) -> "SignalState":
        return replace(self, signals=signals)

    def with_elapsed_time(self, elapsed_time: int) -> "SignalState":
        return replace(self, elapsed_time=elapsed_time)

    def as_dict(self) -> Dict[str, Any]:
        """Plain dict (enum values as strings) for logging."""
        out: Dict[str, Any] = {p.value: getattr(c, "value", c) for p, c in self.signals.items()}
        out["elapsed_time"] = self.elapsed_time
        return out


def active_position(state: SignalState) -> Optional[Position]:
    """The position that is not red, or None when every position is red."""
    for position in Position:
        if state.signals[position] != Color.RED:
            return position
    return None
