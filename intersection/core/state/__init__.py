"""Signal state: position/color enums and the immutable state value."""

from .enums import Color, Position, coerce_enum, next_position
from .snapshot import (
    SignalState,
    active_position,
    is_mutually_exclusive,
    non_red_positions,
)

__all__ = [
    "Color",
    "Position",
    "coerce_enum",
    "next_position",
    "SignalState",
    "active_position",
    "is_mutually_exclusive",
    "non_red_positions",
]
