"""Actions dispatched to the store. Immutable, consumed once by the reducer."""

from dataclasses import dataclass
from typing import Union

from intersection.core.state.enums import Color, Position


@dataclass(frozen=True)
class ChangeColor:
    """Set position to new_color; every other position goes red."""

    position: Position
    new_color: Color


@dataclass(frozen=True)
class IncrementTime:
    """Advance elapsed time by one second, wrapping at cycle (must be > 0)."""

    cycle: int


Action = Union[ChangeColor, IncrementTime]
