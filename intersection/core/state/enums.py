"""Signal domain enums: the two controlled positions and their light colors."""

import enum
from typing import Any


class Position(str, enum.Enum):
    """One of the two controlled traffic directions."""

    NORTH = "north"
    EAST = "east"

    @property
    def next(self) -> "Position":
        """Position that turns green after this one."""
        return next_position(self)


class Color(str, enum.Enum):
    """Signal color of a position."""

    GREEN = "green"
    AMBER = "amber"
    RED = "red"


def next_position(position: Position) -> Position:
    return Position.NORTH if position == Position.EAST else Position.EAST


def coerce_enum(enum_cls, value: Any) -> Any:
    """Enum member for value when it names one; value unchanged otherwise."""
    try:
        return enum_cls(value)
    except ValueError:
        return value
