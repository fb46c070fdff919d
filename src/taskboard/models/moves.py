"""Move targets for repositioning tasks."""

from enum import Enum


class MoveTarget(str, Enum):
    """Where to move a task within its column."""

    TOP = "top"
    BOTTOM = "bottom"
    ONE_UP = "one_up"
    ONE_DOWN = "one_down"


class HorizontalMoveTarget(str, Enum):
    """Which neighbouring column to move a task to."""

    ONE_LEFT = "one_left"
    ONE_RIGHT = "one_right"
