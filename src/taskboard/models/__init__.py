"""Data models."""

from .board_config import BoardConfig, ColumnConfig
from .label import Label
from .moves import HorizontalMoveTarget, MoveTarget
from .task import (
    COLUMN_AT_WORK,
    COLUMN_BACKLOG,
    COLUMN_FINISHED,
    Task,
)
from .task_list import TaskList, TaskListMetadata

__all__ = [
    "COLUMN_AT_WORK",
    "COLUMN_BACKLOG",
    "COLUMN_FINISHED",
    "BoardConfig",
    "ColumnConfig",
    "HorizontalMoveTarget",
    "Label",
    "MoveTarget",
    "Task",
    "TaskList",
    "TaskListMetadata",
]
