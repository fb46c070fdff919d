"""Repository layer for data access."""

from .labels import LabelRepository
from .task_lists import TaskListRepository
from .tasks import TaskRepository

__all__ = [
    "LabelRepository",
    "TaskListRepository",
    "TaskRepository",
]
