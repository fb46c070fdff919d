"""Configuration."""

from .settings import TABLE_LABELS, TABLE_TASK_LIST_METADATA, TABLE_TASKS, Settings

__all__ = [
    "TABLE_LABELS",
    "TABLE_TASKS",
    "TABLE_TASK_LIST_METADATA",
    "Settings",
]
