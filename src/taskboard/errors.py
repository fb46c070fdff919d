"""Exception hierarchy for taskboard."""

from __future__ import annotations


class TaskboardError(Exception):
    """Base exception for taskboard errors."""

    pass


class NotFoundError(TaskboardError):
    """An id does not resolve to a stored record."""

    pass


class ItemNotFoundError(NotFoundError):
    """The store has no item under the given key."""

    pass


class TaskNotFoundError(NotFoundError):
    """Task does not exist."""

    def __init__(self, task_id: str, list_id: str | None = None) -> None:
        self.task_id = task_id
        self.list_id = list_id
        if list_id:
            message = f"Task '{task_id}' not found in list '{list_id}'"
        else:
            message = f"Task '{task_id}' not found"
        super().__init__(message)


class TaskListNotFoundError(NotFoundError):
    """Task list does not exist."""

    def __init__(self, list_id: str) -> None:
        self.list_id = list_id
        super().__init__(f"Task list '{list_id}' not found")


class LabelNotFoundError(NotFoundError):
    """Label does not exist."""

    def __init__(self, label_id: str) -> None:
        self.label_id = label_id
        super().__init__(f"Label '{label_id}' not found")


class StoreError(TaskboardError):
    """Base exception for store gateway failures."""

    pass


class StoreUnavailableError(StoreError):
    """The document store could not be reached or rejected the call."""

    pass


class ConditionFailedError(StoreError):
    """A conditional write did not match the stored item."""

    pass


class OrderingConflictError(TaskboardError):
    """A partition's positions are not a dense 0..K-1 sequence.

    Raised when a concurrent writer changed a task between our read and our
    write, when the partition lock could not be acquired in time, or when
    the post-operation density check fails.
    """

    def __init__(
        self,
        message: str,
        list_id: str | None = None,
        column: str | None = None,
        positions: list[int] | None = None,
    ) -> None:
        self.list_id = list_id
        self.column = column
        self.positions = positions
        super().__init__(message)


class InvalidMoveError(TaskboardError):
    """The requested move makes no sense for the given tasks or columns."""

    pass


class LabelInUseError(TaskboardError):
    """Label is still referenced by tasks and cannot be deleted."""

    def __init__(self, label_id: str, count: int) -> None:
        self.label_id = label_id
        self.count = count
        super().__init__(f"Label '{label_id}' is used by {count} task(s)")
