"""Task repository on top of a store gateway."""

from __future__ import annotations

import logging

from ..config import TABLE_TASKS, Settings
from ..errors import (
    ConditionFailedError,
    ItemNotFoundError,
    OrderingConflictError,
    TaskNotFoundError,
)
from ..models import Task
from ..store import StoreGateway, scan_all

logger = logging.getLogger(__name__)

# Fields rewritten when saving an existing task; id, listId and createdAt never change
_UPDATABLE_FIELDS = ("title", "details", "boardColumn", "position", "labelIds", "updatedAt")


class TaskRepository:
    """
    Repository for task records.

    Tasks are keyed by id alone (ids are globally unique). Fetching the
    tasks of one list is a full scan filtered in memory; the store has no
    secondary index for it.
    """

    def __init__(self, store: StoreGateway, settings: Settings | None = None) -> None:
        """
        Initialize repository.

        Args:
            store: Store gateway holding the tasks table
            settings: Settings used to derive the table name (defaults from environment)
        """
        self.store = store
        self.table = (settings or Settings()).table_name(TABLE_TASKS)

    def get_task(self, task_id: str) -> Task | None:
        """Load a single task by ID."""
        item = self.store.get(self.table, {"id": task_id})
        if item is None:
            logger.debug("Task not found: %s", task_id)
            return None
        return Task.from_item(item)

    def get_tasks_for_list(self, list_id: str) -> list[Task]:
        """All tasks of a list, in no particular order."""
        return [
            Task.from_item(item)
            for item in scan_all(self.store, self.table)
            if item.get("listId") == list_id
        ]

    def get_partition(self, list_id: str, column: str) -> list[Task]:
        """Tasks of one list and column, sorted by position."""
        tasks = [t for t in self.get_tasks_for_list(list_id) if t.board_column == column]
        return sorted(tasks, key=lambda t: (t.position, t.id))

    def create_or_update_task(self, task: Task) -> Task:
        """
        Create the task, or overwrite its mutable fields if it exists.

        This is a read followed by a write, not an atomic upsert: two callers
        creating the same id at once can both see "missing" and both put,
        the last put winning.
        """
        item = task.to_item()
        existing = self.store.get(self.table, {"id": task.id})
        if existing is None:
            self.store.put(self.table, item)
            logger.debug("Task inserted: %s", task.id)
        else:
            fields = {name: item[name] for name in _UPDATABLE_FIELDS if name in item}
            self.store.update(self.table, {"id": task.id}, fields)
            logger.debug("Task updated: %s", task.id)
        return task

    def update_board_column(self, task: Task) -> Task:
        """Write column, position and updatedAt of an existing task."""
        fields = {"boardColumn": task.board_column, "position": task.position}
        if task.updated_at:
            fields["updatedAt"] = task.updated_at
        try:
            self.store.update(self.table, {"id": task.id}, fields)
        except ItemNotFoundError as e:
            raise TaskNotFoundError(task.id, task.list_id) from e
        return task

    def update_position(
        self,
        task: Task,
        *,
        expected_column: str,
        expected_position: int,
    ) -> Task:
        """
        Write column, position and updatedAt if the stored task is unchanged.

        The write only succeeds while the stored task still sits at
        ``expected_column``/``expected_position``, i.e. where it was when the
        caller read it.

        Raises:
            TaskNotFoundError: The task was deleted in the meantime
            OrderingConflictError: The task was moved in the meantime
        """
        fields = {"boardColumn": task.board_column, "position": task.position}
        if task.updated_at:
            fields["updatedAt"] = task.updated_at
        try:
            self.store.update(
                self.table,
                {"id": task.id},
                fields,
                expected={"boardColumn": expected_column, "position": expected_position},
            )
        except ItemNotFoundError as e:
            raise TaskNotFoundError(task.id, task.list_id) from e
        except ConditionFailedError as e:
            raise OrderingConflictError(
                f"Task '{task.id}' is no longer at {expected_column}[{expected_position}]",
                list_id=task.list_id,
                column=expected_column,
            ) from e
        logger.debug(
            "Task repositioned: %s %s[%d] -> %s[%d]",
            task.id,
            expected_column,
            expected_position,
            task.board_column,
            task.position,
        )
        return task

    def delete_task(self, task_id: str) -> None:
        """
        Delete a task by ID.

        Raises:
            TaskNotFoundError: No task with this ID exists
        """
        if self.store.get(self.table, {"id": task_id}) is None:
            raise TaskNotFoundError(task_id)
        self.store.delete(self.table, {"id": task_id})
        logger.debug("Task deleted: %s", task_id)
