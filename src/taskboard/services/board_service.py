"""Service for board operations called by the presentation layer."""

from __future__ import annotations

import logging

from ..errors import (
    InvalidMoveError,
    OrderingConflictError,
    TaskListNotFoundError,
    TaskNotFoundError,
)
from ..models import BoardConfig, HorizontalMoveTarget, MoveTarget, Task, TaskList
from ..repositories import TaskListRepository, TaskRepository
from ..utils import generate_uid, now_timestamp
from .position_sequencer import PositionSequencer

logger = logging.getLogger(__name__)


class BoardService:
    """Service for adding, editing, moving and deleting tasks of a board."""

    def __init__(
        self,
        task_repository: TaskRepository,
        task_list_repository: TaskListRepository,
        sequencer: PositionSequencer | None = None,
        board_config: BoardConfig | None = None,
    ) -> None:
        self.task_repository = task_repository
        self.task_list_repository = task_list_repository
        self.sequencer = sequencer or PositionSequencer(task_repository)
        self.board_config = board_config or BoardConfig.default()

    # --- Loading ---

    def load_board(self, list_id: str) -> TaskList:
        """Load a list with all its tasks."""
        return self.task_list_repository.load_task_list(list_id)

    def load_columns(self, list_id: str) -> dict[str, list[Task]]:
        """Load a list's tasks grouped by configured column, each sorted by position."""
        return self.load_board(list_id).columns(self.board_config.column_ids)

    def load_lists(self, allowed_list_ids: list[str] | None = None) -> list[TaskList]:
        """Load the metadata of the lists a user may see."""
        return self.task_list_repository.load_list_metadata(allowed_list_ids)

    # --- Task operations ---

    def add_task(
        self,
        list_id: str,
        column: str,
        title: str,
        details: str = "",
        label_ids: list[str] | None = None,
    ) -> str:
        """
        Create a task at the top of a column.

        Returns:
            The new task's ID.
        """
        if self.task_list_repository.get_metadata(list_id) is None:
            raise TaskListNotFoundError(list_id)
        self._ensure_column(column)

        task = Task(
            id=generate_uid(),
            list_id=list_id,
            board_column=column,
            title=title,
            details=details,
            label_ids=list(label_ids or []),
        )
        task = self.sequencer.insert_at_top(list_id, column, task)
        logger.info("Task created: %s (list=%s, column=%s)", task.id, list_id, column)
        return task.id

    def edit_task(
        self,
        task_id: str,
        *,
        title: str | None = None,
        details: str | None = None,
        label_ids: list[str] | None = None,
    ) -> Task:
        """
        Change the content of a task.

        Holds the task's column lock so the save cannot write back a
        position that a concurrent move just changed.
        """
        seen = self._get_task(task_id)
        with self.sequencer.locks.hold(seen.partition):
            task = self._get_task(task_id)
            if task.partition != seen.partition:
                raise OrderingConflictError(
                    f"Task '{task_id}' moved to {task.board_column} while being edited",
                    list_id=task.list_id,
                    column=task.board_column,
                )
            updates: dict = {"updated_at": now_timestamp()}
            if title is not None:
                updates["title"] = title
            if details is not None:
                updates["details"] = details
            if label_ids is not None:
                updates["label_ids"] = list(label_ids)
            task = task.model_copy(update=updates)
            self.task_repository.create_or_update_task(task)

        logger.info("Task edited: %s", task_id)
        return task

    def delete_task(self, list_id: str, task_id: str) -> None:
        """Delete a task and close the gap it leaves in its column."""
        task = self._get_task(task_id, list_id)
        logger.info("Deleting task: %s (list=%s)", task_id, list_id)
        self.sequencer.remove_task(task)

    def move_task_to_column(self, list_id: str, task_id: str, target_column: str) -> Task:
        """Move a task to the top of another column."""
        self._ensure_column(target_column)
        self._get_task(task_id, list_id)
        return self.sequencer.move_to_column(task_id, target_column)

    def move_task_horizontally(
        self,
        list_id: str,
        task_id: str,
        direction: HorizontalMoveTarget | str,
    ) -> Task:
        """Move a task to the neighbouring column; at the board edge nothing changes."""
        task = self._get_task(task_id, list_id)
        if HorizontalMoveTarget(direction) == HorizontalMoveTarget.ONE_LEFT:
            target_column = self.board_config.previous_column(task.board_column)
        else:
            target_column = self.board_config.next_column(task.board_column)

        if target_column is None:
            logger.debug("move_task_horizontally: %s already at board edge", task_id)
            return task
        return self.sequencer.move_to_column(task_id, target_column)

    def move_task_left(self, list_id: str, task_id: str) -> Task:
        """Move task to the previous column (e.g., at_work -> backlog)."""
        return self.move_task_horizontally(list_id, task_id, HorizontalMoveTarget.ONE_LEFT)

    def move_task_right(self, list_id: str, task_id: str) -> Task:
        """Move task to the next column (e.g., backlog -> at_work)."""
        return self.move_task_horizontally(list_id, task_id, HorizontalMoveTarget.ONE_RIGHT)

    def reorder_tasks(self, task_id: str, target_task_id: str) -> None:
        """Swap the positions of two tasks in the same column."""
        self.sequencer.swap(task_id, target_task_id)

    def move_task_to_rank(self, task_id: str, target: MoveTarget | str) -> Task:
        """Move a task to the top or bottom of its column, or one step up or down."""
        return self.sequencer.move_to_target(task_id, MoveTarget(target))

    # --- Integrity ---

    def check_list(self, list_id: str) -> dict[str, list[int]]:
        """
        Check every column of a list for dense positions.

        Returns:
            Column ID -> sorted positions, for each column that is not dense.
        """
        self.load_board(list_id)
        broken: dict[str, list[int]] = {}
        for column in self.board_config.column_ids:
            try:
                self.sequencer.check_partition(list_id, column)
            except OrderingConflictError as e:
                broken[column] = e.positions or []
        return broken

    def repair_list(self, list_id: str) -> int:
        """Renumber every column of a list to 0..K-1. Returns tasks rewritten."""
        self.load_board(list_id)
        return sum(
            self.sequencer.repair_partition(list_id, column)
            for column in self.board_config.column_ids
        )

    # --- Private Methods ---

    def _get_task(self, task_id: str, list_id: str | None = None) -> Task:
        task = self.task_repository.get_task(task_id)
        if task is None or (list_id is not None and task.list_id != list_id):
            logger.debug("Task not found: %s (list=%s)", task_id, list_id)
            raise TaskNotFoundError(task_id, list_id)
        return task

    def _ensure_column(self, column: str) -> None:
        if not self.board_config.has_column(column):
            expected = ", ".join(self.board_config.column_ids)
            raise InvalidMoveError(f"Unknown column '{column}', expected one of {expected}")
