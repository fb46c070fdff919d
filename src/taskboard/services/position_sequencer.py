"""Dense per-column task ordering."""

from __future__ import annotations

import logging

from ..errors import InvalidMoveError, OrderingConflictError, TaskNotFoundError
from ..models import MoveTarget, Task
from ..repositories import TaskRepository
from ..utils import now_timestamp
from .partition_lock import Partition, PartitionLocks

logger = logging.getLogger(__name__)


def target_rank(current: int, target: MoveTarget | str, size: int) -> int:
    """
    Rank a task should move to within a column of ``size`` tasks.

    Top is rank 0 and bottom is rank ``size - 1``. Steps past either end
    are clamped, so moving the first task up keeps it first.
    """
    target = MoveTarget(target)
    if target == MoveTarget.TOP:
        rank = 0
    elif target == MoveTarget.BOTTOM:
        rank = size - 1
    elif target == MoveTarget.ONE_UP:
        rank = current - 1
    else:
        rank = current + 1
    return _clamp(rank, size)


def _clamp(rank: int, size: int) -> int:
    return max(0, min(rank, size - 1))


class PositionSequencer:
    """
    Keeps task positions dense within each (list, column) partition.

    For K tasks in a partition the positions are exactly 0..K-1. Every
    operation reads the whole partition, computes the new positions of the
    affected tasks and writes them one task at a time; the store offers no
    multi-item writes. While an operation runs it holds the locks of all
    partitions it touches, and each rewrite of an existing task is
    conditional on the task still being where it was read. With
    ``verify_ordering`` the touched partitions are re-read afterwards and
    an OrderingConflictError is raised if they are not dense.

    A failure partway through leaves the writes made so far in place.
    ``repair_partition`` renumbers a damaged partition.
    """

    def __init__(
        self,
        task_repository: TaskRepository,
        locks: PartitionLocks | None = None,
        verify_ordering: bool = True,
    ) -> None:
        self.repository = task_repository
        self.locks = locks or PartitionLocks()
        self.verify_ordering = verify_ordering

    # --- Insert / delete ---

    def insert_at_top(self, list_id: str, column: str, new_task: Task) -> Task:
        """Push every task of the column down one rank and store the new task at rank 0."""
        partition = (list_id, column)
        with self.locks.hold(partition):
            existing = self.repository.get_task(new_task.id)
            if existing is not None:
                raise InvalidMoveError(
                    f"Task '{new_task.id}' already exists in "
                    f"{existing.list_id}/{existing.board_column}"
                )
            snapshot = self.repository.get_partition(list_id, column)

            now = now_timestamp()
            self._shift_all(snapshot, delta=1, now=now)

            task = new_task.model_copy(
                update={
                    "list_id": list_id,
                    "board_column": column,
                    "position": 0,
                    "created_at": new_task.created_at or now,
                    "updated_at": now,
                }
            )
            self.repository.create_or_update_task(task)
            self._verify(partition)

        logger.info(
            "Task inserted at top: %s (%s/%s, %d below)", task.id, list_id, column, len(snapshot)
        )
        return task

    def delete_and_compact(self, list_id: str, column: str, deleted_position: int) -> int:
        """
        Close the gap left by a deleted task.

        Must be called after the delete committed, with the position the
        deleted task had. Returns the number of tasks moved up.
        """
        partition = (list_id, column)
        with self.locks.hold(partition):
            moved = self._compact(list_id, column, deleted_position, now_timestamp())
            self._verify(partition)
        return moved

    def remove_task(self, task: Task) -> None:
        """Delete a task and compact its column while holding the column lock.

        The task is re-read under the lock so compaction uses the position
        it has at deletion time, not the one the caller saw.
        """
        with self.locks.hold(task.partition):
            current = self.repository.get_task(task.id)
            if current is None:
                raise TaskNotFoundError(task.id, task.list_id)
            if current.partition != task.partition:
                raise OrderingConflictError(
                    f"Task '{task.id}' moved to {current.board_column} before it was removed",
                    list_id=current.list_id,
                    column=current.board_column,
                )

            self.repository.delete_task(current.id)
            moved = self._compact(
                current.list_id, current.board_column, current.position, now_timestamp()
            )
            self._verify(current.partition)

        logger.info(
            "Task removed: %s (%s/%s[%d], %d moved up)",
            current.id,
            current.list_id,
            current.board_column,
            current.position,
            moved,
        )

    # --- Moves ---

    def move_to_column(self, task_id: str, target_column: str) -> Task:
        """
        Move a task to the top of another column of the same list.

        Order of writes: push down the target column, store the moved task
        at target rank 0, then compact the source column using the position
        the task had before the move. Moving to the current column is a
        no-op.
        """
        task = self._get(task_id)
        if task.board_column == target_column:
            return task

        source = task.partition
        target = (task.list_id, target_column)
        with self.locks.hold(source, target):
            task = self._get(task_id)
            if task.board_column == target_column:
                return task
            if task.partition != source:
                raise OrderingConflictError(
                    f"Task '{task_id}' moved to {task.board_column} during the move",
                    list_id=task.list_id,
                    column=task.board_column,
                )

            source_column = task.board_column
            source_position = task.position
            now = now_timestamp()

            self._shift_all(
                self.repository.get_partition(task.list_id, target_column), delta=1, now=now
            )

            moved = task.model_copy(
                update={"board_column": target_column, "position": 0, "updated_at": now}
            )
            self._write_position(
                moved, expected_column=source_column, expected_position=source_position
            )

            self._compact(task.list_id, source_column, source_position, now)
            self._verify(source, target)

        logger.info(
            "Task moved: %s (%s[%d] -> %s[0])",
            task_id,
            source_column,
            source_position,
            target_column,
        )
        return moved

    def swap(self, task_id: str, other_task_id: str) -> tuple[Task, Task]:
        """
        Exchange the positions of two tasks of the same column.

        Only these two tasks are written. Swapping a task with itself does
        nothing.
        """
        first = self._get(task_id)
        second = self._get(other_task_id)
        if first.id == second.id:
            return first, second
        if first.partition != second.partition:
            raise InvalidMoveError(
                f"Tasks '{first.id}' and '{second.id}' are not in the same column"
            )

        partition = first.partition
        with self.locks.hold(partition):
            first = self._reread(task_id, partition)
            second = self._reread(other_task_id, partition)

            now = now_timestamp()
            new_first = first.model_copy(update={"position": second.position, "updated_at": now})
            new_second = second.model_copy(update={"position": first.position, "updated_at": now})
            self._write_position(
                new_first, expected_column=first.board_column, expected_position=first.position
            )
            self._write_position(
                new_second, expected_column=second.board_column, expected_position=second.position
            )
            self._verify(first.partition)

        logger.info(
            "Tasks swapped: %s (%d -> %d), %s (%d -> %d)",
            first.id,
            first.position,
            new_first.position,
            second.id,
            second.position,
            new_second.position,
        )
        return new_first, new_second

    def shift_to_rank(self, task_id: str, target_position: int) -> Task:
        """
        Move a task to another rank of its column, shifting the ranks in between.

        Moving up from rank c to p shifts ranks p..c-1 down by one; moving
        down shifts ranks c+1..p up by one. The target is clamped to the
        column. Exactly |c - p| + 1 tasks are written, none if p == c.
        """
        task = self._get(task_id)
        with self.locks.hold(task.partition):
            task = self._reread(task_id, task.partition)
            tasks = self.repository.get_partition(task.list_id, task.board_column)
            self._ensure_dense(task.list_id, task.board_column, tasks)

            current = task.position
            target = _clamp(target_position, len(tasks))
            if target == current:
                logger.debug("shift_to_rank: %s already at %d", task_id, current)
                return task

            if target < current:
                new_positions = {t.id: t.position + 1 for t in tasks[target:current]}
            else:
                new_positions = {t.id: t.position - 1 for t in tasks[current + 1 : target + 1]}
            new_positions[task.id] = target

            now = now_timestamp()
            low, high = min(current, target), max(current, target)
            moved = task
            for t in tasks[low : high + 1]:
                updated = t.model_copy(update={"position": new_positions[t.id], "updated_at": now})
                self._write_position(
                    updated, expected_column=t.board_column, expected_position=t.position
                )
                if t.id == task.id:
                    moved = updated
            self._verify(task.partition)

        logger.info(
            "Task shifted: %s (%s/%s %d -> %d, %d written)",
            task_id,
            task.list_id,
            task.board_column,
            current,
            target,
            high - low + 1,
        )
        return moved

    def move_to_target(self, task_id: str, target: MoveTarget | str) -> Task:
        """Move a task to the top, the bottom, or one rank up or down."""
        task = self._get(task_id)
        with self.locks.hold(task.partition):
            task = self._reread(task_id, task.partition)
            size = len(self.repository.get_partition(task.list_id, task.board_column))
            rank = target_rank(task.position, target, size)
            return self.shift_to_rank(task_id, rank)

    # --- Checks ---

    def check_partition(self, list_id: str, column: str) -> list[Task]:
        """
        Return the partition's tasks if their positions are exactly 0..K-1.

        Raises:
            OrderingConflictError: Positions have gaps or duplicates
        """
        tasks = self.repository.get_partition(list_id, column)
        self._ensure_dense(list_id, column, tasks)
        return tasks

    def repair_partition(self, list_id: str, column: str) -> int:
        """
        Renumber a partition to 0..K-1 keeping its current order.

        Ties between equal positions are broken by task ID. Returns the
        number of tasks rewritten.
        """
        with self.locks.hold((list_id, column)):
            tasks = self.repository.get_partition(list_id, column)
            now = now_timestamp()
            written = 0
            for rank, t in enumerate(tasks):
                if t.position == rank:
                    continue
                self._write_position(
                    t.model_copy(update={"position": rank, "updated_at": now}),
                    expected_column=column,
                    expected_position=t.position,
                )
                written += 1

        if written:
            logger.warning(
                "Partition repaired: %s/%s (%d tasks renumbered)", list_id, column, written
            )
        return written

    # --- Private Methods ---

    def _get(self, task_id: str) -> Task:
        task = self.repository.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def _reread(self, task_id: str, partition: Partition) -> Task:
        """Read a task again once the lock of the partition it was seen in is held."""
        task = self._get(task_id)
        if task.partition != partition:
            list_id, column = partition
            raise OrderingConflictError(
                f"Task '{task_id}' left {list_id}/{column} before the column was locked",
                list_id=task.list_id,
                column=task.board_column,
            )
        return task

    def _write_position(
        self, task: Task, *, expected_column: str, expected_position: int
    ) -> None:
        # Source and target partition must both be locked by this thread
        for list_id, column in {task.partition, (task.list_id, expected_column)}:
            if not self.locks.is_held((list_id, column)):
                raise OrderingConflictError(
                    f"Refusing to reposition '{task.id}': {list_id}/{column} is not locked",
                    list_id=list_id,
                    column=column,
                )
        self.repository.update_position(
            task, expected_column=expected_column, expected_position=expected_position
        )

    def _shift_all(self, tasks: list[Task], delta: int, now: str) -> None:
        """Move every task of a snapshot by ``delta`` ranks."""
        for t in tasks:
            self._write_position(
                t.model_copy(update={"position": t.position + delta, "updated_at": now}),
                expected_column=t.board_column,
                expected_position=t.position,
            )

    def _compact(self, list_id: str, column: str, deleted_position: int, now: str) -> int:
        """Move up every task ranked below ``deleted_position``."""
        below = [
            t
            for t in self.repository.get_partition(list_id, column)
            if t.position > deleted_position
        ]
        self._shift_all(below, delta=-1, now=now)
        logger.debug(
            "Compacted %s/%s below %d: %d tasks", list_id, column, deleted_position, len(below)
        )
        return len(below)

    def _ensure_dense(self, list_id: str, column: str, tasks: list[Task]) -> None:
        positions = sorted(t.position for t in tasks)
        if positions != list(range(len(tasks))):
            logger.error("Partition %s/%s is not dense: %s", list_id, column, positions)
            raise OrderingConflictError(
                f"Positions in {list_id}/{column} are not 0..{len(tasks) - 1}: {positions}",
                list_id=list_id,
                column=column,
                positions=positions,
            )

    def _verify(self, *partitions: Partition) -> None:
        if not self.verify_ordering:
            return
        for list_id, column in partitions:
            self.check_partition(list_id, column)
