"""Tests for PositionSequencer."""

import pytest

from taskboard.config import Settings
from taskboard.errors import InvalidMoveError, OrderingConflictError, TaskNotFoundError
from taskboard.models import COLUMN_AT_WORK, COLUMN_BACKLOG, MoveTarget, Task
from taskboard.repositories import TaskRepository
from taskboard.services import PositionSequencer, target_rank
from taskboard.store import InMemoryStore

LIST_ID = "list-1"


@pytest.fixture
def store() -> InMemoryStore:
    """Create an in-memory store with small scan pages."""
    return InMemoryStore(page_size=3)


@pytest.fixture
def repo(store: InMemoryStore) -> TaskRepository:
    """Create a task repository on the store."""
    return TaskRepository(store, Settings(env_name="test"))


@pytest.fixture
def sequencer(repo: TaskRepository) -> PositionSequencer:
    """Create a sequencer with post-condition checks."""
    return PositionSequencer(repo)


def seed(repo: TaskRepository, task_ids: list[str], column: str = COLUMN_BACKLOG,
         list_id: str = LIST_ID) -> None:
    """Helper to store tasks at positions 0..K-1 in the given order."""
    for position, task_id in enumerate(task_ids):
        repo.create_or_update_task(
            Task(
                id=task_id,
                list_id=list_id,
                board_column=column,
                position=position,
                title=task_id.upper(),
            )
        )


def order(repo: TaskRepository, column: str = COLUMN_BACKLOG,
          list_id: str = LIST_ID) -> list[tuple[str, int]]:
    """Helper returning (id, position) pairs of a partition, sorted by position."""
    return [(t.id, t.position) for t in repo.get_partition(list_id, column)]


def updates(store: InMemoryStore, repo: TaskRepository) -> int:
    """Number of update calls on the tasks table."""
    return store.count_calls("update", repo.table)


class TestInsertAtTop:
    """Tests for insert_at_top."""

    def test_insert_into_empty_column(self, sequencer: PositionSequencer, repo: TaskRepository):
        """The first task of a column gets position 0."""
        task = sequencer.insert_at_top(LIST_ID, COLUMN_BACKLOG, Task(id="n", list_id=LIST_ID))

        assert task.position == 0
        assert order(repo) == [("n", 0)]

    def test_insert_pushes_existing_tasks_down(
        self, sequencer: PositionSequencer, repo: TaskRepository
    ):
        """Every prior task moves down by exactly one; K grows by one."""
        seed(repo, ["a", "b", "c"])

        sequencer.insert_at_top(LIST_ID, COLUMN_BACKLOG, Task(id="n", list_id=LIST_ID))

        assert order(repo) == [("n", 0), ("a", 1), ("b", 2), ("c", 3)]

    def test_insert_leaves_other_partitions_alone(
        self, sequencer: PositionSequencer, repo: TaskRepository
    ):
        """Tasks in other columns and other lists keep their positions."""
        seed(repo, ["a", "b"])
        seed(repo, ["x", "y"], column=COLUMN_AT_WORK)
        seed(repo, ["o"], list_id="list-2")

        sequencer.insert_at_top(LIST_ID, COLUMN_BACKLOG, Task(id="n", list_id=LIST_ID))

        assert order(repo, COLUMN_AT_WORK) == [("x", 0), ("y", 1)]
        assert order(repo, list_id="list-2") == [("o", 0)]

    def test_insert_sets_partition_and_timestamps(
        self, sequencer: PositionSequencer, repo: TaskRepository
    ):
        """The stored task belongs to the requested partition and has timestamps."""
        new_task = Task(id="n", list_id="ignored", board_column=COLUMN_AT_WORK, position=7)

        task = sequencer.insert_at_top(LIST_ID, COLUMN_BACKLOG, new_task)

        stored = repo.get_task("n")
        assert stored == task
        assert stored.list_id == LIST_ID
        assert stored.board_column == COLUMN_BACKLOG
        assert stored.position == 0
        assert stored.created_at is not None
        assert stored.updated_at is not None

    def test_insert_existing_id_is_rejected(
        self, sequencer: PositionSequencer, repo: TaskRepository
    ):
        """Inserting a task that is already in the column fails before any write."""
        seed(repo, ["a", "b"])

        with pytest.raises(InvalidMoveError):
            sequencer.insert_at_top(LIST_ID, COLUMN_BACKLOG, Task(id="b", list_id=LIST_ID))

        assert order(repo) == [("a", 0), ("b", 1)]

    def test_insert_id_from_other_column_is_rejected(
        self, sequencer: PositionSequencer, repo: TaskRepository
    ):
        """A task ID used anywhere else cannot be inserted, so no column is left with a gap."""
        seed(repo, ["a"])
        seed(repo, ["x", "y", "z"], column=COLUMN_AT_WORK)

        with pytest.raises(InvalidMoveError, match="already exists"):
            sequencer.insert_at_top(LIST_ID, COLUMN_BACKLOG, Task(id="y", list_id=LIST_ID))

        assert order(repo) == [("a", 0)]
        assert order(repo, COLUMN_AT_WORK) == [("x", 0), ("y", 1), ("z", 2)]


class TestDeleteAndCompact:
    """Tests for delete_and_compact and remove_task."""

    def test_compact_closes_gap(
        self, sequencer: PositionSequencer, repo: TaskRepository
    ):
        """Tasks below the deleted position move up by one."""
        seed(repo, ["a", "b", "c", "d"])
        repo.delete_task("b")

        moved = sequencer.delete_and_compact(LIST_ID, COLUMN_BACKLOG, 1)

        assert moved == 2
        assert order(repo) == [("a", 0), ("c", 1), ("d", 2)]

    def test_compact_after_deleting_last_task_writes_nothing(
        self, sequencer: PositionSequencer, repo: TaskRepository, store: InMemoryStore
    ):
        """Deleting the bottom task leaves nothing to move."""
        seed(repo, ["a", "b", "c"])
        repo.delete_task("c")
        store.reset_calls()

        moved = sequencer.delete_and_compact(LIST_ID, COLUMN_BACKLOG, 2)

        assert moved == 0
        assert updates(store, repo) == 0
        assert order(repo) == [("a", 0), ("b", 1)]

    def test_remove_task_deletes_and_compacts(
        self, sequencer: PositionSequencer, repo: TaskRepository
    ):
        """remove_task deletes the task and renumbers the rest."""
        seed(repo, ["a", "b", "c"])

        sequencer.remove_task(repo.get_task("a"))

        assert repo.get_task("a") is None
        assert order(repo) == [("b", 0), ("c", 1)]

    def test_remove_task_uses_current_position(
        self, sequencer: PositionSequencer, repo: TaskRepository
    ):
        """A stale position on the caller's copy does not mis-number the column."""
        seed(repo, ["a", "b", "c"])
        stale = repo.get_task("c").model_copy(update={"position": 0})

        sequencer.remove_task(stale)

        assert order(repo) == [("a", 0), ("b", 1)]

    def test_remove_missing_task_raises(self, sequencer: PositionSequencer):
        """Removing a task that does not exist raises TaskNotFoundError."""
        with pytest.raises(TaskNotFoundError):
            sequencer.remove_task(Task(id="ghost", list_id=LIST_ID))


class TestMoveToColumn:
    """Tests for move_to_column."""

    def test_move_conserves_both_columns(
        self, sequencer: PositionSequencer, repo: TaskRepository
    ):
        """Source loses one task, target gains it at the top, both stay dense."""
        seed(repo, ["a", "b", "c"])
        seed(repo, ["x", "y"], column=COLUMN_AT_WORK)

        moved = sequencer.move_to_column("b", COLUMN_AT_WORK)

        assert moved.board_column == COLUMN_AT_WORK
        assert moved.position == 0
        assert order(repo) == [("a", 0), ("c", 1)]
        assert order(repo, COLUMN_AT_WORK) == [("b", 0), ("x", 1), ("y", 2)]

    def test_move_to_empty_column(self, sequencer: PositionSequencer, repo: TaskRepository):
        """Moving into an empty column puts the task at 0."""
        seed(repo, ["a", "b"])

        sequencer.move_to_column("a", COLUMN_AT_WORK)

        assert order(repo) == [("b", 0)]
        assert order(repo, COLUMN_AT_WORK) == [("a", 0)]

    def test_move_to_same_column_is_noop(
        self, sequencer: PositionSequencer, repo: TaskRepository, store: InMemoryStore
    ):
        """Moving a task to its own column writes nothing."""
        seed(repo, ["a", "b"])
        store.reset_calls()

        task = sequencer.move_to_column("b", COLUMN_BACKLOG)

        assert task.position == 1
        assert updates(store, repo) == 0

    def test_move_missing_task_raises(self, sequencer: PositionSequencer):
        """Moving an unknown task raises TaskNotFoundError."""
        with pytest.raises(TaskNotFoundError):
            sequencer.move_to_column("ghost", COLUMN_AT_WORK)


class TestSwap:
    """Tests for swap."""

    def test_swap_exchanges_positions(
        self, sequencer: PositionSequencer, repo: TaskRepository, store: InMemoryStore
    ):
        """Only the two swapped tasks are written."""
        seed(repo, ["a", "b", "c"])
        store.reset_calls()

        sequencer.swap("a", "c")

        assert order(repo) == [("c", 0), ("b", 1), ("a", 2)]
        assert updates(store, repo) == 2

    def test_swap_twice_restores_order(
        self, sequencer: PositionSequencer, repo: TaskRepository
    ):
        """Swapping is self-inverse."""
        seed(repo, ["a", "b", "c"])

        sequencer.swap("a", "b")
        sequencer.swap("a", "b")

        assert order(repo) == [("a", 0), ("b", 1), ("c", 2)]

    def test_swap_with_itself_is_noop(
        self, sequencer: PositionSequencer, repo: TaskRepository, store: InMemoryStore
    ):
        """Swapping a task with itself writes nothing."""
        seed(repo, ["a", "b"])
        store.reset_calls()

        sequencer.swap("a", "a")

        assert updates(store, repo) == 0

    def test_swap_across_columns_is_rejected(
        self, sequencer: PositionSequencer, repo: TaskRepository
    ):
        """Tasks of different columns cannot be swapped."""
        seed(repo, ["a"])
        seed(repo, ["x"], column=COLUMN_AT_WORK)

        with pytest.raises(InvalidMoveError):
            sequencer.swap("a", "x")


class TestShiftToRank:
    """Tests for shift_to_rank."""

    def test_shift_up(
        self, sequencer: PositionSequencer, repo: TaskRepository, store: InMemoryStore
    ):
        """Moving from 3 to 1 shifts ranks 1..2 down and writes 3 tasks."""
        seed(repo, ["a", "b", "c", "d", "e"])
        store.reset_calls()

        moved = sequencer.shift_to_rank("d", 1)

        assert moved.position == 1
        assert order(repo) == [("a", 0), ("d", 1), ("b", 2), ("c", 3), ("e", 4)]
        assert updates(store, repo) == 3

    def test_shift_down(
        self, sequencer: PositionSequencer, repo: TaskRepository, store: InMemoryStore
    ):
        """Moving from 1 to 3 shifts ranks 2..3 up and writes 3 tasks."""
        seed(repo, ["a", "b", "c", "d", "e"])
        store.reset_calls()

        sequencer.shift_to_rank("b", 3)

        assert order(repo) == [("a", 0), ("c", 1), ("d", 2), ("b", 3), ("e", 4)]
        assert updates(store, repo) == 3

    def test_shift_to_same_rank_writes_nothing(
        self, sequencer: PositionSequencer, repo: TaskRepository, store: InMemoryStore
    ):
        """Target equal to the current rank is a no-op."""
        seed(repo, ["a", "b", "c"])
        store.reset_calls()

        sequencer.shift_to_rank("b", 1)

        assert updates(store, repo) == 0

    @pytest.mark.parametrize(
        ("target", "expected"),
        [
            (99, [("a", 0), ("c", 1), ("b", 2)]),
            (-5, [("b", 0), ("a", 1), ("c", 2)]),
        ],
    )
    def test_shift_target_is_clamped(
        self, sequencer: PositionSequencer, repo: TaskRepository, target: int, expected
    ):
        """Targets outside the column are clamped to its ends."""
        seed(repo, ["a", "b", "c"])

        sequencer.shift_to_rank("b", target)

        assert order(repo) == expected

    def test_shift_in_broken_column_is_refused(
        self, sequencer: PositionSequencer, repo: TaskRepository, store: InMemoryStore
    ):
        """A column with a gap is reported instead of being shuffled further."""
        seed(repo, ["a", "b", "c"])
        store.update(repo.table, {"id": "c"}, {"position": 5})
        store.reset_calls()

        with pytest.raises(OrderingConflictError) as exc_info:
            sequencer.shift_to_rank("c", 0)

        assert exc_info.value.positions == [0, 1, 5]
        assert updates(store, repo) == 0


class TestMoveToTarget:
    """Tests for move_to_target and target_rank."""

    @pytest.mark.parametrize(
        ("current", "target", "size", "expected"),
        [
            (2, MoveTarget.TOP, 4, 0),
            (1, MoveTarget.BOTTOM, 4, 3),
            (2, MoveTarget.ONE_UP, 4, 1),
            (2, MoveTarget.ONE_DOWN, 4, 3),
            (0, MoveTarget.ONE_UP, 4, 0),
            (3, MoveTarget.ONE_DOWN, 4, 3),
            (0, "bottom", 1, 0),
        ],
    )
    def test_target_rank(self, current: int, target, size: int, expected: int):
        """Move targets map to clamped zero-based ranks."""
        assert target_rank(current, target, size) == expected

    def test_target_rank_rejects_unknown_target(self):
        """Unknown targets raise ValueError."""
        with pytest.raises(ValueError):
            target_rank(0, "sideways", 3)

    def test_move_to_bottom(self, sequencer: PositionSequencer, repo: TaskRepository):
        """Bottom is the last rank of the column."""
        seed(repo, ["a", "b", "c"])

        sequencer.move_to_target("a", MoveTarget.BOTTOM)

        assert order(repo) == [("b", 0), ("c", 1), ("a", 2)]

    def test_move_one_down(self, sequencer: PositionSequencer, repo: TaskRepository):
        """One down swaps a task with the next one."""
        seed(repo, ["a", "b", "c"])

        sequencer.move_to_target("a", MoveTarget.ONE_DOWN)

        assert order(repo) == [("b", 0), ("a", 1), ("c", 2)]

    def test_move_top_task_up_stays(
        self, sequencer: PositionSequencer, repo: TaskRepository, store: InMemoryStore
    ):
        """Moving the first task up keeps it first without writing."""
        seed(repo, ["a", "b"])
        store.reset_calls()

        task = sequencer.move_to_target("a", MoveTarget.ONE_UP)

        assert task.position == 0
        assert updates(store, repo) == 0


class TestDensityChecks:
    """Tests for check_partition, repair_partition and post-condition checks."""

    def test_check_partition_returns_sorted_tasks(
        self, sequencer: PositionSequencer, repo: TaskRepository
    ):
        """A dense partition is returned in position order."""
        seed(repo, ["a", "b"])

        tasks = sequencer.check_partition(LIST_ID, COLUMN_BACKLOG)

        assert [t.id for t in tasks] == ["a", "b"]

    def test_check_partition_detects_duplicates(
        self, sequencer: PositionSequencer, repo: TaskRepository, store: InMemoryStore
    ):
        """Duplicate positions raise OrderingConflictError."""
        seed(repo, ["a", "b", "c"])
        store.update(repo.table, {"id": "c"}, {"position": 1})

        with pytest.raises(OrderingConflictError) as exc_info:
            sequencer.check_partition(LIST_ID, COLUMN_BACKLOG)

        assert exc_info.value.column == COLUMN_BACKLOG
        assert exc_info.value.positions == [0, 1, 1]

    def test_repair_renumbers_in_current_order(
        self, sequencer: PositionSequencer, repo: TaskRepository, store: InMemoryStore
    ):
        """Repair closes gaps and breaks ties by task ID."""
        seed(repo, ["a", "b", "c", "d"])
        store.update(repo.table, {"id": "a"}, {"position": 5})
        store.update(repo.table, {"id": "d"}, {"position": 1})

        written = sequencer.repair_partition(LIST_ID, COLUMN_BACKLOG)

        assert order(repo) == [("b", 0), ("d", 1), ("c", 2), ("a", 3)]
        assert written == 2

    def test_repair_of_dense_partition_writes_nothing(
        self, sequencer: PositionSequencer, repo: TaskRepository
    ):
        """A dense partition needs no repair."""
        seed(repo, ["a", "b"])

        assert sequencer.repair_partition(LIST_ID, COLUMN_BACKLOG) == 0

    def test_post_condition_reports_broken_partition(
        self, sequencer: PositionSequencer, repo: TaskRepository, store: InMemoryStore
    ):
        """An insert into a column that already had a gap is reported."""
        seed(repo, ["a", "b"])
        store.update(repo.table, {"id": "b"}, {"position": 2})

        with pytest.raises(OrderingConflictError):
            sequencer.insert_at_top(LIST_ID, COLUMN_BACKLOG, Task(id="n", list_id=LIST_ID))

    def test_post_condition_can_be_disabled(self, repo: TaskRepository, store: InMemoryStore):
        """Without verification the operation completes on a broken column."""
        sequencer = PositionSequencer(repo, verify_ordering=False)
        seed(repo, ["a", "b"])
        store.update(repo.table, {"id": "b"}, {"position": 2})

        sequencer.insert_at_top(LIST_ID, COLUMN_BACKLOG, Task(id="n", list_id=LIST_ID))

        assert order(repo) == [("n", 0), ("a", 1), ("b", 3)]


class TestEveryOperationKeepsDensity:
    """Density holds after a sequence of mixed operations."""

    def test_mixed_operations(self, sequencer: PositionSequencer, repo: TaskRepository):
        """Inserts, moves, swaps, shifts and removals leave every column dense."""
        for task_id in ["a", "b", "c", "d", "e"]:
            sequencer.insert_at_top(LIST_ID, COLUMN_BACKLOG, Task(id=task_id, list_id=LIST_ID))

        sequencer.move_to_column("c", COLUMN_AT_WORK)
        sequencer.move_to_column("a", COLUMN_AT_WORK)
        sequencer.swap("e", "b")
        sequencer.shift_to_rank("d", 2)
        sequencer.remove_task(repo.get_task("c"))
        sequencer.move_to_target("a", MoveTarget.BOTTOM)

        for column in (COLUMN_BACKLOG, COLUMN_AT_WORK):
            positions = [position for _, position in order(repo, column)]
            assert positions == list(range(len(positions)))
        assert {task_id for task_id, _ in order(repo)} == {"b", "d", "e"}
        assert order(repo, COLUMN_AT_WORK) == [("a", 0)]
