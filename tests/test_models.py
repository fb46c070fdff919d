"""Tests for data models and utilities."""

import re
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from taskboard.models import (
    COLUMN_AT_WORK,
    COLUMN_BACKLOG,
    Label,
    MoveTarget,
    Task,
    TaskList,
    TaskListMetadata,
)
from taskboard.utils import from_timestamp, generate_uid, now_timestamp, to_timestamp


class TestTask:
    """Tests for the Task model."""

    def test_to_item_uses_camel_case(self):
        """Store items carry camelCase attribute names."""
        task = Task(
            id="1",
            list_id="l",
            board_column=COLUMN_AT_WORK,
            position=2,
            title="Buy milk",
            label_ids=["x"],
            created_at="2024-05-01_13:07:42",
        )

        item = task.to_item()

        assert item == {
            "id": "1",
            "listId": "l",
            "boardColumn": COLUMN_AT_WORK,
            "position": 2,
            "title": "Buy milk",
            "details": "",
            "labelIds": ["x"],
            "createdAt": "2024-05-01_13:07:42",
        }

    def test_from_item(self):
        """Items from the store parse into tasks."""
        task = Task.from_item(
            {"id": "1", "listId": "l", "boardColumn": COLUMN_BACKLOG, "position": 0, "title": "x"}
        )

        assert task.list_id == "l"
        assert task.partition == ("l", COLUMN_BACKLOG)
        assert task.label_ids == []
        assert task.updated_at is None

    def test_negative_position_is_rejected(self):
        """Positions are ranks and cannot be negative."""
        with pytest.raises(ValidationError):
            Task(id="1", list_id="l", position=-1)


class TestTaskList:
    """Tests for TaskList."""

    def test_columns_sorted_by_position(self):
        """Each column is ordered by position, then ID."""
        metadata = TaskListMetadata(id="l", name="List")
        tasks = [
            Task(id="c", list_id="l", position=1),
            Task(id="b", list_id="l", position=0),
            Task(id="a", list_id="l", position=0, board_column=COLUMN_AT_WORK),
        ]

        task_list = TaskList.from_metadata(metadata, tasks)
        columns = task_list.columns([COLUMN_BACKLOG, COLUMN_AT_WORK, "finished"])

        assert task_list.name == "List"
        assert task_list.color == "blue"
        assert [t.id for t in columns[COLUMN_BACKLOG]] == ["b", "c"]
        assert [t.id for t in columns[COLUMN_AT_WORK]] == ["a"]
        assert columns["finished"] == []


class TestLabel:
    """Tests for Label."""

    @pytest.fixture
    def label(self) -> Label:
        """A label named in two languages."""
        return Label(id="7", display_name={"en": "Urgent", "de": "Dringend"}, color="red")

    def test_name_for_language(self, label: Label):
        """The requested language wins."""
        assert label.name_for("de") == "Dringend"

    def test_name_for_falls_back(self, label: Label):
        """Unknown languages fall back to English, then to the ID."""
        assert label.name_for("fr") == "Urgent"
        assert Label(id="7").name_for("fr") == "7"

    def test_item_round_trip(self, label: Label):
        """Labels are stored with a displayName map."""
        item = label.to_item()

        assert item["displayName"] == {"en": "Urgent", "de": "Dringend"}
        assert Label.from_item(item) == label


class TestMoveTarget:
    """Tests for MoveTarget."""

    def test_values(self):
        """Targets can be built from their string values."""
        assert MoveTarget("one_up") is MoveTarget.ONE_UP
        assert MoveTarget.TOP == "top"


class TestUtils:
    """Tests for timestamp and ID helpers."""

    def test_now_timestamp_format(self):
        """Timestamps look like 2024-05-01_13:07:42."""
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}_\d{2}:\d{2}:\d{2}", now_timestamp())

    def test_timestamp_parse(self):
        """Stored timestamps parse back to UTC datetimes."""
        dt = datetime(2024, 5, 1, 13, 7, 42, tzinfo=UTC)

        assert to_timestamp(dt) == "2024-05-01_13:07:42"
        assert from_timestamp("2024-05-01_13:07:42") == dt

    def test_timestamps_sort_chronologically(self):
        """String order of timestamps is time order."""
        earlier = to_timestamp(datetime(2024, 1, 9, 23, 0, 0, tzinfo=UTC))
        later = to_timestamp(datetime(2024, 1, 10, 1, 0, 0, tzinfo=UTC))

        assert earlier < later

    def test_generate_uid(self):
        """IDs are ten random digits."""
        uids = {generate_uid() for _ in range(50)}

        assert all(len(uid) == 10 and uid.isdigit() for uid in uids)
        assert len(uids) > 1
