"""Task list repository."""

from __future__ import annotations

import logging

from ..config import TABLE_TASK_LIST_METADATA, Settings
from ..errors import TaskListNotFoundError
from ..models import TaskList, TaskListMetadata
from ..store import StoreGateway, scan_all
from .tasks import TaskRepository

logger = logging.getLogger(__name__)


class TaskListRepository:
    """
    Repository for task lists.

    List metadata (name, color) lives in its own table; the tasks of a list
    come from the task repository.
    """

    def __init__(
        self,
        store: StoreGateway,
        task_repository: TaskRepository,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self.task_repository = task_repository
        self.table = (settings or Settings()).table_name(TABLE_TASK_LIST_METADATA)

    def get_metadata(self, list_id: str) -> TaskListMetadata | None:
        """Load the metadata of one list."""
        item = self.store.get(self.table, {"id": list_id})
        if item is None:
            return None
        return TaskListMetadata.model_validate(item)

    def load_task_list(self, list_id: str) -> TaskList:
        """
        Load a list with all of its tasks.

        Raises:
            TaskListNotFoundError: No metadata exists for the list
        """
        metadata = self.get_metadata(list_id)
        if metadata is None:
            raise TaskListNotFoundError(list_id)
        tasks = self.task_repository.get_tasks_for_list(list_id)
        return TaskList.from_metadata(metadata, tasks)

    def load_list_metadata(self, allowed_list_ids: list[str] | None = None) -> list[TaskList]:
        """
        Load all lists without their tasks.

        Args:
            allowed_list_ids: Only return these lists (all lists if None)
        """
        lists: list[TaskList] = []
        for item in scan_all(self.store, self.table):
            metadata = TaskListMetadata.model_validate(item)
            if allowed_list_ids is not None and metadata.id not in allowed_list_ids:
                continue
            lists.append(TaskList.from_metadata(metadata, []))
        return sorted(lists, key=lambda tl: tl.name.lower())

    def save_metadata(self, metadata: TaskListMetadata) -> TaskListMetadata:
        """Create or replace list metadata."""
        self.store.put(self.table, metadata.to_item())
        logger.info("Task list saved: %s (%s)", metadata.id, metadata.name)
        return metadata
