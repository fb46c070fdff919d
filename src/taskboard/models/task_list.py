"""Task list models."""

from typing import Any

from pydantic import BaseModel, Field

from .task import Task


class TaskListMetadata(BaseModel):
    """Name and color of a task list, stored apart from its tasks."""

    id: str
    name: str
    color: str = "blue"

    def to_item(self) -> dict[str, Any]:
        """Convert to a store item."""
        return self.model_dump()


class TaskList(TaskListMetadata):
    """A task list assembled from its metadata and its tasks."""

    tasks: list[Task] = Field(default_factory=list)

    @classmethod
    def from_metadata(cls, metadata: TaskListMetadata, tasks: list[Task]) -> "TaskList":
        """Attach tasks to list metadata."""
        return cls(**metadata.model_dump(), tasks=tasks)

    def column(self, column_id: str) -> list[Task]:
        """Tasks of one column, ordered by position."""
        return sorted(
            (t for t in self.tasks if t.board_column == column_id),
            key=lambda t: (t.position, t.id),
        )

    def columns(self, column_ids: list[str]) -> dict[str, list[Task]]:
        """Tasks grouped by column, in the given column order."""
        return {column_id: self.column(column_id) for column_id in column_ids}
