"""Task domain model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Column ids of the default board
COLUMN_BACKLOG = "backlog"
COLUMN_AT_WORK = "at_work"
COLUMN_FINISHED = "finished"


class Task(BaseModel):
    """A single task on a board.

    Stored with camelCase attribute names (``listId``, ``boardColumn``, ...),
    which are the pydantic aliases of the snake_case fields.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    list_id: str = Field(alias="listId")
    board_column: str = Field(default=COLUMN_BACKLOG, alias="boardColumn")
    position: int = Field(default=0, ge=0)  # Dense rank within (list_id, board_column)

    title: str = ""
    details: str = ""
    label_ids: list[str] = Field(default_factory=list, alias="labelIds")

    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")

    @property
    def partition(self) -> tuple[str, str]:
        """The (list id, column) pair whose ordering this task belongs to."""
        return (self.list_id, self.board_column)

    def to_item(self) -> dict[str, Any]:
        """Convert to a store item."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "Task":
        """Create Task from a store item."""
        return cls.model_validate(item)
