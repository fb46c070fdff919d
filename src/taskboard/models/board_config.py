"""Board column configuration."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from .task import COLUMN_AT_WORK, COLUMN_BACKLOG, COLUMN_FINISHED


def _validate_identifier(value: str, name: str = "ID") -> str:
    """Validate an identifier is lowercase alphanumeric with underscores."""
    if not value:
        raise ValueError(f"{name} cannot be empty")
    if not value[0].isalpha():
        raise ValueError(f"{name} must start with a letter")
    if not all(c.isalnum() or c == "_" for c in value):
        raise ValueError(f"{name} must be alphanumeric with underscores only")
    if value != value.lower():
        raise ValueError(f"{name} must be lowercase")
    return value


class ColumnConfig(BaseModel):
    """Configuration for a single board column."""

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Validate column ID is lowercase with underscores only."""
        return _validate_identifier(v, "Column ID")


class BoardConfig(BaseModel):
    """Ordered board columns shared by all task lists."""

    columns: list[ColumnConfig] = Field(..., min_length=2, max_length=6)

    @field_validator("columns")
    @classmethod
    def validate_columns(cls, v: list[ColumnConfig]) -> list[ColumnConfig]:
        """Validate column constraints."""
        ids = [col.id for col in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Column IDs must be unique")
        return v

    @classmethod
    def default(cls) -> "BoardConfig":
        """Backlog, at work, finished."""
        return cls(
            columns=[
                ColumnConfig(id=COLUMN_BACKLOG, title="Backlog"),
                ColumnConfig(id=COLUMN_AT_WORK, title="At Work"),
                ColumnConfig(id=COLUMN_FINISHED, title="Finished"),
            ]
        )

    @classmethod
    def load(cls, path: Path | None) -> "BoardConfig":
        """Load board config from a YAML file.

        A missing path, a missing file or an empty file yields the default
        board. Invalid YAML or invalid columns raise.
        """
        if path is None or not path.exists():
            return cls.default()

        with path.open() as f:
            data = yaml.safe_load(f)

        if not data:
            return cls.default()
        if "board" in data:
            data = data["board"] or {}
        if "columns" not in data:
            return cls.default()
        return cls(**data)

    @property
    def column_ids(self) -> list[str]:
        """List of column IDs in display order."""
        return [col.id for col in self.columns]

    def has_column(self, column_id: str) -> bool:
        """Whether the column ID is configured."""
        return column_id in self.column_ids

    def get_title(self, column_id: str) -> str:
        """Get display title for a column ID."""
        for col in self.columns:
            if col.id == column_id:
                return col.title
        return column_id.replace("_", " ").title()

    def previous_column(self, column_id: str) -> str | None:
        """Column to the left, or None at the leftmost column."""
        ids = self.column_ids
        try:
            idx = ids.index(column_id)
        except ValueError:
            return None
        return ids[idx - 1] if idx > 0 else None

    def next_column(self, column_id: str) -> str | None:
        """Column to the right, or None at the rightmost column."""
        ids = self.column_ids
        try:
            idx = ids.index(column_id)
        except ValueError:
            return None
        return ids[idx + 1] if idx < len(ids) - 1 else None
