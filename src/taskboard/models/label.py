"""Label model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Label(BaseModel):
    """A colored label with a display name per language."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    display_name: dict[str, str] = Field(default_factory=dict, alias="displayName")
    color: str = "gray"

    def name_for(self, language: str, fallback: str = "en") -> str:
        """Display name in the given language, falling back to another language or the id."""
        if language in self.display_name:
            return self.display_name[language]
        if fallback in self.display_name:
            return self.display_name[fallback]
        return self.id

    def to_item(self) -> dict[str, Any]:
        """Convert to a store item."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "Label":
        """Create Label from a store item."""
        return cls.model_validate(item)
