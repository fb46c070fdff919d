"""Service for label management."""

from __future__ import annotations

import logging

from ..errors import LabelInUseError, LabelNotFoundError
from ..models import Label
from ..repositories import LabelRepository

logger = logging.getLogger(__name__)


class LabelService:
    """Label CRUD that refuses to delete labels still attached to tasks."""

    def __init__(self, repository: LabelRepository) -> None:
        self.repository = repository

    def list_labels_with_counts(self) -> list[tuple[Label, int]]:
        """All labels with the number of tasks using each, sorted by English name."""
        labels = self.repository.load_all()
        counts = self.repository.count_references_many([label.id for label in labels])
        labels.sort(key=lambda label: label.name_for("en").lower())
        return [(label, counts[label.id]) for label in labels]

    def get_label(self, label_id: str) -> Label:
        """Get a label by ID."""
        label = self.repository.get_label(label_id)
        if label is None:
            raise LabelNotFoundError(label_id)
        return label

    def create_label(self, display_name: dict[str, str], color: str) -> Label:
        """Create a new label."""
        if not any(name.strip() for name in display_name.values()):
            raise ValueError("Label needs a display name in at least one language")
        return self.repository.create_label(display_name, color)

    def update_label(self, label_id: str, display_name: dict[str, str], color: str) -> Label:
        """Change a label's names and color."""
        self.repository.update_label(label_id, display_name, color)
        logger.info("Label updated: %s", label_id)
        return Label(id=label_id, display_name=display_name, color=color)

    def delete_label(self, label_id: str) -> None:
        """
        Delete a label that no task uses.

        Raises:
            LabelNotFoundError: No label with this ID exists
            LabelInUseError: At least one task still carries the label
        """
        self.get_label(label_id)
        count = self.repository.count_references(label_id)
        if count:
            logger.debug("delete_label: %s still used by %d tasks", label_id, count)
            raise LabelInUseError(label_id, count)
        self.repository.delete_label(label_id)
