"""Label repository."""

from __future__ import annotations

import logging

from ..config import TABLE_LABELS, TABLE_TASKS, Settings
from ..errors import ItemNotFoundError, LabelNotFoundError
from ..models import Label
from ..store import StoreGateway, scan_all
from ..utils import generate_uid

logger = logging.getLogger(__name__)


class LabelRepository:
    """
    Repository for labels.

    Deleting a label does not check whether tasks still reference it;
    callers check ``count_references`` first.
    """

    def __init__(self, store: StoreGateway, settings: Settings | None = None) -> None:
        settings = settings or Settings()
        self.store = store
        self.table = settings.table_name(TABLE_LABELS)
        self.tasks_table = settings.table_name(TABLE_TASKS)

    def load_all(self) -> list[Label]:
        """Load every label."""
        return [Label.from_item(item) for item in scan_all(self.store, self.table)]

    def get_label(self, label_id: str) -> Label | None:
        """Load a single label by ID."""
        item = self.store.get(self.table, {"id": label_id})
        if item is None:
            logger.debug("Label not found: %s", label_id)
            return None
        return Label.from_item(item)

    def get_labels(self, label_ids: list[str]) -> list[Label]:
        """Load several labels, skipping unknown IDs."""
        labels = []
        for label_id in label_ids:
            label = self.get_label(label_id)
            if label is not None:
                labels.append(label)
        return labels

    def create_label(self, display_name: dict[str, str], color: str) -> Label:
        """Create a label with a fresh ID."""
        label = Label(id=generate_uid(), display_name=display_name, color=color)
        self.store.put(self.table, label.to_item())
        logger.info("Label created: %s", label.id)
        return label

    def save_label(self, label: Label) -> Label:
        """Create or replace a label."""
        self.store.put(self.table, label.to_item())
        return label

    def update_label(self, label_id: str, display_name: dict[str, str], color: str) -> None:
        """
        Change name and color of an existing label.

        Raises:
            LabelNotFoundError: No label with this ID exists
        """
        try:
            self.store.update(
                self.table,
                {"id": label_id},
                {"displayName": display_name, "color": color},
            )
        except ItemNotFoundError as e:
            raise LabelNotFoundError(label_id) from e

    def delete_label(self, label_id: str) -> None:
        """Delete a label by ID."""
        self.store.delete(self.table, {"id": label_id})
        logger.info("Label deleted: %s", label_id)

    def count_references(self, label_id: str) -> int:
        """Number of tasks carrying the label."""
        return self.count_references_many([label_id])[label_id]

    def count_references_many(self, label_ids: list[str]) -> dict[str, int]:
        """Number of tasks carrying each label, tallied from a full task scan."""
        counts = dict.fromkeys(label_ids, 0)
        for item in scan_all(self.store, self.tasks_table, attributes=["labelIds"]):
            for label_id in item.get("labelIds") or []:
                if label_id in counts:
                    counts[label_id] += 1
        return counts
