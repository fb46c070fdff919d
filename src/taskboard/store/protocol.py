"""Store gateway protocol for document storage backends."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

Item = dict[str, Any]
Key = dict[str, Any]


@dataclass
class ScanPage:
    """One page of a table scan."""

    items: list[Item] = field(default_factory=list)
    last_key: Key | None = None  # Pass as start_key to fetch the next page


class StoreGateway(Protocol):
    """Interface for key-value document stores.

    Every call is a single-item operation (scans aside); there are no
    multi-item transactions. Implementations raise:
    - StoreUnavailableError when the backend fails
    - ItemNotFoundError when updating a missing item
    - ConditionFailedError when an update's expected values do not match
    """

    def get(self, table: str, key: Key) -> Item | None:
        """Fetch a single item.

        Returns:
            The item if found, None otherwise.
        """
        ...

    def put(self, table: str, item: Item) -> None:
        """Create or replace an item."""
        ...

    def update(
        self,
        table: str,
        key: Key,
        fields: Mapping[str, Any],
        *,
        expected: Mapping[str, Any] | None = None,
    ) -> None:
        """Set fields on an existing item.

        Args:
            table: Table name
            key: Primary key of the item
            fields: Attribute values to set
            expected: Attribute values the stored item must currently have
        """
        ...

    def delete(self, table: str, key: Key) -> None:
        """Delete an item. Deleting a missing item is not an error."""
        ...

    def scan(
        self,
        table: str,
        *,
        start_key: Key | None = None,
        attributes: list[str] | None = None,
    ) -> ScanPage:
        """Read one page of a full-table scan.

        Args:
            table: Table name
            start_key: last_key of the previous page, None for the first page
            attributes: Only return these attributes (all if None)
        """
        ...


def scan_all(
    store: StoreGateway,
    table: str,
    *,
    attributes: list[str] | None = None,
) -> Iterator[Item]:
    """Yield every item of a table, following scan pagination."""
    start_key: Key | None = None
    while True:
        page = store.scan(table, start_key=start_key, attributes=attributes)
        yield from page.items
        if not page.last_key:
            return
        start_key = page.last_key
