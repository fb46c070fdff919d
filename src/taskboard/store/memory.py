"""In-memory store gateway for tests and local demos."""

from __future__ import annotations

import bisect
import copy
import threading
from collections.abc import Mapping
from typing import Any

from ..errors import ConditionFailedError, ItemNotFoundError
from .protocol import Item, Key, ScanPage


class InMemoryStore:
    """
    Store gateway keeping tables in process memory.

    Items are deep-copied on the way in and out so callers never share
    state with the store. Each call holds a lock, which makes every single
    item operation atomic like it is in DynamoDB. Scans return pages of
    ``page_size`` items ordered by the string form of their key, so a scan
    can resume after items were added or removed between pages.
    """

    def __init__(self, key_attribute: str = "id", page_size: int = 100) -> None:
        """
        Initialize store.

        Args:
            key_attribute: Name of the primary key attribute of every table
            page_size: Maximum number of items per scan page
        """
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.key_attribute = key_attribute
        self.page_size = page_size
        self._tables: dict[str, dict[Any, Item]] = {}
        self._lock = threading.Lock()
        self.calls: list[tuple[str, str]] = []  # (operation, table), for assertions in tests

    def _key_value(self, key: Key) -> Any:
        try:
            return key[self.key_attribute]
        except KeyError:
            raise ValueError(f"Key must contain '{self.key_attribute}'") from None

    def get(self, table: str, key: Key) -> Item | None:
        with self._lock:
            self.calls.append(("get", table))
            item = self._tables.get(table, {}).get(self._key_value(key))
            return copy.deepcopy(item) if item is not None else None

    def put(self, table: str, item: Item) -> None:
        with self._lock:
            self.calls.append(("put", table))
            key_value = self._key_value(item)
            self._tables.setdefault(table, {})[key_value] = copy.deepcopy(item)

    def update(
        self,
        table: str,
        key: Key,
        fields: Mapping[str, Any],
        *,
        expected: Mapping[str, Any] | None = None,
    ) -> None:
        with self._lock:
            self.calls.append(("update", table))
            key_value = self._key_value(key)
            item = self._tables.get(table, {}).get(key_value)
            if item is None:
                raise ItemNotFoundError(f"No item {key_value!r} in table {table}")
            if expected:
                for name, value in expected.items():
                    if item.get(name) != value:
                        raise ConditionFailedError(
                            f"Item {key_value!r} in {table}: expected {name}={value!r}, "
                            f"found {item.get(name)!r}"
                        )
            item.update(copy.deepcopy(dict(fields)))

    def delete(self, table: str, key: Key) -> None:
        with self._lock:
            self.calls.append(("delete", table))
            self._tables.get(table, {}).pop(self._key_value(key), None)

    def scan(
        self,
        table: str,
        *,
        start_key: Key | None = None,
        attributes: list[str] | None = None,
    ) -> ScanPage:
        with self._lock:
            self.calls.append(("scan", table))
            keys = sorted(self._tables.get(table, {}), key=str)
            start = 0
            if start_key is not None:
                start = bisect.bisect_right([str(k) for k in keys], str(self._key_value(start_key)))

            page_keys = keys[start : start + self.page_size]
            items = []
            for key_value in page_keys:
                item = self._tables[table][key_value]
                if attributes is not None:
                    item = {name: item[name] for name in attributes if name in item}
                items.append(copy.deepcopy(item))

            last_key = None
            if start + self.page_size < len(keys):
                last_key = {self.key_attribute: page_keys[-1]}
            return ScanPage(items=items, last_key=last_key)

    def count_calls(self, operation: str, table: str | None = None) -> int:
        """Number of recorded calls of an operation, optionally on one table."""
        return sum(
            1 for op, tbl in self.calls if op == operation and (table is None or tbl == table)
        )

    def reset_calls(self) -> None:
        """Forget recorded calls."""
        with self._lock:
            self.calls.clear()
