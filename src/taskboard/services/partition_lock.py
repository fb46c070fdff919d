"""Per-partition locks for task repositioning."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager

from ..errors import OrderingConflictError

logger = logging.getLogger(__name__)

Partition = tuple[str, str]  # (list_id, column)


class PartitionLocks:
    """
    Registry of re-entrant locks keyed by (list_id, column).

    Every repositioning operation holds the locks of all partitions it
    reads or writes. Locks are taken in sorted order so that two moves in
    opposite directions between the same columns cannot deadlock. Locks are
    re-entrant: an operation may call another operation on the same
    partition while holding it.

    The registry only coordinates threads of one process. Writers in other
    processes are caught by the conditional position writes instead.
    """

    def __init__(self, timeout: float = 10.0) -> None:
        """
        Args:
            timeout: Seconds to wait for each lock before giving up
        """
        self.timeout = timeout
        self._locks: dict[Partition, threading.RLock] = {}
        self._registry_lock = threading.Lock()
        self._owned = threading.local()  # per-thread hold counts by partition

    def _lock_for(self, partition: Partition) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(partition)
            if lock is None:
                lock = threading.RLock()
                self._locks[partition] = lock
            return lock

    @contextmanager
    def hold(self, *partitions: Partition) -> Iterator[None]:
        """
        Hold the locks of the given partitions for the duration of the block.

        Raises:
            OrderingConflictError: A lock was not acquired within the timeout
        """
        with ExitStack() as stack:
            for partition in sorted(set(partitions)):
                lock = self._lock_for(partition)
                if not lock.acquire(timeout=self.timeout):
                    list_id, column = partition
                    logger.warning("Timed out waiting for partition lock %s/%s", list_id, column)
                    raise OrderingConflictError(
                        f"Partition {list_id}/{column} is busy",
                        list_id=list_id,
                        column=column,
                    )
                stack.callback(lock.release)
                self._count_hold(partition, 1)
                stack.callback(self._count_hold, partition, -1)
            yield

    def _held_counts(self) -> dict[Partition, int]:
        counts = getattr(self._owned, "counts", None)
        if counts is None:
            counts = self._owned.counts = {}
        return counts

    def _count_hold(self, partition: Partition, delta: int) -> None:
        counts = self._held_counts()
        counts[partition] = counts.get(partition, 0) + delta
        if counts[partition] <= 0:
            del counts[partition]

    def is_held(self, partition: Partition) -> bool:
        """Whether the current thread holds the partition lock."""
        return self._held_counts().get(partition, 0) > 0
