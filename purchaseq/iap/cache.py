"""
Ledger of purchase occurrences already reported to the analytics sink.

Maps a transaction id (usually the lineage's original transaction id) to the set
of event names reported for it. Entries are never removed unless a capacity is
configured, in which case the least recently used transaction ids go first.

Key: TransactionCache with contains/add, plus locked() for callers that need a
whole check-then-record sequence to be atomic.
"""

from __future__ import annotations

import contextlib
import threading
from collections.abc import Iterator, MutableMapping

from cachetools import LRUCache

from purchaseq import config
from purchaseq.iap.types import EventName
from purchaseq.observability.telemetry import counter


class TransactionCache:
    """Thread-safe (transaction id, event name) ledger."""

    def __init__(self, max_entries: int = 0) -> None:
        """
        Args:
            max_entries: Bound on tracked transaction ids; 0 means unbounded.
                Lineage keys and per-occurrence marks share the bound.
        """
        self.max_entries = max_entries
        self._lock = threading.RLock()
        self._entries: MutableMapping[str, set[EventName]]
        if max_entries > 0:
            self._entries = LRUCache(maxsize=max_entries)
        else:
            self._entries = {}

    @contextlib.contextmanager
    def locked(self) -> Iterator[TransactionCache]:
        """Hold the ledger lock across several contains/add calls."""
        with self._lock:
            yield self

    def contains(self, transaction_id: str, event_name: EventName | None = None) -> bool:
        """Whether the exact pair was recorded, or any event for the id when event_name is None."""
        with self._lock:
            recorded = self._entries.get(transaction_id)
            if not recorded:
                return False
            if event_name is None:
                return True
            return event_name in recorded

    def add(self, transaction_id: str, event_name: EventName) -> None:
        """
        Record a pair. Adding an existing pair is a no-op.

        Side Effects:
            - Mutates the in-memory ledger (may evict the LRU id when bounded)
            - Increments telemetry counter iap.cache.add
        """
        with self._lock:
            recorded = self._entries.get(transaction_id)
            if recorded is None:
                recorded = set()
                self._entries[transaction_id] = recorded
            recorded.add(event_name)
        counter("iap.cache.add")

    def event_names(self, transaction_id: str) -> frozenset[EventName]:
        with self._lock:
            return frozenset(self._entries.get(transaction_id, ()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "transactions": len(self._entries),
                "events": sum(len(names) for names in self._entries.values()),
                "max_entries": self.max_entries,
            }


_shared_cache: TransactionCache | None = None
_shared_cache_lock = threading.Lock()


def get_transaction_cache() -> TransactionCache:
    """Return the process-wide ledger, creating it on first use."""
    global _shared_cache
    with _shared_cache_lock:
        if _shared_cache is None:
            _shared_cache = TransactionCache(max_entries=config.CACHE_MAX_ENTRIES)
        return _shared_cache


def reset_transaction_cache() -> None:
    """
    Drop the process-wide ledger (useful for tests).

    Side Effects:
        - The next get_transaction_cache() call builds an empty ledger
    """
    global _shared_cache
    with _shared_cache_lock:
        _shared_cache = None
