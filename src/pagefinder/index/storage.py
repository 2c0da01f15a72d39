"""Bounded in-memory registry of document indexes."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import List

from pagefinder.models import DocumentIndex

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_INDEXES = 5


class IndexRegistry:
    """Holds one :class:`DocumentIndex` per document id.

    Entries are kept in insertion order. Once more than ``max_indexes`` ids are
    resident the oldest insertion is evicted; lookups do not refresh an entry.
    Replacing an id counts as a fresh insertion.
    """

    def __init__(self, *, max_indexes: int = DEFAULT_MAX_INDEXES) -> None:
        if max_indexes < 1:
            raise ValueError("max_indexes must be at least 1")
        self.max_indexes = max_indexes
        self._indexes: OrderedDict[str, DocumentIndex] = OrderedDict()
        self._lock = threading.Lock()

    def put(self, document_id: str, index: DocumentIndex) -> None:
        """Insert or replace an index, evicting the oldest ones over capacity."""
        evicted: List[str] = []
        with self._lock:
            self._indexes.pop(document_id, None)
            self._indexes[document_id] = index
            while len(self._indexes) > self.max_indexes:
                oldest_id, _ = self._indexes.popitem(last=False)
                evicted.append(oldest_id)

        for oldest_id in evicted:
            LOGGER.info(
                "Evicted index %s (capacity %d reached)", oldest_id, self.max_indexes
            )

    def get(self, document_id: str) -> DocumentIndex | None:
        with self._lock:
            return self._indexes.get(document_id)

    def ids(self) -> List[str]:
        """Resident ids, oldest insertion first."""
        with self._lock:
            return list(self._indexes)

    def documents(self) -> List[DocumentIndex]:
        with self._lock:
            return list(self._indexes.values())

    def clear(self) -> None:
        """Drop every index; used when the owning application shuts down."""
        with self._lock:
            self._indexes.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._indexes)

    def __contains__(self, document_id: object) -> bool:
        with self._lock:
            return document_id in self._indexes
