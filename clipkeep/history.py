"""
Bounded, recency-ordered clipboard history.

Index 0 is the most recent entry. After every mutation the list holds at
most MAX_HISTORY non-empty, unique strings, has been handed to the storage
adapter and a 'history changed' event has gone out.
"""

import logging
import threading
from typing import List, Optional

from clipkeep.events import HistoryEvents
from clipkeep.storage import StorageError

logger = logging.getLogger(__name__)

MAX_HISTORY = 10
HISTORY_KEY = "SavedClipboardItems"


def _preview(text: str, width: int = 20) -> str:
    flat = text.replace("\n", " ")
    return flat[:width] + ("..." if len(flat) > width else "")


class HistoryStore:
    def __init__(self, storage, events: Optional[HistoryEvents] = None,
                 key: str = HISTORY_KEY):
        self.storage = storage
        self.events = events if events is not None else HistoryEvents()
        self.key = key
        self.persistence_degraded = False

        self._items: List[str] = []
        self._lock = threading.RLock()
        self._load()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self):
        try:
            saved = self.storage.load(self.key)
        except StorageError as e:
            logger.error(f"Could not load saved history, starting empty: {e}")
            saved = []

        items: List[str] = []
        for text in saved:
            if text and text not in items:
                items.append(text)
        self._items = items[:MAX_HISTORY]
        logger.info(f"Loaded {len(self._items)} saved items")

    def _persist(self):
        try:
            self.storage.save(self.key, list(self._items))
        except StorageError as e:
            if not self.persistence_degraded:
                logger.error(f"Saving history failed, keeping it in memory only: {e}")
            self.persistence_degraded = True
        else:
            if self.persistence_degraded:
                logger.info("History saved again after earlier failures")
            self.persistence_degraded = False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(self) -> List[str]:
        """Snapshot of the history, most recent first"""
        with self._lock:
            return list(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def insert_or_promote(self, text: str) -> bool:
        """
        Record a new clipboard capture at the front.

        Only the current front entry counts as a repeat; any other copy of
        `text` further down is dropped so entries stay unique. Returns True
        when the history changed.
        """
        if not isinstance(text, str):
            raise TypeError(f"History entries must be str, not {type(text).__name__}")
        if not text:
            return False

        with self._lock:
            if self._items and self._items[0] == text:
                return False

            if text in self._items:
                self._items.remove(text)
            self._items.insert(0, text)
            if len(self._items) > MAX_HISTORY:
                self._items.pop()

            self._persist()
            logger.debug(f"New item added: {_preview(text)}")

        self.events.emit()
        return True

    def _move_to_front(self, index: int) -> None:
        # Caller holds the lock
        text = self._items.pop(index)
        self._items.insert(0, text)
        self._persist()
        logger.info(f"Item at index {index} moved to top of history")

    def promote(self, index: int) -> bool:
        """Move the entry at `index` to the front. Out of range is a no-op."""
        with self._lock:
            if index < 0 or index >= len(self._items):
                return False
            self._move_to_front(index)

        self.events.emit()
        return True

    def promote_text(self, text: str) -> bool:
        """Move `text` to the front if it is still in the history"""
        with self._lock:
            if text not in self._items:
                return False
            self._move_to_front(self._items.index(text))

        self.events.emit()
        return True

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
            self._persist()
            logger.info("History cleared")

        self.events.emit()
