import logging
import threading
from typing import Callable, List

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class HistoryEvents:
    """Observer list for 'history changed' notifications (no payload)"""

    def __init__(self):
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Listener) -> None:
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def emit(self) -> None:
        # Snapshot so listeners can unsubscribe while we deliver
        with self._lock:
            listeners = list(self._listeners)

        for callback in listeners:
            try:
                callback()
            except Exception:
                logger.exception(f"History listener {callback!r} failed")

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)
