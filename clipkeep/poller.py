import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.5  # seconds


class ChangePoller:
    """
    Samples the clipboard change counter on a background thread and feeds
    new text into the history store, once per clipboard change.
    """

    def __init__(self, clipboard, store):
        self.clipboard = clipboard
        self.store = store

        # Whatever is on the clipboard at startup is not a new capture
        self.last_change_count = clipboard.change_count()

        self._lock = threading.RLock()
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        with self._lock:
            return self._thread is not None

    def start(self):
        """Begin polling. Calling it again replaces the running schedule."""
        self.stop()

        with self._lock:
            stop_event = threading.Event()
            self._stop_event = stop_event
            # daemon=True means it dies when the main app closes
            self._thread = threading.Thread(
                target=self._run, args=(stop_event,), name="clipkeep-poller", daemon=True
            )
            self._thread.start()
        logger.info("Monitoring started")

    def stop(self):
        """Cancel polling. No firing starts after this returns."""
        with self._lock:
            if self._thread is None:
                return
            self._stop_event.set()
            thread = self._thread
            self._thread = None
            self._stop_event = None

        if thread is not threading.current_thread():
            thread.join()
        logger.info("Monitoring stopped")

    def _run(self, stop_event: threading.Event):
        while not stop_event.wait(POLL_INTERVAL):
            with self._lock:
                if stop_event.is_set():
                    break
                try:
                    self.poll_once()
                except Exception:
                    logger.exception("Clipboard poll failed")

    def poll_once(self) -> bool:
        """One firing. Returns True when text was handed to the store."""
        with self._lock:
            try:
                current = self.clipboard.change_count()
            except Exception as e:
                logger.warning(f"Could not read clipboard change count: {e}")
                return False

            if current == self.last_change_count:
                return False

            # Record first so a bad read is never retried forever
            self.last_change_count = current
            logger.debug("Change detected")

            try:
                text = self.clipboard.read_text()
            except Exception as e:
                logger.warning(f"Clipboard Error: {e}")
                logger.debug("Clipboard read traceback", exc_info=True)
                return False

            if not text:
                return False

            try:
                self.store.insert_or_promote(text)
            except Exception:
                logger.exception("Could not record clipboard text")
                return False
            return True

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False
