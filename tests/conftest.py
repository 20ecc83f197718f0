import pytest

from clipkeep.events import HistoryEvents
from clipkeep.history import HistoryStore
from clipkeep.storage import MemoryStorage


class FakeClipboard:
    """Stand-in clipboard: a counter plus the current text"""

    def __init__(self, text=None, count=1):
        self.count = count
        self.text = text
        self.reads = 0
        self.fail_reads = False

    def copy(self, text):
        self.count += 1
        self.text = text

    def change_count(self):
        return self.count

    def read_text(self):
        self.reads += 1
        if self.fail_reads:
            raise RuntimeError("clipboard busy")
        return self.text


class EventRecorder:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def events():
    return HistoryEvents()


@pytest.fixture
def recorder(events):
    """Counts 'history changed' notifications."""
    rec = EventRecorder()
    events.subscribe(rec)
    return rec


@pytest.fixture
def store(storage, events):
    return HistoryStore(storage, events)


@pytest.fixture
def make_store(storage, events):
    """Build a store pre-loaded with the given items (most recent first)."""

    def _make(items):
        storage.save("SavedClipboardItems", items)
        return HistoryStore(storage, events)

    return _make


@pytest.fixture
def clipboard():
    return FakeClipboard(text="already there")
