import json
import os

import pytest

from clipkeep.config import Config
from clipkeep.history import HISTORY_KEY, HistoryStore
from clipkeep.storage import (
    JsonFileStorage,
    MemoryStorage,
    StorageError,
    open_storage,
)


@pytest.fixture
def history_path(tmp_path):
    return tmp_path / "nested" / "history.json"


def test_missing_file_loads_empty(history_path):
    assert JsonFileStorage(str(history_path)).load(HISTORY_KEY) == []


def test_save_creates_directories_and_keeps_order(history_path):
    storage = JsonFileStorage(str(history_path))
    storage.save(HISTORY_KEY, ["zeta", "alpha", "mid\nline", "ünïcode"])

    assert history_path.exists()
    assert JsonFileStorage(str(history_path)).load(HISTORY_KEY) == [
        "zeta", "alpha", "mid\nline", "ünïcode"
    ]


def test_save_leaves_other_keys_alone(history_path):
    storage = JsonFileStorage(str(history_path))
    storage.save("other", ["x"])
    storage.save(HISTORY_KEY, ["y"])

    data = json.loads(history_path.read_text(encoding="utf-8"))
    assert data == {"other": ["x"], HISTORY_KEY: ["y"]}


def test_save_leaves_no_temp_files(history_path):
    storage = JsonFileStorage(str(history_path))
    storage.save(HISTORY_KEY, ["a"])
    storage.save(HISTORY_KEY, ["b", "a"])
    assert os.listdir(history_path.parent) == ["history.json"]


def test_corrupt_file_loads_empty(history_path):
    history_path.parent.mkdir(parents=True)
    history_path.write_text("{not json", encoding="utf-8")
    assert JsonFileStorage(str(history_path)).load(HISTORY_KEY) == []


def test_non_string_values_are_dropped(history_path):
    history_path.parent.mkdir(parents=True)
    history_path.write_text(json.dumps({HISTORY_KEY: ["a", 3, None, "b"]}), encoding="utf-8")
    assert JsonFileStorage(str(history_path)).load(HISTORY_KEY) == ["a", "b"]


def test_unwritable_location_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    storage = JsonFileStorage(str(blocker / "history.json"))
    with pytest.raises(StorageError):
        storage.save(HISTORY_KEY, ["a"])


def test_history_survives_restart(history_path):
    first = HistoryStore(JsonFileStorage(str(history_path)))
    for text in ["one", "two", "three"]:
        first.insert_or_promote(text)
    first.promote(2)

    second = HistoryStore(JsonFileStorage(str(history_path)))
    assert second.list() == ["one", "three", "two"]


def test_memory_storage_copies_lists():
    storage = MemoryStorage()
    items = ["a"]
    storage.save("k", items)
    items.append("b")
    loaded = storage.load("k")
    loaded.append("c")
    assert storage.load("k") == ["a"]


def test_open_storage_json(tmp_path):
    config = Config(history_file=str(tmp_path / "h.json"))
    storage = open_storage(config)
    assert isinstance(storage, JsonFileStorage)
    assert storage.path == str(tmp_path / "h.json")


def test_open_storage_unknown_backend():
    with pytest.raises(ValueError):
        open_storage(Config(storage="redis"))


def test_qsettings_round_trip(tmp_path):
    pytest.importorskip("PyQt6.QtCore")
    from clipkeep.storage import QSettingsStorage

    path = str(tmp_path / "settings.ini")
    storage = QSettingsStorage(path=path)
    storage.save(HISTORY_KEY, ["b", "a, with comma", "c"])
    assert QSettingsStorage(path=path).load(HISTORY_KEY) == ["b", "a, with comma", "c"]

    storage.save(HISTORY_KEY, ["only"])
    assert QSettingsStorage(path=path).load(HISTORY_KEY) == ["only"]

    storage.save(HISTORY_KEY, [])
    assert QSettingsStorage(path=path).load(HISTORY_KEY) == []


def test_undecodable_file_loads_empty(history_path):
    history_path.parent.mkdir(parents=True)
    history_path.write_bytes(b'{"SavedClipboardItems": ["\xff\xfe"]}')

    store = HistoryStore(JsonFileStorage(str(history_path)))
    assert store.list() == []


def test_file_corrupted_while_running_is_overwritten(history_path, events):
    calls = []
    events.subscribe(lambda: calls.append(1))
    store = HistoryStore(JsonFileStorage(str(history_path)), events)
    store.insert_or_promote("before")

    history_path.write_bytes(b"\xff\xfe garbage")
    assert store.insert_or_promote("after") is True
    assert calls == [1, 1]
    assert store.persistence_degraded is False
    assert JsonFileStorage(str(history_path)).load(HISTORY_KEY) == ["after", "before"]
