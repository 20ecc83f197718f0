"""
Key-value persistence for the clipboard history.

Every adapter offers the same two calls:
    load(key) -> list of strings ([] when nothing is stored)
    save(key, items) -> None, raises StorageError on failure
"""

import json
import logging
import os
import tempfile
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when a persistence adapter cannot read or write its backing store"""


def _only_strings(value) -> List[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


class MemoryStorage:
    """Dict-backed storage. Nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, List[str]]] = None):
        self._data: Dict[str, List[str]] = {
            k: list(v) for k, v in (initial or {}).items()
        }

    def load(self, key: str) -> List[str]:
        return list(self._data.get(key, []))

    def save(self, key: str, items: List[str]) -> None:
        self._data[key] = list(items)


class JsonFileStorage:
    """Stores every key in a single JSON object on disk"""

    def __init__(self, path: str):
        self.path = os.path.expanduser(path)

    def _read_all(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring corrupt history file {self.path}: {e}")
            return {}
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e

        if not isinstance(data, dict):
            logger.warning(f"Ignoring history file {self.path}: expected a JSON object")
            return {}
        return data

    def load(self, key: str) -> List[str]:
        return _only_strings(self._read_all().get(key))

    def save(self, key: str, items: List[str]) -> None:
        directory = os.path.dirname(self.path) or "."
        try:
            data = self._read_all()
        except StorageError:
            data = {}
        data[key] = list(items)

        try:
            os.makedirs(directory, exist_ok=True)
            # Write next to the target so os.replace stays on one filesystem
            fd, tmp_path = tempfile.mkstemp(
                dir=directory, prefix=".clipkeep-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e


class QSettingsStorage:
    """
    Persistence through Qt's QSettings (registry on Windows, plist on macOS,
    INI elsewhere). Pass `path` to force an INI file at that location.
    """

    def __init__(self, organization: str = "clipkeep", application: str = "clipkeep",
                 path: Optional[str] = None):
        from PyQt6.QtCore import QSettings

        self._no_error = QSettings.Status.NoError
        if path:
            self.settings = QSettings(os.path.expanduser(path), QSettings.Format.IniFormat)
        else:
            self.settings = QSettings(organization, application)

    def load(self, key: str) -> List[str]:
        value = self.settings.value(key, [])
        # A single stored string comes back as a str, not a one-item list
        if isinstance(value, str):
            value = [value]
        return _only_strings(value)

    def save(self, key: str, items: List[str]) -> None:
        self.settings.setValue(key, list(items))
        self.settings.sync()
        status = self.settings.status()
        if status != self._no_error:
            raise StorageError(f"QSettings sync failed: {status.name}")


def open_storage(config) -> "JsonFileStorage | QSettingsStorage":
    """Build the adapter named by config.storage"""
    if config.storage == "json":
        return JsonFileStorage(config.history_file)
    if config.storage == "qsettings":
        return QSettingsStorage()
    raise ValueError(f"Unknown storage backend: {config.storage!r}")
