import logging
import sys

from clipkeep.clipboard import open_clipboard
from clipkeep.config import Config, setup_logging
from clipkeep.events import HistoryEvents
from clipkeep.history import HistoryStore
from clipkeep.poller import ChangePoller
from clipkeep.storage import open_storage

logger = logging.getLogger(__name__)

MUTEX_NAME = "Global\\clipkeep_monitor"


def acquire_single_instance():
    """
    On Windows, hold a named mutex so only one process monitors the
    clipboard. Returns something truthy to keep a reference to, or None
    if another instance already owns the mutex.
    """
    if sys.platform != "win32":
        return True

    from win32api import GetLastError
    from win32event import CreateMutex
    from winerror import ERROR_ALREADY_EXISTS

    mutex = CreateMutex(None, False, MUTEX_NAME)
    if GetLastError() == ERROR_ALREADY_EXISTS:
        return None
    return mutex


def build_core(config: Config):
    """The one place the history, its storage and the poller are created"""
    storage = open_storage(config)
    store = HistoryStore(storage, HistoryEvents())
    poller = ChangePoller(open_clipboard(config.clipboard_backend), store)
    return store, poller


def main():
    config = Config.load()
    setup_logging(config.log_level)

    mutex = acquire_single_instance()
    if mutex is None:
        logger.info("Another clipkeep instance is already running")
        sys.exit(0)

    from PyQt6.QtWidgets import QApplication

    from clipkeep.tray import SystemTray

    qt_app = QApplication(sys.argv)
    qt_app.setApplicationName("clipkeep")
    qt_app.setQuitOnLastWindowClosed(False)

    store, poller = build_core(config)
    tray = SystemTray(qt_app, store, quit_callback=qt_app.quit)  # noqa: F841 - keeps the icon alive

    poller.start()
    try:
        exit_code = qt_app.exec()
    finally:
        poller.stop()
    sys.exit(exit_code)
