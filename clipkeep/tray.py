from PyQt6.QtCore import QObject, Qt, pyqtSignal
from PyQt6.QtGui import QBrush, QColor, QIcon, QPainter, QPixmap
from PyQt6.QtWidgets import QMenu, QSystemTrayIcon

from clipkeep.clipboard import copy_text

LABEL_WIDTH = 30


def menu_label(text: str, width: int = LABEL_WIDTH) -> str:
    """Single-line menu title: first `width` characters, '...' when cut"""
    flat = text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    return flat[:width] + ("..." if len(flat) > width else "")


def create_programmatic_icon():
    """Generates a QIcon programmatically (dark square with a clipboard sheet)"""
    pixmap = QPixmap(64, 64)
    pixmap.fill(Qt.GlobalColor.transparent)

    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    painter.setPen(Qt.PenStyle.NoPen)

    # Background
    painter.setBrush(QBrush(QColor("#1e1e1e")))
    painter.drawRoundedRect(0, 0, 64, 64, 12, 12)

    # Sheet
    painter.setBrush(QBrush(QColor("#e6e6eb")))
    painter.drawRoundedRect(18, 14, 28, 38, 4, 4)

    # Clip
    painter.setBrush(QBrush(QColor("#00bcd4")))
    painter.drawRoundedRect(24, 8, 16, 10, 3, 3)

    painter.end()
    return QIcon(pixmap)


class TraySignals(QObject):
    # History events fire on the poller thread; Qt delivers this on the GUI thread
    history_changed = pyqtSignal()


class SystemTray:
    def __init__(self, app, store, quit_callback):
        self.app = app
        self.store = store
        self.quit_callback = quit_callback

        self.signals = TraySignals()
        self.signals.history_changed.connect(self.rebuild_menu)
        self._unsubscribe = store.events.subscribe(self.signals.history_changed.emit)

        self.tray_icon = QSystemTrayIcon(app)
        self.tray_icon.setIcon(create_programmatic_icon())
        self.tray_icon.setToolTip("Clipboard")

        self.menu = QMenu()
        self.rebuild_menu()

        self.tray_icon.setContextMenu(self.menu)
        self.tray_icon.show()

    def rebuild_menu(self):
        self.menu.clear()
        items = self.store.list()

        for index, item in enumerate(items):
            action = self.menu.addAction(menu_label(item))
            action.triggered.connect(lambda checked=False, i=index: self.copy_item(i))

        if items:
            self.menu.addSeparator()

        clear_action = self.menu.addAction("Clear All Items")
        clear_action.triggered.connect(self.store.clear)

        self.menu.addSeparator()

        exit_action = self.menu.addAction("Quit")
        exit_action.triggered.connect(self.on_exit)

    def copy_item(self, index: int):
        items = self.store.list()
        if index < len(items):
            # The poller may have shifted the list since it was read
            item = items[index]
            copy_text(item)
            self.store.promote_text(item)

    def on_exit(self):
        self._unsubscribe()
        self.tray_icon.hide()
        if self.quit_callback:
            self.quit_callback()
