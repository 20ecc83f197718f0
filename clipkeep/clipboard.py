"""
System clipboard access.

Each source exposes:
    change_count() -> int       opaque counter, changes whenever the clipboard does
    read_text() -> str | None   current plain text, None when there is none
"""

import logging
import sys
from typing import Optional

import pyperclip

logger = logging.getLogger(__name__)


class Win32Clipboard:
    """Windows clipboard via pywin32. Uses the system sequence number."""

    def __init__(self):
        import win32clipboard
        import win32con

        self._clip = win32clipboard
        self._format = win32con.CF_UNICODETEXT

    def change_count(self) -> int:
        return int(self._clip.GetClipboardSequenceNumber())

    def read_text(self) -> Optional[str]:
        self._clip.OpenClipboard(None)
        try:
            if not self._clip.IsClipboardFormatAvailable(self._format):
                return None
            return self._clip.GetClipboardData(self._format)
        finally:
            self._clip.CloseClipboard()


class MacClipboard:
    """macOS general pasteboard via pyobjc"""

    def __init__(self):
        from AppKit import NSPasteboard, NSPasteboardTypeString

        self._pasteboard = NSPasteboard.generalPasteboard()
        self._type = NSPasteboardTypeString

    def change_count(self) -> int:
        return int(self._pasteboard.changeCount())

    def read_text(self) -> Optional[str]:
        text = self._pasteboard.stringForType_(self._type)
        return None if text is None else str(text)


class PyperclipClipboard:
    """
    Portable fallback. pyperclip has no change counter, so one is derived:
    the counter moves every time the sampled text differs from the last
    sample. Copying the same text twice is therefore not seen as a change.
    """

    def __init__(self):
        self._count = 0
        try:
            self._text: Optional[str] = self._sample()
        except pyperclip.PyperclipException as e:
            logger.warning(f"Clipboard not readable at startup: {e}")
            self._text = None

    def _sample(self) -> Optional[str]:
        text = pyperclip.paste()
        return text if isinstance(text, str) else None

    def change_count(self) -> int:
        text = self._sample()
        if text != self._text:
            self._text = text
            self._count += 1
        return self._count

    def read_text(self) -> Optional[str]:
        # Already sampled by change_count() on this tick
        return self._text


BACKENDS = {
    "win32": Win32Clipboard,
    "macos": MacClipboard,
    "pyperclip": PyperclipClipboard,
}


def open_clipboard(backend: str = "auto"):
    """Pick a clipboard source. 'auto' prefers the native change counter."""
    if backend == "auto":
        if sys.platform == "win32":
            backend = "win32"
        elif sys.platform == "darwin":
            backend = "macos"
        else:
            backend = "pyperclip"

    try:
        factory = BACKENDS[backend]
    except KeyError:
        raise ValueError(f"Unknown clipboard backend: {backend!r}") from None

    logger.info(f"Using {backend} clipboard backend")
    return factory()


def copy_text(text: str) -> None:
    """Put text on the system clipboard"""
    pyperclip.copy(text)
