"""Platform clipboard access behind a change-token interface"""

import ctypes
import hashlib
import platform
import threading
from abc import ABC, abstractmethod
from typing import Optional

import pyperclip
from loguru import logger

try:
    from AppKit import NSPasteboard, NSPasteboardTypeString
    HAS_APPKIT = True
except ImportError:
    HAS_APPKIT = False


class ClipboardProvider(ABC):
    """Source of clipboard change tokens and text"""

    @abstractmethod
    def change_token(self) -> int:
        """Integer that increases whenever clipboard content changes"""

    @abstractmethod
    def read_text(self) -> Optional[str]:
        """Plain-text clipboard content, or None when there is none"""

    @abstractmethod
    def write_text(self, text: str) -> bool:
        """Replace clipboard contents with text"""


class PyperclipProvider(ClipboardProvider):
    """
    Portable provider built on pyperclip

    pyperclip exposes no change counter, so one is derived by comparing a
    hash of the current text with the previous read.
    """

    def __init__(self):
        self._token = 0
        self._last_hash: Optional[str] = None
        self._lock = threading.Lock()

    def change_token(self) -> int:
        try:
            content = pyperclip.paste()
        except pyperclip.PyperclipException as e:
            logger.debug(f"Clipboard unavailable: {e}")
            content = ""

        content_hash = hashlib.sha256(content.encode()).hexdigest()
        with self._lock:
            if content_hash != self._last_hash:
                self._last_hash = content_hash
                self._token += 1
            return self._token

    def read_text(self) -> Optional[str]:
        try:
            content = pyperclip.paste()
        except pyperclip.PyperclipException as e:
            logger.debug(f"Clipboard unavailable: {e}")
            return None
        return content or None

    def write_text(self, text: str) -> bool:
        try:
            pyperclip.copy(text)
            return True
        except pyperclip.PyperclipException as e:
            logger.error(f"Failed to write clipboard: {e}")
            return False


class WindowsProvider(PyperclipProvider):
    """Windows provider using the native clipboard sequence number"""

    def __init__(self):
        super().__init__()
        self._user32 = ctypes.windll.user32
        self._user32.GetClipboardSequenceNumber.restype = ctypes.c_ulong

    def change_token(self) -> int:
        return int(self._user32.GetClipboardSequenceNumber())


class MacOSProvider(ClipboardProvider):
    """macOS provider reading NSPasteboard directly"""

    def __init__(self):
        if not HAS_APPKIT:
            raise RuntimeError("AppKit bindings are not installed")
        self._pasteboard = NSPasteboard.generalPasteboard()

    def change_token(self) -> int:
        return int(self._pasteboard.changeCount())

    def read_text(self) -> Optional[str]:
        text = self._pasteboard.stringForType_(NSPasteboardTypeString)
        return str(text) if text is not None else None

    def write_text(self, text: str) -> bool:
        self._pasteboard.clearContents()
        if not self._pasteboard.setString_forType_(text, NSPasteboardTypeString):
            logger.error("Failed to write clipboard")
            return False
        return True


def get_clipboard_provider() -> ClipboardProvider:
    """Best available provider for the running platform"""
    system = platform.system()

    if system == "Darwin" and HAS_APPKIT:
        return MacOSProvider()
    if system == "Windows":
        try:
            return WindowsProvider()
        except (AttributeError, OSError) as e:
            logger.warning(f"Native clipboard sequence unavailable, using pyperclip: {e}")

    return PyperclipProvider()
