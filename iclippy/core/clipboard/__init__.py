"""Clipboard monitoring and access"""

from .history import ClipboardEntry
from .monitor import ChangeDetector
from .provider import ClipboardProvider, get_clipboard_provider

__all__ = ['ClipboardEntry', 'ChangeDetector', 'ClipboardProvider', 'get_clipboard_provider']
