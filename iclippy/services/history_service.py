"""History queries and copy-back for presentation layers"""

from typing import List, Optional

from loguru import logger

from ..core.clipboard.history import ClipboardEntry
from ..core.clipboard.provider import ClipboardProvider
from ..core.storage.repository import DEFAULT_LIMIT, HistoryStore


class HistoryService:
    """Read-only history access plus writing a chosen entry to the clipboard"""

    def __init__(self, store: HistoryStore, provider: ClipboardProvider,
                 limit: int = DEFAULT_LIMIT):
        self.store = store
        self.provider = provider
        self.limit = limit

    def fetch_all(self, limit: Optional[int] = None) -> List[ClipboardEntry]:
        return self.store.fetch_all(self.limit if limit is None else limit)

    def search(self, query: str, limit: Optional[int] = None) -> List[ClipboardEntry]:
        return self.store.search(query, self.limit if limit is None else limit)

    def load_entries(self, query: str = "") -> List[ClipboardEntry]:
        """
        Entries for the current search box contents

        Args:
            query: Search text, empty for the full history

        Returns:
            Entries to display, most recent first
        """
        if not query:
            return self.fetch_all()
        return self.search(query)

    def copy_to_clipboard(self, text: str) -> bool:
        """
        Put text back on the system clipboard

        Args:
            text: Entry text to copy

        Returns:
            True if the clipboard was updated
        """
        copied = self.provider.write_text(text)
        if copied:
            logger.debug(f"Copied entry to clipboard ({len(text)} chars)")
        return copied
