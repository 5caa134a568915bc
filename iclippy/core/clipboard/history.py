"""Clipboard history entry model"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class ClipboardEntry:
    """Single persisted clipboard snapshot"""
    id: int
    text: str
    created_at: int  # Unix timestamp, seconds

    @property
    def date(self) -> datetime:
        """Creation time as a local datetime"""
        return datetime.fromtimestamp(self.created_at)

    def preview(self, max_length: int = 80) -> str:
        """
        Single-line preview of the text for list rendering

        Args:
            max_length: Maximum preview length including the ellipsis

        Returns:
            Collapsed, possibly shortened text
        """
        collapsed = " ".join(self.text.split())
        if len(collapsed) <= max_length:
            return collapsed
        return collapsed[:max_length - 1].rstrip() + "…"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        data = asdict(self)
        data['date'] = self.date.isoformat()
        return data
