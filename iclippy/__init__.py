"""iClippy - clipboard history with local persistence"""

__version__ = "1.0.0"
