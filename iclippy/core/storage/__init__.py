"""Data persistence and storage management"""

from .database import DatabaseManager, default_database_path
from .errors import StorageError, StorageUnavailable, SchemaInitFailure, QueryFailure
from .repository import ClipboardRepository, HistoryStore

__all__ = [
    'DatabaseManager', 'default_database_path',
    'StorageError', 'StorageUnavailable', 'SchemaInitFailure', 'QueryFailure',
    'ClipboardRepository', 'HistoryStore',
]
