"""Repository pattern for clipboard history access"""

import os
import threading
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, List, Optional, Union

from sqlalchemy import func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from loguru import logger

from .database import ClipboardEntryDB, DatabaseManager, default_database_path
from .errors import QueryFailure
from ..clipboard.history import ClipboardEntry

DEFAULT_LIMIT = 500
LIKE_ESCAPE = '\\'


class HistoryStore(ABC):
    """Capabilities a clipboard history backend provides"""

    @abstractmethod
    def add(self, text: str) -> bool:
        """Insert text unless it is empty or already stored"""

    @abstractmethod
    def fetch_all(self, limit: int = DEFAULT_LIMIT) -> List[ClipboardEntry]:
        """Most recent entries first"""

    @abstractmethod
    def search(self, query: str, limit: int = DEFAULT_LIMIT) -> List[ClipboardEntry]:
        """Entries containing query, most recent first"""

    @abstractmethod
    def database_path(self) -> str:
        """Location of the backing file"""


def _escape_like(query: str) -> str:
    """Escape LIKE wildcards so the query matches literally"""
    return (
        query.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace('%', LIKE_ESCAPE + '%')
        .replace('_', LIKE_ESCAPE + '_')
    )


class ClipboardRepository(HistoryStore):
    """SQLite-backed clipboard history with deduplicated inserts"""

    def __init__(self, database_manager: DatabaseManager,
                 clock: Callable[[], float] = time.time):
        """
        Initialize repository

        Args:
            database_manager: Opened DatabaseManager instance
            clock: Source of Unix time for created_at
        """
        self.db_manager = database_manager
        self._clock = clock
        self._lock = threading.RLock()

    @classmethod
    def open(cls, path: Union[str, os.PathLike],
             clock: Callable[[], float] = time.time) -> 'ClipboardRepository':
        """
        Open or create a history database at path

        Raises:
            StorageUnavailable: Directory or file cannot be opened
            SchemaInitFailure: Schema creation failed
        """
        return cls(DatabaseManager(path), clock=clock)

    @classmethod
    def default(cls, clock: Callable[[], float] = time.time) -> 'ClipboardRepository':
        """Open the history database in the platform app-data directory"""
        path = default_database_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            # open() reports the real failure if the directory is unusable
            logger.debug(f"Could not create {path.parent}: {e}")
        return cls.open(path, clock=clock)

    @contextmanager
    def get_session(self):
        """Serialized session that commits on success and rolls back on error"""
        with self._lock:
            if self.db_manager.is_closed:
                raise QueryFailure("Database is closed")
            session = self.db_manager.get_session()
            try:
                yield session
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise QueryFailure(str(e)) from e
            finally:
                session.close()

    def add(self, text: str) -> bool:
        """
        Save clipboard text, ignoring duplicates

        The insert and the uniqueness check are a single statement, so the
        first stored copy of a text keeps its id and timestamp.

        Args:
            text: Clipboard text, trimmed before storing

        Returns:
            True if a new entry was stored
        """
        trimmed = text.strip()
        if not trimmed:
            return False

        statement = (
            sqlite_insert(ClipboardEntryDB)
            .values(text=trimmed, created_at=int(self._clock()))
            .on_conflict_do_nothing(index_elements=[ClipboardEntryDB.text])
        )

        try:
            with self.get_session() as session:
                result = session.connection().execute(statement)
                added = result.rowcount > 0
        except QueryFailure as e:
            logger.error(f"Failed to save entry: {e}")
            return False

        if added:
            logger.debug(f"Saved new entry ({len(trimmed)} chars)")
        else:
            logger.debug("Ignored duplicate entry")
        return added

    def fetch_all(self, limit: int = DEFAULT_LIMIT) -> List[ClipboardEntry]:
        """
        Get entries, most recent first

        Args:
            limit: Maximum number of entries, must be positive

        Returns:
            List of clipboard entries
        """
        return self._query(None, limit)

    def search(self, query: str, limit: int = DEFAULT_LIMIT) -> List[ClipboardEntry]:
        """
        Case-insensitive substring search, most recent first

        An empty or whitespace-only query returns the same as fetch_all.

        Args:
            query: Text to look for
            limit: Maximum number of entries, must be positive

        Returns:
            List of matching entries
        """
        trimmed = query.strip()
        return self._query(trimmed or None, limit)

    def _query(self, needle: Optional[str], limit: int) -> List[ClipboardEntry]:
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        statement = select(ClipboardEntryDB)
        if needle is not None:
            pattern = f"%{_escape_like(needle)}%"
            statement = statement.where(ClipboardEntryDB.text.ilike(pattern, escape=LIKE_ESCAPE))
        statement = statement.order_by(
            ClipboardEntryDB.created_at.desc(),
            ClipboardEntryDB.id.desc()
        ).limit(limit)

        try:
            with self.get_session() as session:
                rows = session.scalars(statement).all()
                return [
                    ClipboardEntry(id=row.id, text=row.text, created_at=row.created_at)
                    for row in rows
                ]
        except QueryFailure as e:
            logger.error(f"Failed to get entries: {e}")
            return []

    def get_entry_count(self) -> int:
        """
        Get total number of entries in the database

        Returns:
            Number of entries
        """
        try:
            with self.get_session() as session:
                return session.scalar(select(func.count()).select_from(ClipboardEntryDB))
        except QueryFailure as e:
            logger.error(f"Failed to get entry count: {e}")
            return 0

    def database_path(self) -> str:
        return self.db_manager.db_path

    def close(self) -> None:
        """Release the database connection"""
        with self._lock:
            self.db_manager.close()

    def __enter__(self) -> 'ClipboardRepository':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
