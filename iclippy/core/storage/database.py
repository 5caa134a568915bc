"""Database management using SQLAlchemy"""

import os
import weakref
from pathlib import Path
from typing import Optional, Union

from platformdirs import user_data_dir
from sqlalchemy import create_engine, Column, Index, Integer, Text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from loguru import logger

from .errors import StorageUnavailable, SchemaInitFailure

APP_NAME = 'iClippy'
DATABASE_FILENAME = 'iclippy.sqlite3'

Base = declarative_base()


class ClipboardEntryDB(Base):
    """Database model for clipboard entries"""
    __tablename__ = 'entries'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    text = Column(Text, unique=True, nullable=False)
    created_at = Column(Integer, nullable=False)


Index('idx_created_at', ClipboardEntryDB.created_at.desc())


def default_database_path() -> Path:
    """Platform application-data location of the history database"""
    return Path(user_data_dir(appname=APP_NAME, appauthor=False)) / DATABASE_FILENAME


class DatabaseManager:
    """Manages the SQLite engine, schema and sessions"""

    def __init__(self, db_path: Union[str, os.PathLike]):
        """
        Open or create the database

        Args:
            db_path: Path to database file

        Raises:
            StorageUnavailable: Directory or file cannot be opened
            SchemaInitFailure: Tables cannot be created
        """
        self.db_path = str(db_path)
        self.engine = None
        self.SessionLocal: Optional[sessionmaker] = None
        self._finalizer = None

        self._initialize_database()

    def _initialize_database(self):
        """Initialize database connection and create tables"""
        try:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create database directory for {self.db_path}: {e}")
            raise StorageUnavailable(f"Cannot create directory for {self.db_path}: {e}") from e

        self.engine = create_engine(
            f'sqlite:///{self.db_path}',
            connect_args={'check_same_thread': False}
        )
        self._finalizer = weakref.finalize(self, self.engine.dispose)

        try:
            # Engine connects lazily; force the open so failures surface here.
            # SQLite falls back to read-only for unwritable files, so take a
            # write lock to confirm the file is usable for inserts
            with self.engine.connect() as conn:
                conn.exec_driver_sql("BEGIN IMMEDIATE")
                conn.exec_driver_sql("ROLLBACK")
        except SQLAlchemyError as e:
            self.close()
            logger.error(f"Failed to open database at {self.db_path}: {e}")
            raise StorageUnavailable(f"Cannot open {self.db_path}: {e}") from e

        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            self.close()
            logger.error(f"Failed to initialize schema: {e}")
            raise SchemaInitFailure(f"Cannot create schema in {self.db_path}: {e}") from e

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        logger.info(f"Database initialized at: {self.db_path}")

    def get_session(self) -> Session:
        """
        Get database session

        Returns:
            SQLAlchemy session
        """
        if self.SessionLocal is None:
            raise RuntimeError("Database not initialized")

        return self.SessionLocal()

    @property
    def is_closed(self) -> bool:
        return self._finalizer is None or not self._finalizer.alive

    def close(self):
        """Close database connection; later calls are no-ops"""
        if self._finalizer is not None and self._finalizer.alive:
            self._finalizer()
            self.SessionLocal = None
            logger.info("Database connection closed")

    def get_size(self) -> int:
        """
        Get database file size in bytes

        Returns:
            Size in bytes
        """
        if os.path.exists(self.db_path):
            return os.path.getsize(self.db_path)
        return 0
