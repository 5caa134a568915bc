"""Headless clipboard history application"""

import signal
import sys
import threading
from pathlib import Path
from typing import Optional

from platformdirs import user_log_dir
from loguru import logger

from iclippy.core.clipboard import ChangeDetector, get_clipboard_provider
from iclippy.core.storage import ClipboardRepository, StorageError
from iclippy.services import HistoryService
from iclippy.utils import ConfigManager


class ClipboardHistoryApp:
    """Wires configuration, storage and clipboard monitoring together"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self.config_manager: Optional[ConfigManager] = None
        self.repository: Optional[ClipboardRepository] = None
        self.detector: Optional[ChangeDetector] = None
        self.history: Optional[HistoryService] = None

        self._shutdown_event = threading.Event()
        self._shutdown_lock = threading.Lock()
        self._stopped = False

    def _setup_logging(self):
        """Configure logging"""
        level = self.config_manager.get('logging.level', 'INFO')

        logger.remove()

        logger.add(
            sys.stderr,
            level=level,
            format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"
        )

        if self.config_manager.get('logging.file_logging', True):
            log_dir = Path(user_log_dir('iClippy', appauthor=False))
            log_dir.mkdir(parents=True, exist_ok=True)
            logger.add(
                log_dir / "iclippy_{time:YYYY-MM-DD}.log",
                rotation="1 day",
                retention=self.config_manager.get('logging.retention', '7 days'),
                level="DEBUG",
                format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
            )

    def initialize(self) -> bool:
        """Initialize all components"""
        self.config_manager = ConfigManager(self.config_path)

        if not self.config_manager.validate():
            logger.error("Invalid configuration")
            return False

        self._setup_logging()
        logger.info("iClippy starting")

        try:
            db_path = self.config_manager.get('storage.database_path')
            if db_path:
                self.repository = ClipboardRepository.open(db_path)
            else:
                self.repository = ClipboardRepository.default()
        except StorageError as e:
            logger.error(f"History storage unavailable: {e}")
            return False

        provider = get_clipboard_provider()
        check_interval = self.config_manager.get('clipboard.check_interval') / 1000.0
        self.detector = ChangeDetector(self.repository, provider, poll_interval=check_interval)
        self.history = HistoryService(
            self.repository, provider,
            limit=self.config_manager.get('history.fetch_limit')
        )

        size_kb = self.repository.db_manager.get_size() / 1024
        logger.info(f"Database location: {self.repository.database_path()} ({size_kb:.1f} KB)")
        logger.info(f"Entries stored: {self.repository.get_entry_count()}")
        return True

    def run(self):
        """Monitor the clipboard until shutdown is requested"""
        self.detector.start()
        logger.info("iClippy running, press Ctrl+C to exit")
        self._shutdown_event.wait()

    def request_shutdown(self):
        self._shutdown_event.set()

    def shutdown(self):
        """Stop monitoring and release storage"""
        with self._shutdown_lock:
            if self._stopped:
                return
            self._stopped = True

        logger.info("Shutting down...")

        if self.detector:
            self.detector.stop()

        if self.repository:
            self.repository.close()

        logger.info("Application shutdown complete")


def main():
    """Main entry point"""
    app = ClipboardHistoryApp()

    def signal_handler(signum, frame):
        logger.info(f"Received signal {signum}")
        app.request_shutdown()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    if not app.initialize():
        logger.error("Failed to initialize application")
        sys.exit(1)

    try:
        app.run()
    finally:
        app.shutdown()


if __name__ == "__main__":
    main()
