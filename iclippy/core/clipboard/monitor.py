"""Clipboard change detection feeding the history store"""

from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from .provider import ClipboardProvider, get_clipboard_provider

JOB_ID = 'clipboard_check'


class ChangeDetector:
    """Polls the clipboard change token and forwards new text to a store"""

    def __init__(self, store, provider: Optional[ClipboardProvider] = None,
                 poll_interval: float = 0.5):
        """
        Initialize change detector

        Args:
            store: Object with an add(text) method
            provider: Clipboard provider (platform default if omitted)
            poll_interval: Seconds between checks
        """
        self.store = store
        self.provider = provider or get_clipboard_provider()
        self.poll_interval = poll_interval
        self._scheduler: Optional[BackgroundScheduler] = None
        # Content already on the clipboard at startup is not recorded
        self._last_token = self.provider.change_token()

        logger.info(f"ChangeDetector initialized with {poll_interval}s interval")

    def start(self) -> None:
        """Start polling the clipboard"""
        if self._scheduler is not None:
            logger.warning("Change detector already running")
            return

        scheduler = BackgroundScheduler(daemon=True)
        scheduler.add_job(
            func=self._check_clipboard,
            trigger=IntervalTrigger(seconds=self.poll_interval),
            id=JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True
        )
        scheduler.start()
        self._scheduler = scheduler

        logger.info("Clipboard monitoring started")

    def stop(self) -> None:
        """Stop polling; safe to call when not running"""
        if self._scheduler is None:
            logger.debug("Change detector not running")
            return

        scheduler, self._scheduler = self._scheduler, None
        scheduler.shutdown(wait=True)

        logger.info("Clipboard monitoring stopped")

    @property
    def is_running(self) -> bool:
        """Check if detector is running"""
        return self._scheduler is not None

    def _check_clipboard(self) -> None:
        """One tick: forward clipboard text if the change token moved"""
        try:
            token = self.provider.change_token()
            if token == self._last_token:
                return
            self._last_token = token

            text = self.provider.read_text()
            if text is None:
                return

            trimmed = text.strip()
            if trimmed:
                self.store.add(trimmed)

        except Exception as e:
            logger.error(f"Error in clipboard check: {e}")
