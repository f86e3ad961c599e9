"""Background job that periodically removes expired sessions."""

import threading
from typing import Optional

import schedule

from ..stores.session_table import SessionTable
from ..utils.logger import get_logger

logger = get_logger(__name__)


class SessionSweeper:
    """Runs SessionTable.sweep on a fixed interval in a daemon thread"""

    def __init__(
        self,
        sessions: SessionTable,
        interval_seconds: int = 3600,  # 1 hour
        poll_seconds: float = 1.0,
    ):
        self.sessions = sessions
        self.interval_seconds = interval_seconds
        self.poll_seconds = poll_seconds
        self.scheduler = schedule.Scheduler()
        self.stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> int:
        """Sweep immediately; returns the number of sessions removed."""
        try:
            return self.sessions.sweep()
        except Exception as e:
            logger.error("Session sweep failed", error=str(e))
            return 0

    def start(self) -> None:
        """Start the background sweep loop"""
        if self.running:
            logger.warning("Session sweeper already running")
            return

        self.scheduler.clear()
        self.scheduler.every(self.interval_seconds).seconds.do(self.run_once)
        self.stop_event.clear()
        self._thread = threading.Thread(
            target=self._loop,
            daemon=True,
            name="session-sweeper",
        )
        self._thread.start()
        logger.info("Session sweeper started", interval_seconds=self.interval_seconds)

    def stop(self) -> None:
        """Stop the loop and drop the scheduled job"""
        self.stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            if self._thread.is_alive():
                logger.warning("Session sweeper thread still alive after timeout, continuing shutdown")
            self._thread = None
        self.scheduler.clear()
        logger.info("Session sweeper stopped")

    def _loop(self) -> None:
        logger.info("Session sweeper loop started")
        while not self.stop_event.is_set():
            try:
                self.scheduler.run_pending()
            except Exception as e:
                logger.error("Error in session sweeper loop", error=str(e))
            self.stop_event.wait(self.poll_seconds)
        logger.info("Session sweeper loop stopped")
