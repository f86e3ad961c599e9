"""Main application container"""

from datetime import timedelta
from typing import Optional

import requests

from .models.user import User
from .models.video import VideoRecord
from .services.auth_service import AuthService
from .services.generation_gateway import GenerationGateway
from .services.history_service import HistoryService
from .services.session_sweeper import SessionSweeper
from .stores.record_store import RecordStore
from .stores.session_table import SessionTable
from .utils.config import Settings, config_manager
from .utils.logger import get_logger, setup_logger

logger = get_logger(__name__)


class VidForgeApp:
    """Owns every store and service for one process (or one test)"""

    def __init__(self, settings: Optional[Settings] = None, http_session: Optional[requests.Session] = None):
        self.settings = settings or config_manager.settings

        self.users: RecordStore[User] = RecordStore("users")
        self.sessions = SessionTable(ttl=timedelta(hours=self.settings.auth.session_ttl_hours))
        self.videos: RecordStore[VideoRecord] = RecordStore("videos")

        self.auth_service = AuthService(self.users, self.sessions)
        self.history_service = HistoryService(
            self.videos,
            max_records=self.settings.history.max_records,
            default_limit=self.settings.history.default_limit,
            thumbnail_base_url=self.settings.history.thumbnail_base_url,
        )
        self.generation_gateway = GenerationGateway(self.settings.generation, session=http_session)
        self.session_sweeper = SessionSweeper(
            self.sessions,
            interval_seconds=self.settings.auth.sweep_interval_seconds,
        )
        self._initialized = False

    def initialize(self, configure_logging: bool = True) -> None:
        """Set up logging and seed demo data (idempotent)"""
        if self._initialized:
            return

        if configure_logging:
            log = self.settings.logging
            setup_logger(
                log_level=log.level,
                log_format=log.format,
                file_path=log.file_path,
                max_bytes=log.max_bytes,
                backup_count=log.backup_count,
            )

        logger.info(
            "Initializing VidForge application",
            app_name=self.settings.app.name,
            version=self.settings.app.version,
            environment=self.settings.app.environment,
        )

        if self.settings.auth.seed_demo_user:
            self.auth_service.seed_demo_user()
        if self.settings.history.seed_demo:
            self.history_service.seed_demo()
        self._initialized = True

    def start_background(self) -> None:
        self.session_sweeper.start()

    def shutdown(self) -> None:
        """Stop background jobs"""
        logger.info("Shutting down VidForge application")
        try:
            self.session_sweeper.stop()
        except Exception as e:
            logger.warning("Error stopping session sweeper", error=str(e))
