"""Video history: add, update, remove and paginated listing over a RecordStore"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, NamedTuple, Optional
from urllib.parse import quote

from ..models.video import VideoRecord, VideoStatus
from ..stores.record_store import RecordStore
from ..utils.exceptions import NotFoundError, ValidationError
from ..utils.ids import new_id
from ..utils.logger import get_logger

logger = get_logger(__name__)

MAX_RECORDS = 100
DEFAULT_LIMIT = 20


class HistoryPage(NamedTuple):
    items: List[VideoRecord]
    total: int
    limit: int
    offset: int
    has_more: bool


class HistoryService:
    """CRUD plus filter/sort/paginate over video records"""

    def __init__(
        self,
        store: RecordStore[VideoRecord],
        max_records: int = MAX_RECORDS,
        default_limit: int = DEFAULT_LIMIT,
        thumbnail_base_url: str = "https://placehold.co/320x180",
    ):
        self.store = store
        self.max_records = max_records
        self.default_limit = default_limit
        self.thumbnail_base_url = thumbnail_base_url.rstrip("/")

    def thumbnail_for(self, prompt: str) -> str:
        """Deterministic placeholder thumbnail derived from the prompt text."""
        return f"{self.thumbnail_base_url}?text={quote(prompt[:50])}"

    def list(
        self,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> HistoryPage:
        """
        Return one page of history, newest first.

        Unknown status values are ignored rather than rejected.
        """
        limit = self.default_limit if limit is None else max(0, limit)
        offset = max(0, offset or 0)

        records = self.store.all()
        wanted = VideoStatus.parse(status) if status else None
        if wanted is not None:
            records = [r for r in records if r.status == wanted]

        records.sort(key=lambda r: r.created_at, reverse=True)
        total = len(records)
        return HistoryPage(
            items=records[offset:offset + limit],
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + limit < total,
        )

    def get(self, video_id: str) -> VideoRecord:
        record = self.store.find_by_id(video_id)
        if record is None:
            raise NotFoundError("Video not found")
        return record

    def add(
        self,
        prompt: Optional[str],
        video_url: Optional[str],
        thumbnail_url: Optional[str] = None,
        duration: Optional[int] = None,
        aspect_ratio: Optional[str] = None,
        style: Optional[str] = None,
        status: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> VideoRecord:
        """
        Insert a record at the front and enforce the capacity cap.

        Raises:
            ValidationError: prompt or video_url missing, or unknown status
        """
        if not prompt or not prompt.strip() or not video_url:
            raise ValidationError("Missing required fields: prompt and videoUrl")

        parsed_status = VideoStatus.COMPLETED
        if status:
            parsed_status = VideoStatus.parse(status)
            if parsed_status is None:
                raise ValidationError(f"Invalid status: {status}")

        record = VideoRecord(
            id=new_id("video"),
            prompt=prompt.strip(),
            video_url=video_url,
            thumbnail_url=thumbnail_url or self.thumbnail_for(prompt.strip()),
            created_at=created_at or datetime.now(timezone.utc),
            status=parsed_status,
            duration=duration or 0,
            aspect_ratio=aspect_ratio or "16:9",
            style=style or "cinematic",
        )
        self.store.insert(record, front=True)
        evicted = self.store.truncate(self.max_records)
        logger.info(
            "Video added to history",
            video_id=record.id,
            status=record.status.value,
            evicted=len(evicted),
        )
        return record

    def update_status(
        self,
        video_id: Optional[str],
        status: Optional[str],
        video_url: Optional[str] = None,
        thumbnail_url: Optional[str] = None,
    ) -> VideoRecord:
        """
        Change the status of a record; only supplied urls overwrite existing ones.

        Raises:
            ValidationError: id or status missing, or unknown status
            NotFoundError: No record with this id
        """
        if not video_id or not status:
            raise ValidationError("Missing required fields: id and status")
        parsed_status = VideoStatus.parse(status)
        if parsed_status is None:
            raise ValidationError(f"Invalid status: {status}")

        patch = {"status": parsed_status}
        if video_url:
            patch["video_url"] = video_url
        if thumbnail_url:
            patch["thumbnail_url"] = thumbnail_url

        try:
            record = self.store.update(video_id, patch)
        except NotFoundError:
            raise NotFoundError("Video not found")
        logger.info("Video status updated", video_id=video_id, status=parsed_status.value)
        return record

    def remove(self, video_id: Optional[str]) -> VideoRecord:
        if not video_id:
            raise ValidationError("Missing required parameter: id")
        try:
            record = self.store.remove(video_id)
        except NotFoundError:
            raise NotFoundError("Video not found")
        logger.info("Video removed from history", video_id=video_id)
        return record

    def seed_demo(self, now: Optional[datetime] = None) -> List[VideoRecord]:
        """Insert a few back-dated sample entries for an empty history."""
        if len(self.store):
            return []
        now = now or datetime.now(timezone.utc)
        samples = [
            VideoRecord(
                id="demo_1",
                prompt="A serene mountain landscape with flowing water and morning mist",
                video_url="https://videos.example/demo_1.mp4",
                thumbnail_url=self.thumbnail_for("A serene mountain landscape"),
                created_at=now - timedelta(days=1),
                status=VideoStatus.COMPLETED,
                duration=15,
            ),
            VideoRecord(
                id="demo_2",
                prompt="Futuristic cityscape with flying cars and neon lights at night",
                video_url="https://videos.example/demo_2.mp4",
                thumbnail_url=self.thumbnail_for("Futuristic cityscape"),
                created_at=now - timedelta(days=2),
                status=VideoStatus.COMPLETED,
                duration=20,
            ),
            VideoRecord(
                id="demo_3",
                prompt="Underwater coral reef with colorful marine life swimming",
                video_url="",
                thumbnail_url=self.thumbnail_for("Underwater coral reef"),
                created_at=now - timedelta(hours=1),
                status=VideoStatus.PROCESSING,
                style="realistic",
            ),
        ]
        for record in samples:
            self.store.insert(record)
        logger.info("Seeded demo history", count=len(samples))
        return samples
