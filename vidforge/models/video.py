"""Video history data models"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class VideoStatus(str, Enum):
    """Generation status of a history entry"""
    COMPLETED = "completed"
    PROCESSING = "processing"
    FAILED = "failed"

    @classmethod
    def parse(cls, value) -> Optional["VideoStatus"]:
        """Return the matching status, or None for unknown values."""
        try:
            return cls(value)
        except ValueError:
            return None


class VideoRecord(BaseModel):
    """One entry of the video history log"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    prompt: str
    video_url: str
    thumbnail_url: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: VideoStatus = VideoStatus.COMPLETED
    duration: int = 0
    aspect_ratio: str = "16:9"
    style: str = "cinematic"

    def to_public(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
