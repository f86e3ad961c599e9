"""Data models for users, sessions and video history"""

from .user import User
from .session import Session
from .video import VideoRecord, VideoStatus

__all__ = ["User", "Session", "VideoRecord", "VideoStatus"]
