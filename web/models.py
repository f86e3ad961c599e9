"""API request models for the web layer"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase (client) or snake_case field names"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuthRequest(CamelModel):
    """POST /auth body"""
    action: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    display_name: Optional[str] = None


class GenerateRequest(CamelModel):
    """POST /generate body"""
    prompt: Optional[str] = None
    duration: Optional[int] = None
    aspect_ratio: Optional[str] = None
    style: Optional[str] = None


class HistoryCreateRequest(CamelModel):
    """POST /history body"""
    prompt: Optional[str] = None
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration: Optional[int] = None
    aspect_ratio: Optional[str] = None
    style: Optional[str] = None
    status: Optional[str] = None


class HistoryUpdateRequest(CamelModel):
    """PUT /history body"""
    id: Optional[str] = None
    status: Optional[str] = None
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
