"""Routes for the in-memory video history log"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from vidforge.app import VidForgeApp

from .auth_deps import get_app
from .models import HistoryCreateRequest, HistoryUpdateRequest

router = APIRouter(prefix="/history", tags=["history"])


@router.get("")
async def list_history(
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    status: Optional[str] = Query(None),
    vf: VidForgeApp = Depends(get_app),
) -> Dict[str, Any]:
    """Newest first; unknown status values are ignored"""
    page = vf.history_service.list(status=status, limit=limit, offset=offset)
    return {
        "success": True,
        "data": [record.to_public() for record in page.items],
        "total": page.total,
        "limit": page.limit,
        "offset": page.offset,
        "hasMore": page.has_more,
    }


@router.post("")
async def add_history(body: HistoryCreateRequest, vf: VidForgeApp = Depends(get_app)) -> Dict[str, Any]:
    record = vf.history_service.add(
        prompt=body.prompt,
        video_url=body.video_url,
        thumbnail_url=body.thumbnail_url,
        duration=body.duration,
        aspect_ratio=body.aspect_ratio,
        style=body.style,
        status=body.status,
    )
    return {"success": True, "data": record.to_public()}


@router.put("")
async def update_history(body: HistoryUpdateRequest, vf: VidForgeApp = Depends(get_app)) -> Dict[str, Any]:
    record = vf.history_service.update_status(
        body.id,
        body.status,
        video_url=body.video_url,
        thumbnail_url=body.thumbnail_url,
    )
    return {"success": True, "data": record.to_public()}


@router.delete("")
async def delete_history(
    id: Optional[str] = Query(None),
    vf: VidForgeApp = Depends(get_app),
) -> Dict[str, Any]:
    record = vf.history_service.remove(id)
    return {
        "success": True,
        "message": "Video deleted successfully",
        "data": record.to_public(),
    }
