"""Operational API routes"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool

from vidforge.app import VidForgeApp

from .auth_deps import get_app

router = APIRouter(prefix="/api", tags=["api"])


@router.get("/health")
async def health_check(
    upstream: bool = Query(False),
    vf: VidForgeApp = Depends(get_app),
) -> Dict[str, Any]:
    """
    Health check endpoint for deployment platforms.

    With ?upstream=true the AI endpoint is probed too; an unreachable
    upstream is reported but the route still answers 200.
    """
    result: Dict[str, Any] = {
        "status": "healthy",
        "service": "vidforge",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if upstream:
        reachable = await run_in_threadpool(vf.generation_gateway.check_health)
        result["upstream"] = "reachable" if reachable else "unreachable"
    return result
