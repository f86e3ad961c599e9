"""Routes proxying video generation to the upstream model endpoint"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from vidforge.app import VidForgeApp
from vidforge.services.generation_gateway import GenerationRequest

from .auth_deps import get_app
from .models import GenerateRequest

DEFAULT_ASPECT_RATIO = "16:9"
DEFAULT_STYLE = "cinematic"

router = APIRouter(prefix="/generate", tags=["generate"])


@router.post("")
async def generate_video(body: GenerateRequest, vf: VidForgeApp = Depends(get_app)) -> Dict[str, Any]:
    """
    Generate a video from a prompt.

    The result is not written to history; clients POST /history for that.
    """
    request = GenerationRequest(
        prompt=body.prompt,
        duration=body.duration,
        aspect_ratio=body.aspect_ratio or DEFAULT_ASPECT_RATIO,
        style=body.style or DEFAULT_STYLE,
    )
    # Blocking upstream call, bounded by the gateway deadline
    result = await run_in_threadpool(vf.generation_gateway.generate, request)
    return {"success": True, **result.to_public()}


@router.get("")
async def describe_service(vf: VidForgeApp = Depends(get_app)) -> Dict[str, Any]:
    return vf.generation_gateway.describe()
