"""
FastAPI dependencies shared by the route modules.
"""

from typing import Optional

from fastapi import HTTPException, Request

from vidforge.app import VidForgeApp
from vidforge.services.auth_service import parse_bearer


def get_app(request: Request) -> VidForgeApp:
    """Dependency to get the VidForge container attached to the FastAPI app"""
    instance = getattr(request.app.state, "vidforge", None)
    if instance is None:
        raise HTTPException(status_code=500, detail="Application not initialized")
    return instance


def get_session_token(request: Request) -> Optional[str]:
    """Extract the bearer token from the Authorization header"""
    return parse_bearer(request.headers.get("Authorization"))
