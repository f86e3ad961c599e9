"""
Routes for the demo authentication flow.

POST   /auth   login or signup, returns a bearer token
GET    /auth   session status for the bearer token
DELETE /auth   logout
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from vidforge.app import VidForgeApp
from vidforge.utils.exceptions import ValidationError
from vidforge.utils.logger import get_logger

from .auth_deps import get_app, get_session_token
from .models import AuthRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("")
async def login_or_signup(body: AuthRequest, vf: VidForgeApp = Depends(get_app)) -> Dict[str, Any]:
    """
    Log in or sign up.

    Request:
        {"action": "login" | "signup", "email": ..., "password": ..., "displayName": ...}

    Response:
        {"success": true, "message": ..., "token": "<session_token>", "user": {...}}
    """
    if not body.action:
        raise ValidationError("Missing required fields")
    vf.auth_service.validate_credentials(body.email, body.password)

    if body.action == "login":
        result = vf.auth_service.login(body.email, body.password)
        message = "Login successful"
    elif body.action == "signup":
        result = vf.auth_service.signup(body.email, body.password, body.display_name)
        message = "Account created successfully"
    else:
        raise ValidationError('Invalid action. Use "login" or "signup"')

    return {
        "success": True,
        "message": message,
        "token": result.token,
        "user": result.user.to_public(),
    }


@router.get("")
async def auth_status(
    token: Optional[str] = Depends(get_session_token),
    vf: VidForgeApp = Depends(get_app),
) -> Dict[str, Any]:
    """Report whether the bearer token resolves to a live session. Always 200."""
    status = vf.auth_service.check_status(token)
    if not status.authenticated:
        return {
            "success": False,
            "authenticated": False,
            "reason": status.reason.value,
            "error": status.message,
        }
    return {
        "success": True,
        "authenticated": True,
        "user": status.user.to_public(),
    }


@router.delete("")
async def logout(
    token: Optional[str] = Depends(get_session_token),
    vf: VidForgeApp = Depends(get_app),
) -> Dict[str, Any]:
    vf.auth_service.logout(token)
    return {"success": True, "message": "Logged out successfully"}
