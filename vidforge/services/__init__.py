"""Domain services: auth, history, generation and background maintenance"""

from .auth_service import AuthReason, AuthResult, AuthService, AuthStatus
from .generation_gateway import GenerationGateway, GenerationRequest, GenerationResult, UrlSource
from .history_service import HistoryPage, HistoryService
from .session_sweeper import SessionSweeper

__all__ = [
    "AuthReason",
    "AuthResult",
    "AuthService",
    "AuthStatus",
    "GenerationGateway",
    "GenerationRequest",
    "GenerationResult",
    "HistoryPage",
    "HistoryService",
    "SessionSweeper",
    "UrlSource",
]
