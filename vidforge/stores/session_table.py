"""
In-memory session table.

Maps opaque bearer tokens to their owner and lifetime. Expired entries are
dropped when looked up and by the periodic sweep.
"""

from __future__ import annotations

import secrets
import threading
import time
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, NamedTuple, Optional

from ..models.session import Session
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Session expiration: 24 hours
DEFAULT_SESSION_TTL = timedelta(hours=24)


class SessionState(str, Enum):
    VALID = "valid"
    EXPIRED = "expired"
    NOT_FOUND = "not_found"


class SessionLookup(NamedTuple):
    state: SessionState
    session: Optional[Session] = None

    @property
    def owner_id(self) -> Optional[str]:
        return self.session.owner_id if self.session else None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_token() -> str:
    """Create an opaque session token (timestamp plus random suffix)."""
    return f"sess_{int(time.time() * 1000)}_{secrets.token_urlsafe(16)}"


class SessionTable:
    """Token -> Session map with TTL semantics"""

    def __init__(self, ttl: timedelta = DEFAULT_SESSION_TTL):
        self.ttl = ttl
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.RLock()

    def create(self, owner_id: str, now: Optional[datetime] = None) -> str:
        """Create a new session and return its token"""
        now = now or _utcnow()
        token = generate_token()
        session = Session(
            token=token,
            owner_id=owner_id,
            created_at=now,
            expires_at=now + self.ttl,
        )
        with self._lock:
            self._sessions[token] = session
        logger.debug("Session created", owner_id=owner_id, expires_at=session.expires_at.isoformat())
        return token

    def get(self, token: str) -> Optional[Session]:
        """Raw lookup without expiry checks."""
        with self._lock:
            return self._sessions.get(token)

    def validate(self, token: str, now: Optional[datetime] = None) -> SessionLookup:
        """
        Resolve a token.

        An entry with now > expires_at is deleted and reported as EXPIRED.
        """
        now = now or _utcnow()
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return SessionLookup(SessionState.NOT_FOUND)
            if session.is_expired(now):
                del self._sessions[token]
                logger.info("Session expired on lookup", owner_id=session.owner_id)
                return SessionLookup(SessionState.EXPIRED, session)
            return SessionLookup(SessionState.VALID, session)

    def revoke(self, token: str) -> bool:
        """Invalidate a session token (idempotent). Returns True if one was removed."""
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def sweep(self, now: Optional[datetime] = None) -> int:
        """Remove every session with expires_at <= now; return the number removed."""
        now = now or _utcnow()
        with self._lock:
            expired = [t for t, s in self._sessions.items() if s.expires_at <= now]
            for token in expired:
                del self._sessions[token]
        if expired:
            logger.info("Expired sessions swept", removed=len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, token: str) -> bool:
        return self.get(token) is not None
