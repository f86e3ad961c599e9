"""
Demo authentication service.

- Email-keyed users held in a RecordStore
- Opaque bearer sessions held in a SessionTable
- Passwords are only checked for presence; nothing is hashed or compared
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional

from ..models.user import User
from ..stores.record_store import RecordStore
from ..stores.session_table import SessionState, SessionTable
from ..utils.exceptions import AuthError, ConflictError, InvalidCredentialsError, ValidationError
from ..utils.ids import new_id
from ..utils.logger import get_logger

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DEMO_USER_ID = "demo_user_1"
DEMO_USER_EMAIL = "demo@example.com"


class AuthReason(str, Enum):
    """Why a status check did not authenticate"""
    NO_TOKEN = "no_token"
    INVALID_TOKEN = "invalid_token"
    EXPIRED = "expired"
    USER_MISSING = "user_missing"


REASON_MESSAGES = {
    AuthReason.NO_TOKEN: "No valid authentication token",
    AuthReason.INVALID_TOKEN: "Invalid session token",
    AuthReason.EXPIRED: "Session expired",
    AuthReason.USER_MISSING: "User not found",
}


class AuthResult(NamedTuple):
    token: str
    user: User


class AuthStatus(NamedTuple):
    authenticated: bool
    user: Optional[User] = None
    reason: Optional[AuthReason] = None

    @property
    def message(self) -> Optional[str]:
        return REASON_MESSAGES.get(self.reason) if self.reason else None


def is_valid_email(email: str) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def parse_bearer(header: Optional[str]) -> Optional[str]:
    """Extract the token from an 'Authorization: Bearer <token>' header value."""
    if not header or not header.startswith("Bearer "):
        return None
    token = header[7:].strip()
    return token or None


class AuthService:
    """Login, signup, status and logout over the user store and session table"""

    def __init__(self, users: RecordStore[User], sessions: SessionTable):
        self.users = users
        self.sessions = sessions

    def find_user_by_email(self, email: str) -> Optional[User]:
        wanted = (email or "").lower()
        return self.users.find_one(lambda u: u.email.lower() == wanted)

    def validate_credentials(self, email: Optional[str], password: Optional[str]) -> None:
        if not email or not password:
            raise ValidationError("Missing required fields")
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")

    def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        """
        Log in an existing user.

        Any non-empty password is accepted for a known email.

        Raises:
            ValidationError: Missing field or malformed email
            InvalidCredentialsError: No user with this email
        """
        self.validate_credentials(email, password)
        user = self.find_user_by_email(email)
        if user is None:
            logger.info("Login rejected", reason="unknown_email")
            raise InvalidCredentialsError()

        token = self.sessions.create(user.id)
        logger.info("Login successful", user_id=user.id)
        return AuthResult(token=token, user=user)

    def signup(
        self,
        email: Optional[str],
        password: Optional[str],
        display_name: Optional[str],
    ) -> AuthResult:
        """
        Register a new user and open a session for it.

        Raises:
            ValidationError: Missing field, malformed email or blank display name
            ConflictError: Email already registered (case-insensitive)
        """
        self.validate_credentials(email, password)
        if not display_name or not display_name.strip():
            raise ValidationError("Display name is required")

        if self.find_user_by_email(email) is not None:
            raise ConflictError("User with this email already exists")

        user = User(
            id=new_id("user"),
            email=email.lower(),
            display_name=display_name.strip(),
        )
        self.users.insert(user)
        token = self.sessions.create(user.id)
        logger.info("User registered", user_id=user.id)
        return AuthResult(token=token, user=user)

    def check_status(self, token: Optional[str], now: Optional[datetime] = None) -> AuthStatus:
        """Resolve a bearer token to its user without raising."""
        if not token:
            return AuthStatus(False, reason=AuthReason.NO_TOKEN)

        lookup = self.sessions.validate(token, now=now)
        if lookup.state == SessionState.NOT_FOUND:
            return AuthStatus(False, reason=AuthReason.INVALID_TOKEN)
        if lookup.state == SessionState.EXPIRED:
            return AuthStatus(False, reason=AuthReason.EXPIRED)

        user = self.users.find_by_id(lookup.owner_id)
        if user is None:
            # Stale session pointing to missing user
            self.sessions.revoke(token)
            logger.warning("Session referenced a missing user", owner_id=lookup.owner_id)
            return AuthStatus(False, reason=AuthReason.USER_MISSING)
        return AuthStatus(True, user=user)

    def logout(self, token: Optional[str]) -> None:
        """
        Invalidate a session token (idempotent).

        Raises:
            AuthError: No token supplied (status 400)
        """
        if not token:
            raise AuthError(
                "No authentication token provided",
                reason=AuthReason.NO_TOKEN.value,
                status_code=400,
            )
        if self.sessions.revoke(token):
            logger.info("Session revoked")

    def seed_demo_user(self) -> User:
        """Insert the demo account if it is not there yet."""
        existing = self.users.find_by_id(DEMO_USER_ID)
        if existing is not None:
            return existing
        user = User(id=DEMO_USER_ID, email=DEMO_USER_EMAIL, display_name="Demo User")
        self.users.insert(user)
        logger.info("Seeded demo user", email=DEMO_USER_EMAIL)
        return user
