"""Custom exceptions for the video generation back end"""

from typing import Optional


class VidForgeError(Exception):
    """Base exception for VidForge"""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        if status_code is not None:
            self.status_code = status_code
        self.message = message
        super().__init__(message)


class ValidationError(VidForgeError):
    """Malformed or missing input"""
    status_code = 400


class AuthError(VidForgeError):
    """Missing, invalid or expired session"""

    status_code = 401

    def __init__(self, message: str, reason: Optional[str] = None, status_code: Optional[int] = None):
        self.reason = reason
        super().__init__(message, status_code=status_code)


class InvalidCredentialsError(AuthError):
    """Login rejected"""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, reason="invalid_credentials")


class NotFoundError(VidForgeError):
    """Record does not exist"""
    status_code = 404


class ConflictError(VidForgeError):
    """Record already exists (duplicate email)"""
    status_code = 409


class GenerationTimeoutError(VidForgeError):
    """Upstream generation did not answer in time"""
    status_code = 408


class UpstreamError(VidForgeError):
    """Upstream model endpoint failed or returned a non-2xx status"""

    status_code = 502

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        self.upstream_status = upstream_status
        super().__init__(message)


class UpstreamFormatError(UpstreamError):
    """Upstream answered 2xx but without the expected shape"""
    pass


class ConfigError(VidForgeError):
    """Configuration error"""
    status_code = 500
