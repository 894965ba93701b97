"""
Error taxonomy shared by services, middleware and routers.

Every failure the API reports carries an ErrorKind so callers can branch on
what went wrong without depending on the HTTP status mapping.
"""

from __future__ import annotations

import enum
from typing import Optional


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation_error"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    INVALID_CODE = "invalid_code"
    INVALID_CREDENTIALS = "invalid_credentials"
    NOT_VERIFIED = "not_verified"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    RATE_LIMITED = "rate_limited"
    NOTIFICATION_FAILURE = "notification_failure"
    INTERNAL = "internal_error"


STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_CODE: 400,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.NOT_VERIFIED: 403,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.NOTIFICATION_FAILURE: 500,
    ErrorKind.INTERNAL: 500,
}


class ApiError(Exception):
    """Base class for failures reported to API clients."""

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, redirect: Optional[str] = None):
        self.message = message or self.default_message
        self.redirect = redirect
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


class ValidationError(ApiError):
    kind = ErrorKind.VALIDATION
    default_message = "Invalid input"


class Conflict(ApiError):
    kind = ErrorKind.CONFLICT
    default_message = "Email already registered"


class NotFound(ApiError):
    kind = ErrorKind.NOT_FOUND
    default_message = "User not found"


class InvalidCode(ApiError):
    kind = ErrorKind.INVALID_CODE
    default_message = "Invalid verification code"


class InvalidCredentials(ApiError):
    kind = ErrorKind.INVALID_CREDENTIALS
    default_message = "Invalid email or password"


class NotVerified(ApiError):
    kind = ErrorKind.NOT_VERIFIED
    default_message = "Please verify your email before logging in"


class Unauthorized(ApiError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Access token required"


class Forbidden(ApiError):
    kind = ErrorKind.FORBIDDEN
    default_message = "Invalid token"


class RateLimited(ApiError):
    kind = ErrorKind.RATE_LIMITED
    default_message = "Too many requests, please try again later."

    def __init__(self, message: Optional[str] = None, *, retry_after: int = 0):
        super().__init__(message)
        self.retry_after = retry_after


class NotificationFailure(ApiError):
    kind = ErrorKind.NOTIFICATION_FAILURE
    default_message = "Failed to send email"


class InternalError(ApiError):
    kind = ErrorKind.INTERNAL
