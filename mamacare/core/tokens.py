"""Signed, time-limited session tokens (JWT)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from .config import Settings


class InvalidToken(Exception):
    """Signature mismatch, malformed structure or expiry. Deliberately undistinguished."""


@dataclass(frozen=True)
class TokenClaims:
    account_id: int
    email: str


class TokenService:
    """Issues and verifies bearer tokens with a process-wide signing secret."""

    def __init__(self, settings: Settings) -> None:
        if not settings.jwt_secret:
            raise ValueError("TokenService requires a signing secret")
        self._secret = settings.jwt_secret
        self._algorithm = settings.jwt_algorithm
        self._ttl = timedelta(seconds=settings.session_ttl_seconds)

    def issue(self, account_id: int, email: str, *, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(account_id),
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as exc:
            raise InvalidToken() from exc
        subject = payload.get("sub")
        email = payload.get("email")
        if not subject or not isinstance(email, str) or "exp" not in payload:
            raise InvalidToken()
        try:
            account_id = int(subject)
        except (TypeError, ValueError) as exc:
            raise InvalidToken() from exc
        return TokenClaims(account_id=account_id, email=email)
