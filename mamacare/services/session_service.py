"""Session helpers (bearer extraction and validation)."""
from __future__ import annotations

from typing import Optional

from fastapi import Request

from mamacare.core.errors import Forbidden, Unauthorized
from mamacare.core.tokens import InvalidToken, TokenClaims, TokenService


def bearer_token(request: Request) -> Optional[str]:
    """Return the token from `Authorization: Bearer <token>`, if any."""
    header = request.headers.get("authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def require_identity(request: Request) -> TokenClaims:
    """
    Route dependency guarding protected endpoints.

    Missing credentials answer 401, bad or expired ones 403. On success the
    verified claims are also stored in `request.state.identity`; handlers must
    take the caller's identity from here and never from the request body.
    """
    token = bearer_token(request)
    if not token:
        raise Unauthorized()
    tokens: TokenService = request.app.state.token_service
    try:
        claims = tokens.verify(token)
    except InvalidToken:
        raise Forbidden() from None
    request.state.identity = claims
    return claims
