"""Endpoints that act on the caller's own account."""

from fastapi import APIRouter, Depends

from mamacare.core.tokens import TokenClaims
from mamacare.routers.auth import get_auth_service
from mamacare.schemas.auth import UserResponse
from mamacare.services.auth_service import AuthService
from mamacare.services.session_service import require_identity

router = APIRouter(prefix="/api", tags=["account"])


@router.get("/user", response_model=UserResponse)
def current_user(
    identity: TokenClaims = Depends(require_identity),
    auth_service: AuthService = Depends(get_auth_service),
):
    return auth_service.current_account(identity).as_dict()
