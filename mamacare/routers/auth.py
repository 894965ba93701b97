from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from mamacare.core.errors import NotificationFailure
from mamacare.core.rate_limiter import rate_limit_ip
from mamacare.schemas.auth import (
    LoginRequest,
    MessageResponse,
    ResendVerificationRequest,
    SessionResponse,
    SignupRequest,
    VerifyEmailRequest,
)
from mamacare.services.auth_service import AuthService

router = APIRouter(prefix="/api", tags=["auth"], dependencies=[Depends(rate_limit_ip)])


def get_auth_service(request: Request) -> AuthService:
    service = getattr(getattr(request.app, "state", None), "auth_service", None)
    if service is None:
        raise RuntimeError("AuthService is not configured")
    return service


@router.post(
    "/signup",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    response_model_exclude_none=True,
)
def signup(body: SignupRequest, auth_service: AuthService = Depends(get_auth_service)):
    result = auth_service.signup(body.name, body.email, body.password)
    if not result.notification.delivered:
        raise NotificationFailure("User registered, but failed to send verification email", redirect="/verify")
    return MessageResponse(
        message="User registered successfully! Please check your email for the verification code.",
        redirect="/verify",
    )


@router.post("/verify-email", response_model=SessionResponse)
def verify_email(body: VerifyEmailRequest, auth_service: AuthService = Depends(get_auth_service)):
    result = auth_service.verify_email(body.email, body.code)
    return SessionResponse(
        message="Email verified successfully! You're now logged in.",
        token=result.token,
        user=result.user.as_dict(),
        redirect="/dashboard",
    )


@router.post("/login", response_model=SessionResponse)
def login(body: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    result = auth_service.login(body.email, body.password)
    return SessionResponse(
        message="Login successful",
        token=result.token,
        user=result.user.as_dict(),
        redirect="/dashboard",
    )


@router.post("/resend-verification", response_model=MessageResponse, response_model_exclude_none=True)
def resend_verification(body: ResendVerificationRequest, auth_service: AuthService = Depends(get_auth_service)):
    auth_service.resend_verification(body.email)
    return MessageResponse(
        message="If the account is pending verification, a new code has been sent.",
        redirect="/verify",
    )
