from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from mamacare.core.config import ConfigurationError, Settings, get_settings
from mamacare.core.errors import ApiError, ErrorKind, InternalError, STATUS_CODES
from mamacare.core.mailer import Mailer, SMTPMailer
from mamacare.core.rate_limiter import RateLimiter
from mamacare.core.security import HashingError
from mamacare.core.tokens import TokenService
from mamacare.db import create_all
from mamacare.repositories.sql_repository import SQLRepository
from mamacare.routers import account as account_router
from mamacare.routers import auth as auth_router
from mamacare.routers import contact as contact_router
from mamacare.services.auth_service import AuthService
from mamacare.services.contact_service import ContactService

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("Content-Security-Policy", "default-src 'none'; frame-ancestors 'none'")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def _error_body(message: str, *, settings: Settings, exc: Optional[BaseException] = None, redirect: Optional[str] = None) -> dict:
    body = {"message": message}
    if redirect:
        body["redirect"] = redirect
    if exc is not None and not settings.is_prod:
        body["error"] = str(exc)
    return body


def _install_error_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        headers = {}
        retry_after = getattr(exc, "retry_after", 0)
        if retry_after:
            headers["Retry-After"] = str(retry_after)
        if exc.kind is ErrorKind.UNAUTHORIZED:
            headers["WWW-Authenticate"] = "Bearer"
        return JSONResponse(
            _error_body(exc.message, settings=settings, redirect=exc.redirect),
            status_code=exc.status_code,
            headers=headers or None,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse({"message": "Invalid request body"}, status_code=STATUS_CODES[ErrorKind.VALIDATION])

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return JSONResponse(_error_body("Internal server error", settings=settings, exc=exc), status_code=500)

    @app.exception_handler(HashingError)
    async def hashing_error_handler(request: Request, exc: HashingError):
        logger.exception("Credential hashing failed on %s %s", request.method, request.url.path)
        return JSONResponse(_error_body("Internal server error", settings=settings, exc=exc), status_code=500)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(_error_body(InternalError().message, settings=settings, exc=exc), status_code=500)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = "Endpoint not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse({"message": message}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


def create_app(settings: Optional[Settings] = None, mailer: Optional[Mailer] = None) -> FastAPI:
    """Build the API. Refuses to start without the signing secret and mail credentials."""
    settings = settings or get_settings()
    try:
        settings.require_secrets()
    except ConfigurationError:
        logger.error("Refusing to start: incomplete configuration")
        raise

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        create_all()
        yield

    app = FastAPI(title="MamaCare API", lifespan=lifespan)

    mailer = mailer or SMTPMailer(settings)
    repository = SQLRepository()
    token_service = TokenService(settings)
    app.state.settings = settings
    app.state.token_service = token_service
    app.state.rate_limiter = RateLimiter.from_settings(settings)
    app.state.repository = repository
    app.state.auth_service = AuthService(
        settings=settings,
        repository=repository,
        mailer=mailer,
        tokens=token_service,
    )
    app.state.contact_service = ContactService(mailer, operator_email=settings.smtp_user)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.cors_origins),
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.is_prod)
    _install_error_handlers(app, settings)

    @app.get("/")
    def health():
        return {"message": "MamaCare API is running!"}

    @app.get("/api/test-db")
    def test_db(request: Request):
        request.app.state.repository.ping()
        return {"message": "Database connected successfully"}

    app.include_router(auth_router.router)
    app.include_router(contact_router.router)
    app.include_router(account_router.router)
    return app
