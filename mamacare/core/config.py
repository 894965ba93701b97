"""
Configuration helpers for the MamaCare backend.

Settings are read from the environment once per process. Components receive
the Settings instance explicitly instead of reading os.environ themselves.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


class ConfigurationError(RuntimeError):
    """Raised when the process cannot start with the current environment."""


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    public_base_url: str
    database_url: str
    jwt_secret: str
    jwt_algorithm: str
    session_ttl_seconds: int
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    smtp_from: str
    rate_limit_max: int
    rate_limit_window_seconds: int
    trust_forwarded_for: bool
    cors_origins: tuple[str, ...]

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"

    def require_secrets(self) -> None:
        """Refuse to start without a signing secret and mail credentials."""
        missing = []
        if not self.jwt_secret:
            missing.append("JWT_SECRET")
        if not self.smtp_user:
            missing.append("SMTP_USER")
        if not self.smtp_password:
            missing.append("SMTP_PASSWORD")
        if missing:
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    default_base = "https://mamahub.vercel.app" if app_env == "prod" else "http://localhost:5173"
    smtp_user = os.getenv("SMTP_USER", "")
    cors = os.getenv("CORS_ORIGINS", "http://localhost:5173,https://mamahub.vercel.app")

    return Settings(
        app_env=app_env,
        public_base_url=os.getenv("PUBLIC_BASE_URL", default_base).rstrip("/"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./mamacare.db"),
        jwt_secret=os.getenv("JWT_SECRET", ""),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "3600"), 3600),
        smtp_host=os.getenv("SMTP_HOST", "smtp.gmail.com"),
        smtp_port=_int(os.getenv("SMTP_PORT", "465"), 465),
        smtp_user=smtp_user,
        smtp_password=os.getenv("SMTP_PASSWORD", ""),
        smtp_from=os.getenv("SMTP_FROM", f'"MamaCare" <{smtp_user}>' if smtp_user else ""),
        rate_limit_max=_int(os.getenv("RATE_LIMIT_MAX", "100"), 100),
        rate_limit_window_seconds=_int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900"), 900),
        trust_forwarded_for=_bool(os.getenv("TRUST_FORWARDED_FOR"), False),
        cors_origins=tuple(origin.strip().rstrip("/") for origin in cors.split(",") if origin.strip()),
    )
