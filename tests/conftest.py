from __future__ import annotations

import re
import sys
from pathlib import Path

import pytest

# Make the mamacare package importable when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from mamacare.app import create_app  # noqa: E402
from mamacare.core import config as core_config  # noqa: E402
from mamacare.core.tokens import TokenService  # noqa: E402
from mamacare.db import models  # noqa: E402
from mamacare.db import session as db_session  # noqa: E402
from mamacare.repositories.sql_repository import SQLRepository  # noqa: E402
from mamacare.services.auth_service import AuthService  # noqa: E402

CODE_RE = re.compile(r"verification code is (\d{6})")


class RecordingMailer:
    """In-memory stand-in for the SMTP relay."""

    def __init__(self) -> None:
        self.sent = []
        self.fail = False

    def send(self, message) -> bool:
        if self.fail:
            return False
        self.sent.append(message)
        return True

    def last_code(self, email: str) -> str:
        for message in reversed(self.sent):
            match = CODE_RE.search(message.text_body or "")
            if message.to == email and match:
                return match.group(1)
        raise AssertionError(f"no verification code sent to {email}")


def _clear_caches() -> None:
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def db_env(tmp_path, monkeypatch):
    """Temporary SQLite database plus the secrets the app requires."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("JWT_SECRET", "test-signing-secret")
    monkeypatch.setenv("SMTP_USER", "mamacare@example.com")
    monkeypatch.setenv("SMTP_PASSWORD", "smtp-password")
    for name in ("APP_ENV", "SMTP_FROM", "PUBLIC_BASE_URL", "RATE_LIMIT_MAX", "RATE_LIMIT_WINDOW_SECONDS", "SESSION_TTL_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    _clear_caches()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    _clear_caches()


@pytest.fixture()
def settings(db_env):
    return core_config.get_settings()


@pytest.fixture()
def mailer():
    return RecordingMailer()


@pytest.fixture()
def repo(db_env):
    return SQLRepository()


@pytest.fixture()
def tokens(settings):
    return TokenService(settings)


@pytest.fixture()
def auth_service(settings, repo, mailer, tokens):
    return AuthService(settings=settings, repository=repo, mailer=mailer, tokens=tokens)


@pytest.fixture()
def client(settings, mailer):
    app = create_app(settings, mailer=mailer)
    with TestClient(app) as test_client:
        yield test_client
