"""
Account lifecycle use cases: signup, email verification and login.

An account is either pending (holds a one-time code hash, cannot log in) or
active (code hash cleared, can log in). The only transition is pending ->
active, driven by a correct verification code.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging

from mamacare.core.config import Settings
from mamacare.core.errors import (
    Conflict,
    InvalidCode,
    InvalidCredentials,
    NotFound,
    NotVerified,
    ValidationError,
)
from mamacare.core.mailer import Mailer
from mamacare.core.security import generate_verification_code, hash_secret, needs_rehash, verify_secret
from mamacare.core.tokens import TokenClaims, TokenService
from mamacare.db.models import User
from mamacare.domain.accounts import (
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MIN_PASSWORD_LENGTH,
    is_valid_email,
    missing_fields,
)
from mamacare.repositories.sql_repository import EmailTakenError, SQLRepository
from mamacare.services.emails import verified_email, welcome_email

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountInfo:
    id: int
    name: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "AccountInfo":
        return cls(id=user.id, name=user.name, email=user.email)

    def as_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class AccountCreated:
    account_id: int
    email: str


@dataclass(frozen=True)
class NotificationOutcome:
    delivered: bool


@dataclass(frozen=True)
class SignupResult:
    """The account exists once this is returned; delivery is reported separately."""

    account: AccountCreated
    notification: NotificationOutcome


@dataclass(frozen=True)
class SessionResult:
    token: str
    user: AccountInfo


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_secret("mamacare-timing-equalizer")


@dataclass
class AuthService:
    """Handles registration, verification and login flows."""

    settings: Settings
    repository: SQLRepository
    mailer: Mailer
    tokens: TokenService

    # -------------------------------------- signup --------------------------------------
    def signup(self, name: str | None, email: str | None, password: str | None) -> SignupResult:
        name = (name or "").strip()
        email = (email or "").strip()
        password = password or ""
        if missing_fields(name=name, email=email, password=password):
            raise ValidationError("Missing required fields: name, email, password")
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")
        if len(name) > MAX_NAME_LENGTH or len(email) > MAX_EMAIL_LENGTH or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Invalid input lengths")
        if self.repository.get_user_by_email(email):
            raise Conflict()

        code = generate_verification_code()
        try:
            user = self.repository.create_user(name, email, hash_secret(password), hash_secret(code))
        except EmailTakenError:
            # Lost a race against a concurrent signup for the same email.
            raise Conflict() from None
        logger.info("Account %s created for %s (pending verification)", user.id, email)

        delivered = self.mailer.send(welcome_email(name, email, code, self.settings.public_base_url))
        if not delivered:
            logger.error("Account %s created but the verification email was not delivered", user.id)
        return SignupResult(
            account=AccountCreated(account_id=user.id, email=email),
            notification=NotificationOutcome(delivered=delivered),
        )

    def resend_verification(self, email: str | None) -> bool:
        """Issue a fresh code for a pending account. Unknown or active emails are a silent no-op."""
        email = (email or "").strip()
        if not email:
            raise ValidationError("Missing required fields: email")
        user = self.repository.get_user_by_email(email)
        if not user or user.is_verified:
            return False
        code = generate_verification_code()
        if not self.repository.replace_verification_code(user.id, hash_secret(code)):
            return False
        if not self.mailer.send(welcome_email(user.name, user.email, code, self.settings.public_base_url)):
            logger.error("Verification email resend for account %s was not delivered", user.id)
            return False
        return True

    # -------------------------------------- verification --------------------------------------
    def verify_email(self, email: str | None, code: str | None) -> SessionResult:
        email = (email or "").strip()
        code = (code or "").strip()
        if missing_fields(email=email, code=code):
            raise ValidationError("Missing required fields: email, code")
        user = self.repository.get_user_by_email(email)
        if not user:
            raise NotFound()
        # Active accounts have no code hash, so re-verification always fails here.
        if not verify_secret(code, user.verification_code_hash):
            raise InvalidCode()
        if not self.repository.mark_verified(user.id):
            # A concurrent request consumed the code first.
            raise InvalidCode()
        logger.info("Account %s verified", user.id)

        token = self.tokens.issue(user.id, user.email)
        if not self.mailer.send(verified_email(user.name, user.email, self.settings.public_base_url)):
            logger.warning("Confirmation email for account %s was not delivered", user.id)
        return SessionResult(token=token, user=AccountInfo.from_user(user))

    # -------------------------------------- login --------------------------------------
    def login(self, email: str | None, password: str | None) -> SessionResult:
        email = (email or "").strip()
        password = password or ""
        if missing_fields(email=email, password=password):
            raise ValidationError("Missing required fields: email, password")
        user = self.repository.get_user_by_email(email)
        if not user:
            verify_secret(password, _dummy_hash())
            raise InvalidCredentials()
        if not user.is_verified:
            raise NotVerified(redirect="/verify")
        if not verify_secret(password, user.password_hash):
            raise InvalidCredentials()
        if needs_rehash(user.password_hash):
            self.repository.update_user_password(user.id, hash_secret(password))
        return SessionResult(token=self.tokens.issue(user.id, user.email), user=AccountInfo.from_user(user))

    # -------------------------------------- identity --------------------------------------
    def current_account(self, claims: TokenClaims) -> AccountInfo:
        user = self.repository.get_user(claims.account_id)
        if not user:
            raise NotFound()
        return AccountInfo.from_user(user)
