"""Account store backed by SQLAlchemy."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, text, update
from sqlalchemy.exc import IntegrityError

from mamacare.db.models import User
from mamacare.db.session import get_session


class EmailTakenError(Exception):
    """The store's uniqueness constraint on email rejected an insert."""


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    # -------------------------- users --------------------------
    def get_user(self, user_id: int) -> Optional[User]:
        with get_session() as session:
            return session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with get_session() as session:
            stmt = select(User).where(User.email == email)
            return session.execute(stmt).scalar_one_or_none()

    def create_user(self, name: str, email: str, password_hash: str, verification_code_hash: str) -> User:
        now = datetime.now(timezone.utc)
        user = User(
            name=name,
            email=email,
            password_hash=password_hash,
            is_verified=False,
            verification_code_hash=verification_code_hash,
            created_at=now,
            updated_at=now,
        )
        with get_session() as session:
            session.add(user)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise EmailTakenError(email) from exc
            session.refresh(user)
            return user

    def mark_verified(self, user_id: int) -> bool:
        """Pending -> active. Returns False when the account was not pending."""
        now = datetime.now(timezone.utc)
        with get_session() as session:
            stmt = (
                update(User)
                .where(User.id == user_id, User.is_verified.is_(False))
                .values(is_verified=True, verification_code_hash=None, verified_at=now, updated_at=now)
            )
            result = session.execute(stmt)
            session.commit()
            return result.rowcount == 1

    def replace_verification_code(self, user_id: int, verification_code_hash: str) -> bool:
        """Swap the code hash of a pending account. Active accounts are left untouched."""
        with get_session() as session:
            stmt = (
                update(User)
                .where(User.id == user_id, User.is_verified.is_(False))
                .values(verification_code_hash=verification_code_hash, updated_at=datetime.now(timezone.utc))
            )
            result = session.execute(stmt)
            session.commit()
            return result.rowcount == 1

    def update_user_password(self, user_id: int, password_hash: str) -> None:
        with get_session() as session:
            stmt = (
                update(User)
                .where(User.id == user_id)
                .values(password_hash=password_hash, updated_at=datetime.now(timezone.utc))
            )
            session.execute(stmt)
            session.commit()

    # -------------------------- health --------------------------
    def ping(self) -> None:
        with get_session() as session:
            session.execute(text("SELECT 1"))
