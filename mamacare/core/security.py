"""Security helpers (hashing, verification and one-time codes)."""

from __future__ import annotations

import secrets

from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()

CODE_MIN = 100000
CODE_MAX = 999999


class HashingError(RuntimeError):
    """The stored digest could not be processed."""


def hash_secret(secret: str) -> str:
    """Create a salted Argon2 digest for a password or verification code."""
    try:
        return _ph.hash(secret)
    except argon_exc.HashingError as exc:
        raise HashingError("could not hash secret") from exc


def verify_secret(secret: str, stored_hash: str | None) -> bool:
    """Check a secret against its digest. A missing digest never matches."""
    if not stored_hash or not secret:
        return False
    try:
        return _ph.verify(stored_hash, secret)
    except argon_exc.VerifyMismatchError:
        return False
    except (argon_exc.VerificationError, argon_exc.InvalidHashError) as exc:
        raise HashingError("stored digest is malformed") from exc


def needs_rehash(stored_hash: str) -> bool:
    try:
        return _ph.check_needs_rehash(stored_hash)
    except argon_exc.InvalidHashError:
        return False


def generate_verification_code() -> str:
    """Uniformly random 6-digit code in [100000, 999999]."""
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))
