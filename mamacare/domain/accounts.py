"""Domain rules for account fields."""
from __future__ import annotations

import re

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
MAX_NAME_LENGTH = 255
MAX_EMAIL_LENGTH = 255
MIN_PASSWORD_LENGTH = 8
MAX_MESSAGE_LENGTH = 1000


def is_valid_email(value: str | None) -> bool:
    """Return True when value has a local@domain.tld shape."""
    if not value:
        return False
    return bool(EMAIL_PATTERN.fullmatch(value))


def missing_fields(**fields: str | None) -> list[str]:
    """Names of the fields that are absent or blank, in call order."""
    return [name for name, value in fields.items() if not (value or "").strip()]
