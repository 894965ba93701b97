"""Request and response bodies for the account endpoints.

Request fields are optional on purpose: presence and format checks belong to
the services so that every input problem is reported the same way.
"""

from typing import Any, Optional

from pydantic import BaseModel, field_validator


class _Body(BaseModel):
    @field_validator("*", mode="before", check_fields=False)
    @classmethod
    def _numbers_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class SignupRequest(_Body):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class VerifyEmailRequest(_Body):
    email: Optional[str] = None
    code: Optional[str] = None


class LoginRequest(_Body):
    email: Optional[str] = None
    password: Optional[str] = None


class ResendVerificationRequest(_Body):
    email: Optional[str] = None


class ContactRequest(_Body):
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    name: str
    email: str


class MessageResponse(BaseModel):
    message: str
    redirect: Optional[str] = None


class SessionResponse(BaseModel):
    message: str
    token: str
    user: UserResponse
    redirect: str
