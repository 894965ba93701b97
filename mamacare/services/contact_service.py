"""Contact form delivery to the operator mailbox."""

from __future__ import annotations

from mamacare.core.errors import NotificationFailure, ValidationError
from mamacare.core.mailer import Mailer
from mamacare.domain.accounts import MAX_MESSAGE_LENGTH, MAX_NAME_LENGTH, is_valid_email, missing_fields
from mamacare.services.emails import contact_email


class ContactService:
    def __init__(self, mailer: Mailer, operator_email: str) -> None:
        self.mailer = mailer
        self.operator_email = operator_email

    def submit(self, name: str | None, email: str | None, message: str | None) -> None:
        name = (name or "").strip()
        email = (email or "").strip()
        message = (message or "").strip()
        if missing_fields(name=name, email=email, message=message):
            raise ValidationError("Missing required fields: name, email, message")
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")
        if len(name) > MAX_NAME_LENGTH or len(message) > MAX_MESSAGE_LENGTH:
            raise ValidationError("Invalid input lengths")
        if not self.mailer.send(contact_email(name, email, message, self.operator_email)):
            raise NotificationFailure("Failed to send email")
