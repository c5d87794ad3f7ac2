"""User domain model and the field rules every user store enforces."""

import re
from dataclasses import dataclass
from datetime import datetime

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
NAME_MAX_LENGTH = 50


@dataclass
class User:
    """Domain model representing a user."""
    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime
    last_login: datetime | None = None
    password_hash: str | None = None
    is_active: bool = True

    def public_view(self) -> dict:
        """Client-facing fields. The password hash is never part of it."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "createdAt": self.created_at,
        }


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


def normalize_email(email: str) -> str:
    return email.lower()


def field_errors(name: str, email: str) -> list[str]:
    """Return schema violations for a user record, in field order.

    Stores call this before writing so that both the Mongo and the in-memory
    repository reject the same documents with the same messages.
    """
    errors = []
    if not name or not name.strip():
        errors.append("Please provide a name")
    elif len(name) > NAME_MAX_LENGTH:
        errors.append(f"Name cannot be more than {NAME_MAX_LENGTH} characters")
    if not email or not is_valid_email(email):
        errors.append("Please provide a valid email")
    return errors
