"""In-memory implementation of UserRepository for testing."""

import re
import uuid
from datetime import datetime, timezone
from domain.model.errors import (
    InvalidIdentifierError,
    StoreDuplicateKeyError,
    StoreValidationError,
)
from domain.model.user import User, field_errors

USER_ID_PATTERN = re.compile(r"[0-9a-f]{32}")


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        self.writes = 0

    # ── write operations ─────────────────────────────────────

    def create(self, email: str, password_hash: str, name: str) -> User:
        errors = field_errors(name, email)
        if errors:
            raise StoreValidationError(errors)
        if any(u.email == email for u in self.store.values()):
            raise StoreDuplicateKeyError(f"duplicate key: email {email}")

        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)

        user = User(
            id=user_id,
            name=name,
            email=email,
            created_at=now,
            updated_at=now,
            password_hash=password_hash,
        )
        self.store[user_id] = user
        self.writes += 1
        return user

    def update_last_login(self, user_id: str) -> bool:
        self._check_id(user_id)
        user = self.store.get(user_id)
        if not user:
            return False

        now = datetime.now(timezone.utc)
        user.last_login = now
        user.updated_at = now
        self.writes += 1
        return True

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str, active_only: bool = False) -> User | None:
        for user in self.store.values():
            if user.email == email and (user.is_active or not active_only):
                return user
        return None

    def get_by_id(self, user_id: str) -> User | None:
        self._check_id(user_id)
        return self.store.get(user_id)

    @staticmethod
    def _check_id(user_id: str) -> None:
        if not isinstance(user_id, str) or not USER_ID_PATTERN.fullmatch(user_id):
            raise InvalidIdentifierError(f"Malformed user id: {user_id!r}")
