from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Implementations raise the ``Store*`` errors from ``domain.model.errors``
    and never driver-specific exceptions.
    """
    def create(self, email: str, password_hash: str, name: str) -> User:
        """Create a new user and return it.

        Raises StoreDuplicateKeyError if the email is taken and
        StoreValidationError if the fields are rejected.
        """
        ...

    def get_by_email(self, email: str, active_only: bool = False) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found.

        Raises InvalidIdentifierError if user_id is malformed.
        """
        ...

    def update_last_login(self, user_id: str) -> bool:
        """Update the last login timestamp for a user. Return True if successful."""
        ...
