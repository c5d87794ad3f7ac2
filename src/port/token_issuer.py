from typing import Protocol


class TokenIssuer(Protocol):
    """Mints and checks bearer tokens bound to a user ID."""

    def issue(self, user_id: str) -> str:
        ...

    def verify(self, token: str) -> str | None:
        """Return the user ID the token was issued for, or None if it is invalid."""
        ...
