from typing import Protocol


class PasswordHasher(Protocol):
    """One-way password hashing."""

    def hash(self, password: str) -> str:
        ...

    def verify(self, password: str, hashed: str) -> bool:
        """Return True if password produced hashed. Must compare in constant time."""
        ...
