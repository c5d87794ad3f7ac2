"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.

Store adapters raise the ``Store*`` family instead of driver exceptions, so
services never depend on a particular database client.
"""


class DomainError(Exception):
    """Base class for all domain errors.

    ``error`` is a short title for the failure, ``message`` the sentence shown
    to the user.
    """

    default_error = "Request failed"

    def __init__(self, message: str, error: str | None = None):
        self.message = message
        self.error = error or self.default_error
        super().__init__(message)


class ValidationError(DomainError):
    """Input violates a business validation rule."""

    default_error = "Validation failed"


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""

    default_error = "Duplicate entry"


class AuthenticationError(DomainError):
    """Credentials do not identify an active user."""

    default_error = "Invalid credentials"


# ── store boundary ───────────────────────────────────────────


class StoreError(Exception):
    """Base class for failures reported by a persistence adapter."""


class StoreDuplicateKeyError(StoreError):
    """A unique constraint rejected the write."""


class StoreValidationError(StoreError):
    """The store rejected a document's fields."""

    def __init__(self, messages: list[str]):
        self.messages = list(messages)
        super().__init__("; ".join(self.messages) or "Document failed validation")


class InvalidIdentifierError(StoreError):
    """An identifier does not have the shape the store assigns."""


class StoreUnavailableError(StoreError):
    """The store cannot be reached or is not configured."""
