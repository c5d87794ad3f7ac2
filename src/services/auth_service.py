"""Auth service: signup and signin business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging

from domain.model.errors import (
    AuthenticationError,
    DuplicateError,
    InvalidIdentifierError,
    StoreDuplicateKeyError,
    StoreValidationError,
    ValidationError,
)
from domain.model.user import User, is_valid_email, normalize_email
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

_INVALID_EMAIL = ("Invalid email format", "Please provide a valid email address")


def _check_email_format(email: str) -> None:
    if not is_valid_email(email):
        error, message = _INVALID_EMAIL
        raise ValidationError(message, error=error)


def validate_signup(email: str | None, password: str | None, name: str | None) -> None:
    """Reject a signup request before anything touches the store.

    Raises:
        ValidationError: a field is missing, the password is too short or the
            email is malformed (checked in that order)
    """
    if not email or not password or not name:
        raise ValidationError("Please fill in all required fields", error="All fields are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
            error="Password too short",
        )
    _check_email_format(email)


def validate_signin(email: str | None, password: str | None) -> None:
    if not email or not password:
        raise ValidationError("Email and password are required", error="Missing credentials")
    _check_email_format(email)


def register(
    repo: UserRepository,
    hasher: PasswordHasher,
    email: str | None,
    password: str | None,
    name: str | None,
) -> User:
    """Register a new user.

    Returns the created User domain object.

    Raises:
        ValidationError: input rejected here or by the store's field rules
        DuplicateError: email already registered, including a duplicate
            detected by the store's unique index at write time
        StoreError: any other store failure, left to the caller
    """
    validate_signup(email, password, name)
    email = normalize_email(email)

    if repo.get_by_email(email):
        raise DuplicateError("An account with this email already exists", error="User already exists")

    password_hash = hasher.hash(password)

    try:
        return repo.create(email=email, password_hash=password_hash, name=name.strip())
    except StoreDuplicateKeyError:
        logger.info("Signup lost a race on the unique email index", extra={"email": email})
        raise DuplicateError("An account with this email already exists", error="Duplicate entry")
    except StoreValidationError as e:
        message = e.messages[0] if e.messages else "Please check your input and try again"
        raise ValidationError(message, error="Validation failed")


def authenticate(
    repo: UserRepository,
    hasher: PasswordHasher,
    email: str | None,
    password: str | None,
) -> User:
    """Authenticate a user by email and password and record the login.

    Unknown emails and wrong passwords fail with different messages.

    Raises:
        ValidationError: missing or malformed input, or a malformed stored ID
        AuthenticationError: no active account, or the password is wrong
    """
    validate_signin(email, password)
    email = normalize_email(email)

    user = repo.get_by_email(email, active_only=True)
    if not user:
        raise AuthenticationError("No account found with this email address")

    if not user.password_hash or not hasher.verify(password, user.password_hash):
        raise AuthenticationError("Incorrect password. Please try again.")

    try:
        repo.update_last_login(user.id)
    except InvalidIdentifierError:
        raise ValidationError("Please check your input and try again", error="Invalid request")

    return user
