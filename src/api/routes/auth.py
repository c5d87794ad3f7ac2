"""Authentication routes (signup, signin, current user).

Every response is a JSON envelope: ``{success, message}`` plus either the
payload or ``error``.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_password_hasher, get_user_repo
from api.models import (
    AuthResponse,
    CurrentUserResponse,
    ErrorResponse,
    SigninRequest,
    SignupRequest,
    UserResponse,
)
from api.security import get_current_user_required, get_token_issuer
from domain.model.errors import (
    AuthenticationError,
    DomainError,
    DuplicateError,
    ValidationError,
)
from domain.model.user import User
from port.password_hasher import PasswordHasher
from port.token_issuer import TokenIssuer
from port.user_repository import UserRepository
from services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

_STATUS_BY_ERROR = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    DuplicateError: status.HTTP_409_CONFLICT,
}

DEFAULT_FAILURE_MESSAGE = "Something went wrong. Please try again later."
SIGNIN_FAILURE_MESSAGE = "Unable to sign in. Please try again later."

_FAILURE_MESSAGE_BY_PATH = {
    f"{router.prefix}/signin": SIGNIN_FAILURE_MESSAGE,
}


def failure_message_for(path: str) -> str:
    """User-facing 500 message of the endpoint serving path."""
    return _FAILURE_MESSAGE_BY_PATH.get(path.rstrip("/"), DEFAULT_FAILURE_MESSAGE)


def internal_error_response(message: str = DEFAULT_FAILURE_MESSAGE) -> JSONResponse:
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", message)


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=error, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _domain_error_response(e: DomainError) -> JSONResponse:
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(e, error_type):
            return error_response(status_code, e.error, e.message)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", e.message)


def _user_payload(user: User) -> UserResponse:
    return UserResponse(**user.public_view())


def _auth_response(status_code: int, message: str, user: User, token: str) -> JSONResponse:
    body = AuthResponse(message=message, user=_user_payload(user), token=token)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    request: SignupRequest,
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
):
    """Create an account and return a bearer token.

    Returns:
        201 with the new user and token

    Failures:
        400 invalid input, 409 email already registered, 500 anything else
    """
    try:
        user = auth_service.register(repo, hasher, request.email, request.password, request.name)
        token = token_issuer.issue(user.id)
    except DomainError as e:
        logger.info("Signup rejected", extra={"reason": e.error, "email": request.email})
        return _domain_error_response(e)
    except Exception:
        logger.exception("Signup error", extra={"email": request.email})
        return internal_error_response()

    logger.info("User registered", extra={"userId": user.id, "email": user.email})
    return _auth_response(
        status.HTTP_201_CREATED,
        "Account created successfully! Welcome to Okobo Bank.",
        user,
        token,
    )


@router.post("/signin")
async def signin(
    request: SigninRequest,
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
):
    """Check credentials, record the login and return a bearer token.

    Failures:
        400 invalid input, 401 unknown account or wrong password, 500 anything else
    """
    try:
        user = auth_service.authenticate(repo, hasher, request.email, request.password)
        token = token_issuer.issue(user.id)
    except DomainError as e:
        logger.info("Signin rejected", extra={"reason": e.message, "email": request.email})
        return _domain_error_response(e)
    except Exception:
        logger.exception("Signin error", extra={"email": request.email})
        return internal_error_response(SIGNIN_FAILURE_MESSAGE)

    logger.info("User logged in", extra={"userId": user.id, "email": user.email})
    return _auth_response(
        status.HTTP_200_OK,
        f"Welcome back, {user.name}! You have successfully signed in.",
        user,
        token,
    )


@router.get("/me")
async def get_me(current_user: User = Depends(get_current_user_required)):
    """Get current authenticated user info (used to restore a stored session)."""
    body = CurrentUserResponse(message="Session is valid", user=_user_payload(current_user))
    return JSONResponse(content=body.model_dump(mode="json", by_alias=True))
