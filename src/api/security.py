"""JWT authentication and security dependencies."""

import os
import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from adapter.security.jwt_token_issuer import JWTTokenIssuer, DEFAULT_EXPIRATION_DAYS
from api.dependencies import get_user_repo
from domain.model.errors import InvalidIdentifierError
from domain.model.user import User
from port.token_issuer import TokenIssuer
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

# JWT Configuration
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY environment variable is required. "
        "Generate a secure key with: openssl rand -hex 32"
    )
JWT_EXPIRATION_DAYS = int(os.getenv("JWT_EXPIRATION_DAYS", DEFAULT_EXPIRATION_DAYS))

_token_issuer = JWTTokenIssuer(JWT_SECRET_KEY, expiration_days=JWT_EXPIRATION_DAYS)

security = HTTPBearer(auto_error=False)


def get_token_issuer() -> TokenIssuer:
    return _token_issuer


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user_required(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    user_repo: UserRepository = Depends(get_user_repo),
) -> User:
    """Get current authenticated user (required). Raises 401 if not authenticated."""
    if not credentials:
        raise _unauthorized("Not authenticated")

    user_id = token_issuer.verify(credentials.credentials)
    if not user_id:
        raise _unauthorized("Invalid authentication credentials")

    try:
        user = user_repo.get_by_id(user_id)
    except InvalidIdentifierError:
        logger.debug("Token subject is not a user id", extra={"userId": user_id})
        user = None
    if not user or not user.is_active:
        raise _unauthorized("User not found")

    return user
