"""JWT implementation of TokenIssuer (python-jose, HMAC-signed)."""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
DEFAULT_EXPIRATION_DAYS = 7


class JWTTokenIssuer:
    def __init__(
        self,
        secret_key: str,
        algorithm: str = JWT_ALGORITHM,
        expiration_days: int = DEFAULT_EXPIRATION_DAYS,
    ):
        if not secret_key:
            raise ValueError("JWT secret key must not be empty")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expiration = timedelta(days=expiration_days)

    def issue(self, user_id: str) -> str:
        """Create JWT access token for user."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "exp": now + self.expiration,
            "iat": now,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> str | None:
        """Verify JWT token and extract user_id."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            return None

        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            return None
        return user_id
