"""bcrypt implementation of PasswordHasher."""

import logging

import bcrypt

logger = logging.getLogger(__name__)

# 2^12 = 4096 iterations
DEFAULT_BCRYPT_ROUNDS = 12
# bcrypt only reads the first 72 bytes; newer releases raise instead of truncating
BCRYPT_MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


class BcryptPasswordHasher:
    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Bcrypt hashed password as string
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        """Verify password against hash.

        bcrypt.checkpw compares digests in constant time. A digest that is not
        a bcrypt hash never matches.
        """
        try:
            return bcrypt.checkpw(_encode(password), hashed.encode("utf-8"))
        except ValueError as e:
            logger.warning("Stored password hash is not a bcrypt digest", extra={"error": str(e)})
            return False
