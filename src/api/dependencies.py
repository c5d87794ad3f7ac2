import os

from adapter.mongodb.connection import get_connection
from adapter.mongodb.user_repository import MongoUserRepository
from adapter.security.bcrypt_hasher import BcryptPasswordHasher, DEFAULT_BCRYPT_ROUNDS
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS))

_password_hasher = BcryptPasswordHasher(rounds=BCRYPT_ROUNDS)


def get_user_repo() -> UserRepository:
    """Connect (or reuse the connection) before the handler runs.

    Raises StoreUnavailableError, which the app maps to a 500 envelope.
    """
    return MongoUserRepository(get_connection().get_database())


def get_password_hasher() -> PasswordHasher:
    return _password_hasher
