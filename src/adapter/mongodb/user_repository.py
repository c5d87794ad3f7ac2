"""MongoDB implementation of UserRepository."""

import re
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from logging import getLogger
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError, WriteError
from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import (
    InvalidIdentifierError,
    StoreDuplicateKeyError,
    StoreError,
    StoreUnavailableError,
    StoreValidationError,
)
from domain.model.user import User, field_errors

logger = getLogger(__name__)

USER_ID_PATTERN = re.compile(r"[0-9a-f]{32}")

# Server error code for a write rejected by the collection validator
DOCUMENT_VALIDATION_FAILURE = 121


@contextmanager
def _store_errors(operation: str, **context):
    """Translate pymongo exceptions into store errors."""
    try:
        yield
    except DuplicateKeyError as e:
        raise StoreDuplicateKeyError(str(e)) from e
    except WriteError as e:
        if e.code == DOCUMENT_VALIDATION_FAILURE:
            raise StoreValidationError([e.details.get('errmsg', str(e)) if e.details else str(e)]) from e
        logger.error(f"Failed to {operation}", extra={**context, "error": str(e)})
        raise StoreError(str(e)) from e
    except ConnectionFailure as e:
        logger.error(f"Failed to {operation}: store unreachable", extra={**context, "error": str(e)})
        raise StoreUnavailableError(str(e)) from e
    except PyMongoError as e:
        logger.error(f"Failed to {operation}", extra={**context, "error": str(e)})
        raise StoreError(str(e)) from e


def _check_user_id(user_id: str) -> None:
    if not isinstance(user_id, str) or not USER_ID_PATTERN.fullmatch(user_id):
        raise InvalidIdentifierError(f"Malformed user id: {user_id!r}")


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            create_index_safe(self.collection, [('created_at', -1)], 'idx_users_created_at')
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            name=doc['name'],
            email=doc['email'],
            created_at=doc['created_at'],
            updated_at=doc.get('updated_at', doc['created_at']),
            last_login=doc.get('last_login'),
            password_hash=doc.get('password_hash'),
            is_active=doc.get('is_active', True),
        )

    def create(self, email: str, password_hash: str, name: str) -> User:
        """Create a new user and return the User object."""
        errors = field_errors(name, email)
        if errors:
            raise StoreValidationError(errors)

        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'email': email,
            'password_hash': password_hash,
            'name': name,
            'is_active': True,
            'created_at': now,
            'updated_at': now,
        }
        try:
            with _store_errors("create user", email=email):
                self.collection.insert_one(user_doc)
        except StoreDuplicateKeyError:
            logger.warning("User creation failed: email already exists", extra={"email": email})
            raise

        logger.info("User created", extra={"userId": user_id, "email": email})
        return self._to_domain(user_doc)

    def get_by_email(self, email: str, active_only: bool = False) -> User | None:
        """Find a user by email. Return User or None if not found."""
        query = {'email': email}
        if active_only:
            # Records written before the flag existed count as active
            query['is_active'] = {'$ne': False}
        with _store_errors("get user by email", email=email):
            doc = self.collection.find_one(query)
        return self._to_domain(doc) if doc else None

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        _check_user_id(user_id)
        with _store_errors("get user by ID", userId=user_id):
            doc = self.collection.find_one({'_id': user_id})
        return self._to_domain(doc) if doc else None

    def update_last_login(self, user_id: str) -> bool:
        """Update the last login timestamp for a user. Return True if successful."""
        _check_user_id(user_id)
        now = datetime.now(timezone.utc)
        with _store_errors("update last_login", userId=user_id):
            result = self.collection.update_one(
                {'_id': user_id},
                {'$set': {'last_login': now, 'updated_at': now}}
            )
        if result.matched_count > 0:
            logger.debug("Updated last_login", extra={"userId": user_id})
            return True
        return False
