import os
import logging
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConfigurationError, ConnectionFailure, PyMongoError

from domain.model.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

# Set pymongo logger to WARNING to reduce noise from driver-level logs
pymongo_logger = logging.getLogger('pymongo')
pymongo_logger.setLevel(logging.WARNING)

MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'okobo')


class MongoConnection:
    """Lazily created MongoClient shared by every request.

    Connection strategy:
    1. Return the cached client if healthy (ping succeeds)
    2. If the cached client fails, drop it and reconnect
    3. If no URL is configured, report the store as unavailable

    ``close()`` is the explicit teardown; the next ``get_client()`` reconnects.
    """

    def __init__(self, url: str | None, database_name: str, client_factory=MongoClient):
        self.url = url
        self.database_name = database_name
        self._client_factory = client_factory
        self._client: MongoClient | None = None
        self._connected_once = False

    def get_client(self) -> MongoClient:
        """Get MongoDB client, connecting on first use.

        Raises:
            StoreUnavailableError: URL missing or the server cannot be reached
        """
        # Fast path: return cached client if healthy
        if self._client is not None:
            try:
                self._client.admin.command('ping')
                return self._client
            except PyMongoError:
                logger.debug("[MONGODB] Cached client failed ping, attempting reconnection...")
                self._discard()

        if not self.url:
            logger.error("[MONGODB] MONGO_URL not configured.")
            raise StoreUnavailableError("MONGO_URL not configured")

        client = None
        try:
            client = self._client_factory(
                self.url,
                serverSelectionTimeoutMS=5000,  # 5s timeout for server selection
                connectTimeoutMS=5000,  # 5s timeout for initial connection
                socketTimeoutMS=30000,  # 30s timeout for operations
                maxPoolSize=10,
                minPoolSize=0,
                maxIdleTimeMS=30000,
                waitQueueTimeoutMS=10000,
                retryWrites=False,
                retryReads=False,
            )
            client.admin.command('ping')  # Verify connection works
        except (ConfigurationError, ConnectionFailure, PyMongoError) as e:
            if client is not None:
                client.close()
            error_msg = str(e)[:200]
            logger.error(f"[MONGODB] Connection failed: {error_msg}")
            raise StoreUnavailableError(error_msg) from e

        if not self._connected_once:
            logger.info(f"[MONGODB] Connected successfully to {self.database_name}")
        self._connected_once = True
        self._client = client
        return client

    def get_database(self) -> Database:
        return self.get_client()[self.database_name]

    def close(self) -> None:
        if self._client is not None:
            logger.info("[MONGODB] Closing connection")
        self._discard()

    def _discard(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            client.close()


_connection = MongoConnection(MONGO_URL, DATABASE_NAME)


def get_connection() -> MongoConnection:
    return _connection


def get_mongodb_client() -> MongoClient:
    return _connection.get_client()


def close_mongodb_client() -> None:
    _connection.close()
