"""Service layer – MongoDB connection with a local fallback.

The connection is owned by a :class:`Database` instance stored on
``app.state``.  Nothing connects at import time; ``connect()`` is called
from the application lifespan.
"""

from __future__ import annotations

import logging
import threading

from pymongo import MongoClient
from pymongo.errors import ConfigurationError, PyMongoError

from src.fridge_fusion.config import settings

logger = logging.getLogger(__name__)


class Database:
    """Lazily connected MongoDB client.

    ``connect()`` tries the primary URI first and the fallback URI second.
    If both fail the error is logged and the instance stays disconnected,
    leaving the API up in a degraded state.
    """

    def __init__(
        self,
        uri: str | None = None,
        fallback_uri: str | None = None,
        timeout_ms: int | None = None,
    ) -> None:
        self.uri = uri if uri is not None else settings.mongodb_uri
        self.fallback_uri = fallback_uri if fallback_uri is not None else settings.mongodb_fallback_uri
        self.timeout_ms = timeout_ms if timeout_ms is not None else settings.mongodb_timeout_ms
        self._client: MongoClient | None = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> MongoClient:
        if self._client is None:
            raise RuntimeError("Database is not connected")
        return self._client

    def connect(self) -> bool:
        """Connect to the primary URI, falling back once; return success."""
        if self._client is not None:
            return True

        try:
            if not self.uri:
                raise ConfigurationError("MONGODB_URI is not set")
            client = self._open(self.uri, serverSelectionTimeoutMS=self.timeout_ms)
            if not self._attach(client):
                return False
            logger.info("✅ Connected to MongoDB")
            return True
        except PyMongoError as exc:
            logger.error("MongoDB connection error: %s", exc)

        logger.info("Attempting to connect to local MongoDB instance …")
        try:
            client = self._open(self.fallback_uri)
        except PyMongoError as exc:
            logger.error("All MongoDB connection attempts failed: %s", exc)
            return False
        if not self._attach(client):
            return False
        logger.info("✅ Connected to MongoDB (local fallback)")
        return True

    def close(self) -> None:
        """Close the client; a connect finishing afterwards is discarded."""
        with self._lock:
            self._closed = True
            client, self._client = self._client, None
        if client is not None:
            client.close()

    def _attach(self, client: MongoClient) -> bool:
        with self._lock:
            if not self._closed:
                self._client = client
                return True
        logger.info("Database closed while connecting; dropping the new client.")
        client.close()
        return False

    @staticmethod
    def _open(uri: str, **options: int) -> MongoClient:
        """Create a client and ping the server so failures surface now."""
        client: MongoClient = MongoClient(uri, **options)
        try:
            client.admin.command("ping")
        except PyMongoError:
            client.close()
            raise
        return client
