"""Process-wide MongoClient for the users/messages database."""

import os
import logging
from pymongo import MongoClient
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

logging.getLogger('pymongo').setLevel(logging.WARNING)

MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'messagely')
USERS_COLLECTION_NAME = 'users'
MESSAGES_COLLECTION_NAME = 'messages'

_client: MongoClient | None = None
_misconfigured = False


def reset_client() -> None:
    """Forget the cached client and any earlier configuration failure."""
    global _client, _misconfigured
    _client = None
    _misconfigured = False


def _is_alive(client: MongoClient) -> bool:
    try:
        client.admin.command('ping')
        return True
    except PyMongoError:
        return False


def get_mongodb_client() -> MongoClient | None:
    """Return a healthy cached client, connecting on first use.

    A dead cached client is replaced. A missing MONGO_URL is remembered so
    later calls fail fast until reset_client() is called.

    Returns:
        MongoClient, or None if MongoDB cannot be reached
    """
    global _client, _misconfigured

    if _client is not None:
        if _is_alive(_client):
            return _client
        logger.warning("[MONGODB] Cached client lost its connection, reconnecting")
        _client = None

    if _misconfigured:
        return None
    if not MONGO_URL:
        logger.error("[MONGODB] MONGO_URL not configured")
        _misconfigured = True
        return None

    client = MongoClient(
        MONGO_URL,
        serverSelectionTimeoutMS=5000,
        connectTimeoutMS=5000,
        socketTimeoutMS=30000,
        maxPoolSize=10,
        retryWrites=True,
        retryReads=True,
    )
    if not _is_alive(client):
        logger.error("[MONGODB] Connection failed", extra={"database": DATABASE_NAME})
        client.close()
        return None

    logger.info("[MONGODB] Connected", extra={"database": DATABASE_NAME})
    _client = client
    return client
