"""Builds the configured collaborators for the user services."""

import os
from functools import lru_cache

from dotenv import load_dotenv

from adapter.security.password_hasher import BcryptPasswordHasher
from adapter.system.clock import SystemClock
from port.clock import Clock
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository

load_dotenv()


class StorageUnavailableError(RuntimeError):
    """The configured storage backend could not be reached."""


@lru_cache(maxsize=1)
def _get_engine():
    from adapter.sql.connection import get_engine
    from adapter.sql.schema import create_schema

    engine = get_engine()
    create_schema(engine)
    return engine


_mongo_indexes_ready = False


def _get_mongo_db():
    """Database handle; indexes are ensured on first successful use."""
    global _mongo_indexes_ready
    from adapter.mongodb.connection import DATABASE_NAME, get_mongodb_client
    from adapter.mongodb.indexes import ensure_all_indexes

    client = get_mongodb_client()
    if client is None:
        raise StorageUnavailableError("MongoDB unavailable")
    db = client[DATABASE_NAME]
    if not _mongo_indexes_ready:
        # retried on the next call if any index could not be created
        _mongo_indexes_ready = ensure_all_indexes(db)
    return db


def get_user_repo() -> UserRepository:
    backend = os.getenv('STORAGE_BACKEND', 'sql').lower()
    if backend == 'sql':
        from adapter.sql.user_repository import SqlUserRepository
        return SqlUserRepository(_get_engine())
    if backend == 'mongodb':
        from adapter.mongodb.user_repository import MongoUserRepository
        return MongoUserRepository(_get_mongo_db())
    raise ValueError(f"Unsupported storage backend: {backend}")


def get_password_hasher() -> PasswordHasher:
    return BcryptPasswordHasher()


def get_clock() -> Clock:
    return SystemClock()
