"""SQLAlchemy engine setup for the SQL backend.

Supports any SQLAlchemy URL; PostgreSQL (psycopg2) in production and
SQLite for local runs and tests.
"""

import os
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///messagely.db')
SQL_ECHO = os.getenv('SQL_ECHO', 'false').lower() in ('true', '1', 'yes')


def get_engine(url: str | None = None, echo: bool = SQL_ECHO) -> Engine:
    """Create an engine for url (defaults to DATABASE_URL)."""
    url = url or DATABASE_URL

    if url.startswith('sqlite'):
        kwargs = {'connect_args': {'check_same_thread': False}}
        if ':memory:' in url or url in ('sqlite://', 'sqlite:///'):
            # one shared connection, otherwise every checkout sees an empty database
            kwargs['poolclass'] = StaticPool
        engine = create_engine(url, echo=echo, **kwargs)

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON;")
            cursor.close()
    else:
        engine = create_engine(url, pool_size=10, max_overflow=20, pool_timeout=30, echo=echo)

    logger.info("SQL engine created", extra={"dialect": engine.dialect.name})
    return engine
