"""Table definitions for the SQL backend."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, MetaData, Table, Text
from sqlalchemy.engine import Engine
from sqlalchemy.types import TypeDecorator


def as_utc(value: datetime) -> datetime:
    """Aware UTC datetime; naive values are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes on every dialect.

    SQLite has no timezone storage, so values are normalised to UTC on the
    way in and tagged as UTC on the way out.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        value = as_utc(value)
        if dialect.name == 'sqlite':
            value = value.replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        return as_utc(value) if value is not None else None


metadata = MetaData()

users = Table(
    'users',
    metadata,
    Column('username', Text, primary_key=True),
    Column('password', Text, nullable=False),
    Column('first_name', Text, nullable=False),
    Column('last_name', Text, nullable=False),
    Column('phone', Text, nullable=False),
    Column('join_at', UTCDateTime(), nullable=False),
    Column('last_login_at', UTCDateTime()),
)

messages = Table(
    'messages',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('from_username', Text, ForeignKey('users.username'), nullable=False, index=True),
    Column('to_username', Text, ForeignKey('users.username'), nullable=False, index=True),
    Column('body', Text, nullable=False),
    Column('sent_at', UTCDateTime(), nullable=False),
    Column('read_at', UTCDateTime()),
)


def create_schema(engine: Engine) -> None:
    """Create missing tables. Existing tables are left untouched."""
    metadata.create_all(engine)
