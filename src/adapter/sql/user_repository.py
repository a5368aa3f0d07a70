"""SQL (SQLAlchemy Core) implementation of UserRepository."""

from datetime import datetime
from logging import getLogger

from sqlalchemy import select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from adapter.sql.schema import as_utc, messages, users
from domain.model.errors import DuplicateError
from domain.model.message import MessageParty, ReceivedMessage, SentMessage
from domain.model.user import User, UserProfile, UserSummary

logger = getLogger(__name__)


def _party(row) -> MessageParty:
    return MessageParty(
        username=row.other_username,
        first_name=row.first_name,
        last_name=row.last_name,
        phone=row.phone,
    )


class SqlUserRepository:
    def __init__(self, engine: Engine):
        self.engine = engine

    # ── write operations ─────────────────────────────────────

    def create(
        self,
        username: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        phone: str,
        joined_at: datetime,
    ) -> User:
        joined_at = as_utc(joined_at)
        stmt = users.insert().values(
            username=username,
            password=password_hash,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            join_at=joined_at,
            last_login_at=joined_at,
        )
        try:
            with self.engine.begin() as conn:
                conn.execute(stmt)
        except IntegrityError as e:
            logger.warning("User creation failed: username already exists", extra={"username": username})
            raise DuplicateError(username) from e
        except SQLAlchemyError as e:
            logger.error("Failed to create user", extra={"username": username, "error": str(e)})
            raise

        logger.info("User created", extra={"username": username})
        return User(
            username=username,
            password=password_hash,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            join_at=joined_at,
            last_login_at=joined_at,
        )

    def update_last_login(self, username: str, at: datetime) -> bool:
        stmt = update(users).where(users.c.username == username).values(last_login_at=at)
        try:
            with self.engine.begin() as conn:
                matched = conn.execute(stmt).rowcount
        except SQLAlchemyError as e:
            logger.error("Failed to update last_login_at", extra={"username": username, "error": str(e)})
            raise

        if matched > 0:
            logger.debug("Updated last_login_at", extra={"username": username})
            return True
        return False

    # ── read operations ──────────────────────────────────────

    def get_password_hash(self, username: str) -> str | None:
        stmt = select(users.c.password).where(users.c.username == username)
        with self.engine.connect() as conn:
            return conn.execute(stmt).scalar_one_or_none()

    def list_summaries(self) -> list[UserSummary]:
        stmt = select(users.c.username, users.c.first_name, users.c.last_name)
        with self.engine.connect() as conn:
            return [
                UserSummary(username=row.username, first_name=row.first_name, last_name=row.last_name)
                for row in conn.execute(stmt)
            ]

    def get_profile(self, username: str) -> UserProfile | None:
        stmt = select(
            users.c.username,
            users.c.first_name,
            users.c.last_name,
            users.c.phone,
            users.c.join_at,
            users.c.last_login_at,
        ).where(users.c.username == username)
        with self.engine.connect() as conn:
            row = conn.execute(stmt).first()
        if row is None:
            return None
        return UserProfile(**row._asdict())

    def exists(self, username: str) -> bool:
        stmt = select(users.c.username).where(users.c.username == username)
        with self.engine.connect() as conn:
            return conn.execute(stmt).first() is not None

    def list_sent(self, username: str) -> list[SentMessage]:
        stmt = (
            select(
                messages.c.id,
                messages.c.to_username.label('other_username'),
                messages.c.body,
                messages.c.sent_at,
                messages.c.read_at,
                users.c.first_name,
                users.c.last_name,
                users.c.phone,
            )
            .select_from(messages.join(users, messages.c.to_username == users.c.username))
            .where(messages.c.from_username == username)
            .order_by(messages.c.id)
        )
        with self.engine.connect() as conn:
            return [
                SentMessage(
                    id=row.id,
                    to_user=_party(row),
                    body=row.body,
                    sent_at=row.sent_at,
                    read_at=row.read_at,
                )
                for row in conn.execute(stmt)
            ]

    def list_received(self, username: str) -> list[ReceivedMessage]:
        stmt = (
            select(
                messages.c.id,
                messages.c.from_username.label('other_username'),
                messages.c.body,
                messages.c.sent_at,
                messages.c.read_at,
                users.c.first_name,
                users.c.last_name,
                users.c.phone,
            )
            .select_from(messages.join(users, messages.c.from_username == users.c.username))
            .where(messages.c.to_username == username)
            .order_by(messages.c.id)
        )
        with self.engine.connect() as conn:
            return [
                ReceivedMessage(
                    id=row.id,
                    from_user=_party(row),
                    body=row.body,
                    sent_at=row.sent_at,
                    read_at=row.read_at,
                )
                for row in conn.execute(stmt)
            ]
