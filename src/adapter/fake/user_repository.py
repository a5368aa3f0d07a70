"""In-memory implementation of UserRepository for testing."""

from datetime import datetime, timezone
from itertools import count

from domain.model.errors import DuplicateError
from domain.model.message import MessageParty, ReceivedMessage, SentMessage
from domain.model.user import User, UserProfile, UserSummary


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        self.messages: list[dict] = []
        self._ids = count(1)

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
        if username in self.store:
            raise DuplicateError(username)

        user = User(
            username=username,
            password=password_hash,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            join_at=joined_at,
            last_login_at=joined_at,
        )
        self.store[username] = user
        return user

    def update_last_login(self, username: str, at: datetime) -> bool:
        user = self.store.get(username)
        if not user:
            return False
        user.last_login_at = at
        return True

    def add_message(
        self,
        from_username: str,
        to_username: str,
        body: str,
        sent_at: datetime | None = None,
        read_at: datetime | None = None,
    ) -> int:
        """Seed a message row. Message creation is not part of the port."""
        message_id = next(self._ids)
        self.messages.append({
            'id': message_id,
            'from_username': from_username,
            'to_username': to_username,
            'body': body,
            'sent_at': sent_at or datetime.now(timezone.utc),
            'read_at': read_at,
        })
        return message_id

    # ── read operations ──────────────────────────────────────

    def get_password_hash(self, username: str) -> str | None:
        user = self.store.get(username)
        return user.password if user else None

    def list_summaries(self) -> list[UserSummary]:
        return [
            UserSummary(username=u.username, first_name=u.first_name, last_name=u.last_name)
            for u in self.store.values()
        ]

    def get_profile(self, username: str) -> UserProfile | None:
        user = self.store.get(username)
        if not user:
            return None
        return UserProfile(
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            phone=user.phone,
            join_at=user.join_at,
            last_login_at=user.last_login_at,
        )

    def exists(self, username: str) -> bool:
        return username in self.store

    def list_sent(self, username: str) -> list[SentMessage]:
        result = []
        for m in self.messages:
            # inner join: rows whose recipient is gone are dropped
            recipient = self._party(m['to_username'])
            if m['from_username'] != username or recipient is None:
                continue
            result.append(SentMessage(
                id=m['id'],
                to_user=recipient,
                body=m['body'],
                sent_at=m['sent_at'],
                read_at=m['read_at'],
            ))
        return result

    def list_received(self, username: str) -> list[ReceivedMessage]:
        result = []
        for m in self.messages:
            sender = self._party(m['from_username'])
            if m['to_username'] != username or sender is None:
                continue
            result.append(ReceivedMessage(
                id=m['id'],
                from_user=sender,
                body=m['body'],
                sent_at=m['sent_at'],
                read_at=m['read_at'],
            ))
        return result

    def _party(self, username: str) -> MessageParty | None:
        user = self.store.get(username)
        if not user:
            return None
        return MessageParty(
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            phone=user.phone,
        )
