from datetime import datetime
from typing import Protocol

from domain.model.message import ReceivedMessage, SentMessage
from domain.model.user import User, UserProfile, UserSummary


class UserRepository(Protocol):
    """Protocol defining the interface for user and message data access."""

    def create(
        self,
        username: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        phone: str,
        joined_at: datetime,
    ) -> User:
        """Insert a user with join_at = last_login_at = joined_at.

        Raise DuplicateError if the username is taken.
        """
        ...

    def get_password_hash(self, username: str) -> str | None:
        """Return the stored password hash, or None if the user does not exist."""
        ...

    def update_last_login(self, username: str, at: datetime) -> bool:
        """Set last_login_at. Return False if no user matched."""
        ...

    def list_summaries(self) -> list[UserSummary]:
        """Return username and names of every user, in storage order."""
        ...

    def get_profile(self, username: str) -> UserProfile | None:
        """Find a user by username. Return UserProfile or None if not found."""
        ...

    def exists(self, username: str) -> bool:
        ...

    def list_sent(self, username: str) -> list[SentMessage]:
        """Messages sent by username, joined with the recipient's current profile."""
        ...

    def list_received(self, username: str) -> list[ReceivedMessage]:
        """Messages sent to username, joined with the sender's current profile."""
        ...
