from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Domain model representing a registered user.

    `password` holds the one-way hash, never the plaintext.
    """
    username: str
    password: str
    first_name: str
    last_name: str
    phone: str
    join_at: datetime
    last_login_at: datetime


@dataclass
class UserSummary:
    """Public listing fields of a user."""
    username: str
    first_name: str
    last_name: str


@dataclass
class UserProfile:
    """Full profile of a user, without credentials."""
    username: str
    first_name: str
    last_name: str
    phone: str
    join_at: datetime
    last_login_at: datetime
