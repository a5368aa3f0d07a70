from dataclasses import dataclass
from datetime import datetime


@dataclass
class MessageParty:
    """Profile of the other side of a message, as it is at query time."""
    username: str
    first_name: str
    last_name: str
    phone: str


@dataclass
class SentMessage:
    """A message seen from its sender: embeds the recipient."""
    id: int | str
    to_user: MessageParty
    body: str
    sent_at: datetime
    read_at: datetime | None = None


@dataclass
class ReceivedMessage:
    """A message seen from its recipient: embeds the sender."""
    id: int | str
    from_user: MessageParty
    body: str
    sent_at: datetime
    read_at: datetime | None = None
