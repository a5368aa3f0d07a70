"""User service: profile reads and message-relation assembly."""

import logging
import os

from domain.model.errors import NotFoundError
from domain.model.message import ReceivedMessage, SentMessage
from domain.model.user import UserProfile, UserSummary
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

# Legacy behaviour: an empty join is reported as an unknown user.
MESSAGES_EMPTY_AS_NOT_FOUND = os.getenv('MESSAGES_EMPTY_AS_NOT_FOUND', 'false').lower() in ('true', '1', 'yes')


def list_users(repo: UserRepository) -> list[UserSummary]:
    """Return the public summary of every user. Empty list if there are none."""
    return repo.list_summaries()


def get_user(repo: UserRepository, username: str) -> UserProfile:
    """Return the full profile of a user.

    Raises:
        NotFoundError: no such user
    """
    profile = repo.get_profile(username)
    if profile is None:
        raise NotFoundError(username)
    return profile


def _resolve_policy(empty_as_not_found: bool | None) -> bool:
    if empty_as_not_found is None:
        return MESSAGES_EMPTY_AS_NOT_FOUND
    return empty_as_not_found


def messages_from(
    repo: UserRepository,
    username: str,
    *,
    empty_as_not_found: bool | None = None,
) -> list[SentMessage]:
    """Return messages sent by a user, each embedding the recipient's current profile.

    With empty_as_not_found, a user who has sent nothing is indistinguishable
    from an unknown user. Otherwise existence is checked first and an empty
    list is a valid answer.

    Raises:
        NotFoundError: no such user (or no messages, under the legacy policy)
    """
    legacy = _resolve_policy(empty_as_not_found)
    if not legacy and not repo.exists(username):
        raise NotFoundError(username)

    messages = repo.list_sent(username)
    if legacy and not messages:
        raise NotFoundError(username)

    logger.debug("Loaded sent messages", extra={"username": username, "count": len(messages)})
    return messages


def messages_to(
    repo: UserRepository,
    username: str,
    *,
    empty_as_not_found: bool | None = None,
) -> list[ReceivedMessage]:
    """Return messages received by a user, each embedding the sender's current profile.

    Same empty/not-found policy as messages_from.
    """
    legacy = _resolve_policy(empty_as_not_found)
    if not legacy and not repo.exists(username):
        raise NotFoundError(username)

    messages = repo.list_received(username)
    if legacy and not messages:
        raise NotFoundError(username)

    logger.debug("Loaded received messages", extra={"username": username, "count": len(messages)})
    return messages
