"""Auth service: registration and authentication business logic.

Pure business logic with no transport dependencies.
Raises domain errors that callers map to their own responses.
"""

import logging

from adapter.security.password_hasher import MAX_PASSWORD_BYTES, BcryptPasswordHasher, password_too_long
from adapter.system.clock import SystemClock
from domain.model.errors import NotFoundError, ValidationError
from domain.model.user import User
from port.clock import Clock
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('username', 'password', 'first_name', 'last_name', 'phone')


def _validate_required(**fields: str | None) -> None:
    missing = [name for name in REQUIRED_FIELDS if not fields.get(name)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    if password_too_long(fields['password']):
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


def register(
    repo: UserRepository,
    username: str,
    password: str,
    first_name: str,
    last_name: str,
    phone: str,
    *,
    hasher: PasswordHasher | None = None,
    clock: Clock | None = None,
) -> User:
    """Register a new user.

    The password is hashed before it reaches the repository. join_at and
    last_login_at are both stamped with the same clock reading.

    Returns the created User, whose `password` is the hash.

    Raises:
        ValidationError: a required field is empty, or the password exceeds 72 bytes
        DuplicateError: username already registered
        HashingError: the hashing scheme failed
    """
    _validate_required(
        username=username,
        password=password,
        first_name=first_name,
        last_name=last_name,
        phone=phone,
    )
    hasher = hasher or BcryptPasswordHasher()
    clock = clock or SystemClock()

    password_hash = hasher.hash(password)
    user = repo.create(
        username=username,
        password_hash=password_hash,
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        joined_at=clock.now(),
    )
    logger.info("User registered", extra={"username": username})
    return user


def authenticate(
    repo: UserRepository,
    username: str,
    password: str,
    *,
    hasher: PasswordHasher | None = None,
) -> bool:
    """Check a username/password pair.

    Unknown usernames return False exactly like a wrong password, so callers
    cannot tell which one failed. Does not update last_login_at.

    Raises:
        HashingError: the stored hash is malformed
    """
    password_hash = repo.get_password_hash(username)
    if password_hash is None:
        logger.debug("Authentication for unknown user", extra={"username": username})
        return False

    hasher = hasher or BcryptPasswordHasher()
    return hasher.verify(password, password_hash)


def update_login_timestamp(
    repo: UserRepository,
    username: str,
    *,
    clock: Clock | None = None,
) -> None:
    """Set last_login_at to now.

    Raises:
        NotFoundError: no such user
    """
    clock = clock or SystemClock()
    if not repo.update_last_login(username, clock.now()):
        raise NotFoundError(username)
