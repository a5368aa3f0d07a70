"""bcrypt implementation of PasswordHasher."""

import os
from logging import getLogger

import bcrypt

from domain.model.errors import HashingError

logger = getLogger(__name__)

BCRYPT_WORK_FACTOR = int(os.getenv('BCRYPT_WORK_FACTOR', '12'))

# bcrypt only reads the first 72 bytes; bcrypt>=5 rejects longer input outright
MAX_PASSWORD_BYTES = 72


def password_too_long(plaintext: str) -> bool:
    return len(plaintext.encode("utf-8")) > MAX_PASSWORD_BYTES


class BcryptPasswordHasher:
    def __init__(self, rounds: int = BCRYPT_WORK_FACTOR):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")
        except ValueError as e:
            # bcrypt rejects out-of-range rounds and passwords over 72 bytes
            logger.error("Password hashing failed", extra={"rounds": self.rounds, "error": str(e)})
            raise HashingError(str(e)) from e

    def verify(self, plaintext: str, hashed: str) -> bool:
        if password_too_long(plaintext):
            # never hashable at registration, so it cannot match
            return False
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError as e:
            logger.error("Password verification failed", extra={"error": str(e)})
            raise HashingError(str(e)) from e
