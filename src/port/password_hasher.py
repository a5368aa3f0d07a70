from typing import Protocol


class PasswordHasher(Protocol):
    """Protocol for a salted one-way password hashing scheme."""

    def hash(self, plaintext: str) -> str:
        """Return a salted hash of plaintext. Raise HashingError on failure."""
        ...

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Check plaintext against a stored hash. Raise HashingError if the hash is malformed."""
        ...
