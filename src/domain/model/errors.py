"""Domain-level exceptions.

Services and adapters raise these errors to express failed lookups and
violated storage rules. Callers either catch them directly or capture them
into a Result (see domain.model.result).
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested user does not exist."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"User cannot be found: {identifier}")


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Username already taken: {identifier}")


class HashingError(DomainError):
    """The password hashing scheme failed (e.g. malformed stored hash)."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""
