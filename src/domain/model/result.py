"""Value-or-failure wrapper for service calls.

Lets callers branch on a typed failure instead of catching exceptions:

    result = attempt(user_service.get_user, repo, 'alice')
    if result.ok:
        profile = result.value
    elif isinstance(result.error, NotFoundError):
        ...
"""

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from domain.model.errors import DomainError

T = TypeVar('T')


@dataclass(frozen=True)
class Result(Generic[T]):
    value: T | None = None
    error: DomainError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value


def attempt(fn: Callable[..., T], *args, **kwargs) -> Result[T]:
    """Run fn and capture a DomainError into a failed Result.

    Anything that is not a DomainError (driver outages, programming errors)
    propagates unchanged.
    """
    try:
        return Result(value=fn(*args, **kwargs))
    except DomainError as e:
        return Result(error=e)
