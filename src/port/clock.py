from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Source of the current server time."""

    def now(self) -> datetime:
        ...
