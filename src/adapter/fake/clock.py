"""Deterministic Clock for testing."""

from datetime import datetime, timedelta, timezone


class FakeClock:
    """Returns a fixed start time, advancing by `step` on every call."""

    def __init__(
        self,
        start: datetime = datetime(2026, 1, 1, tzinfo=timezone.utc),
        step: timedelta = timedelta(seconds=1),
    ):
        self.current = start
        self.step = step

    def now(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value
