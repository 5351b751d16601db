"""Test helpers shared by unit and integration tests."""

from datetime import datetime

from deliveryops.utils.datetime_utils import UTC


def utc(year, month, day, hour=0, minute=0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=UTC)


class FixedClock:
    """Settable clock for services taking a `clock` callable."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now
