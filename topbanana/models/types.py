from datetime import datetime, timedelta, timezone

from sqlalchemy import Integer
from sqlalchemy.types import TypeDecorator

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
ONE_MILLISECOND = timedelta(milliseconds=1)


class MillisecondTimestamp(TypeDecorator):
    """UTC datetime stored as integer milliseconds since the Unix epoch.

    Naive datetimes are taken to be UTC. Values come back timezone-aware.
    """

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return (value - EPOCH) // ONE_MILLISECOND

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return EPOCH + timedelta(milliseconds=int(value))


def utc_now_ms() -> datetime:
    """Current UTC time truncated to what the database can hold"""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)
