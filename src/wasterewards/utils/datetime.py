"""Date-time helpers shared by models and services."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as a naive timestamp for DateTime columns."""

    return datetime.now(timezone.utc).replace(tzinfo=None)
