from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalise to naive UTC, the form stored in plain DateTime columns."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
