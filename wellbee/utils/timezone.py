from datetime import datetime, timezone as dt_timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(dt_timezone.utc)


def to_utc_aware(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize any datetime to UTC-aware (tzinfo=UTC) for comparisons.
    - Aware datetimes are converted to UTC
    - Naive datetimes are assumed UTC and tz attached
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_timezone.utc)
    return dt.astimezone(dt_timezone.utc)


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-8601 wire timestamp (``Z`` suffix allowed) into UTC-aware."""
    if value is None or isinstance(value, datetime):
        return to_utc_aware(value)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return to_utc_aware(datetime.fromisoformat(text))
