"""UTC-everywhere time handling for service order timestamps."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

DISPLAY_TIMEZONE = "America/Sao_Paulo"


def now_utc() -> datetime:
    """
    Current time in UTC.

    Use this instead of datetime.now() everywhere.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Raises ValueError if datetime is naive (no timezone).
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot convert naive datetime to UTC. Datetime must be timezone-aware."
        )
    return dt.astimezone(timezone.utc)


def to_local(dt: datetime, tz_name: str = DISPLAY_TIMEZONE) -> datetime:
    """
    Convert UTC datetime to the shop's local timezone for display.

    ONLY use this at display boundaries. Stored dates remain in UTC.

    Raises:
        ValueError: If datetime is naive or timezone name is invalid
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot convert naive datetime. Datetime must be timezone-aware."
        )

    try:
        local_tz = ZoneInfo(tz_name)
    except (KeyError, ValueError):
        raise ValueError(f"Unknown timezone: {tz_name}")

    return dt.astimezone(local_tz)


def parse_timestamp(value: str | date | datetime | None) -> datetime | None:
    """
    Read a stored order timestamp as an aware UTC datetime.

    The persistence API hands back ISO strings, sometimes date-only
    ("2024-01-05") and sometimes an empty string for a cleared field.

    - None or "" -> None
    - date-only -> UTC midnight of that day
    - naive datetime -> assumed UTC
    - aware datetime -> converted to UTC

    Raises ValueError on strings that are not ISO 8601.
    """
    if value is None:
        return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)

    if not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return to_utc(value)
