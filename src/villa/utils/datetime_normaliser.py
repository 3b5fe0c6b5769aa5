from datetime import date, datetime, timezone, tzinfo
from typing import Optional, Union

DateLike = Union[date, datetime, str]


def from_iso_string(value: str) -> datetime:
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        raise ValueError("Stored datetime must be timezone-aware")
    return dt.astimezone(timezone.utc)


def from_iso_date(value: str) -> date:
    """Parse a stored check-in/check-out day, kept as plain ``YYYY-MM-DD``.

    Aware timestamps are rejected: their UTC day can differ from the guest's
    calendar day.
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        raise ValueError(f"Stored stay date must be a plain calendar day, got {value!r}")
    return parsed.date()


def local_tz(value: DateLike) -> Optional[tzinfo]:
    if isinstance(value, datetime):
        return value.tzinfo
    return None


def calendar_day(value: DateLike, tz: Optional[tzinfo] = None) -> date:
    """Strip the time of day from ``value``.

    Aware datetimes are first moved into ``tz`` (when given) so that both sides
    of a day difference are read off the same local calendar.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected a date, datetime or ISO string, got {type(value).__name__}")
