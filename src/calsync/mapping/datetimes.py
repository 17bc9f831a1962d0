"""
Conversion between Google's EventDateTime resource and aware datetimes.
"""

import datetime

from calsync.models import InvalidInputError

HUMAN_READABLE_FORMAT = "%b %d @ %I:%M %p"


def _parse_date_time(value: str) -> datetime.datetime:
    if not isinstance(value, str):
        raise TypeError(f"dateTime must be a string, got {value!r}")
    # Google returns RFC 3339; fromisoformat() only accepts "Z" on 3.11+
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"dateTime has no UTC offset: {value}")
    return parsed


def to_datetime(
    event_date_time: dict, tz: datetime.tzinfo | None = None
) -> datetime.datetime:
    """
    Map a Google EventDateTime to an aware datetime.

    Google uses ``dateTime`` for timed events and ``date`` (YYYY-MM-DD) for
    all-day events. The date is parsed as a calendar date and placed at
    midnight of that day, so 2016-12-15 stays 2016-12-15 whatever the host
    zone.

    Args:
        event_date_time: ``{"dateTime": ...}`` or ``{"date": ...}``
        tz: zone for all-day midnights; the host's local zone when None

    Raises:
        InvalidInputError: if neither field is set or the value is malformed
    """
    if not isinstance(event_date_time, dict):
        raise InvalidInputError(f"EventDateTime is required, got {event_date_time!r}")

    date_time = event_date_time.get("dateTime")
    date = event_date_time.get("date")

    try:
        if date_time:
            return _parse_date_time(date_time)
        if date:
            day = datetime.date.fromisoformat(date)
            midnight = datetime.datetime(day.year, day.month, day.day)
            if tz is not None:
                return midnight.replace(tzinfo=tz)
            # astimezone() on a naive value picks the local offset in effect
            # on that day, so DST is honoured.
            return midnight.astimezone()
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Malformed EventDateTime {event_date_time!r}: {e}") from e

    raise InvalidInputError(f"EventDateTime has neither dateTime nor date: {event_date_time!r}")


def to_all_day_event_date_time(dt: datetime.datetime) -> dict:
    """Truncate to the start of day in dt's own zone and keep only the date."""
    if dt is None:
        raise InvalidInputError("datetime is required")
    return {"date": dt.date().isoformat()}


def to_timed_event_date_time(dt: datetime.datetime) -> dict:
    if dt is None:
        raise InvalidInputError("datetime is required")
    return {"dateTime": dt.isoformat()}


def to_event_date_time(is_all_day: bool, dt: datetime.datetime) -> dict:
    """Map an aware datetime to a Google EventDateTime."""
    if is_all_day is None:
        raise InvalidInputError("is_all_day is required")
    if dt is None:
        raise InvalidInputError("datetime is required")

    if is_all_day:
        return to_all_day_event_date_time(dt)
    return to_timed_event_date_time(dt)


def human_readable(dt: datetime.datetime) -> str:
    """Return e.g. ``Dec 15 @ 09:30 AM`` for log lines."""
    if dt is None:
        raise InvalidInputError("datetime is required")
    return dt.strftime(HUMAN_READABLE_FORMAT)
