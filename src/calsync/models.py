"""
Pure data models: no Google or Exchange client imports.
"""

import datetime
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

DEFAULT_CONFIG = Path.home() / ".config/calsync.conf"
DEFAULT_TOKEN_FILE = Path.home() / ".local/share/calsync-token.json"
DEFAULT_TOTAL_SYNC_DAYS = 7


class CalendarSyncError(Exception):
    """Base exception for calendar sync errors."""

    pass


class InvalidInputError(CalendarSyncError):
    """A required argument was missing or violated an invariant."""

    pass


class UnmappedEnumValueError(CalendarSyncError):
    """An enumeration value outside the known set reached a fixed lookup."""

    pass


class ResponseType(Enum):
    """Meeting response of the calendar owner, named as Exchange Web Services names them."""

    ACCEPT = "Accept"
    DECLINE = "Decline"
    NO_RESPONSE_RECEIVED = "NoResponseReceived"
    TENTATIVE = "Tentative"
    ORGANIZER = "Organizer"
    UNKNOWN = "Unknown"


def _require_aware(name: str, value) -> None:
    if value is None:
        raise InvalidInputError(f"{name} is required")
    if not isinstance(value, datetime.datetime):
        raise InvalidInputError(f"{name} must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise InvalidInputError(f"{name} must be timezone-aware: {value!r}")


def _start_of_day(value: datetime.datetime) -> datetime.datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


@dataclass
class ExchangeAppointment:
    """Appointment as fetched from the Exchange calendar."""

    start: datetime.datetime
    end: datetime.datetime
    subject: str | None
    my_response_type: ResponseType
    location: str | None = None
    reminder_minutes_before_start: int | None = None
    body: str | None = None  # raw, usually HTML
    is_cancelled: bool = False
    is_all_day: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "ExchangeAppointment":
        """
        Build an appointment from an exported JSON record.

        Datetimes are ISO-8601 strings with an offset; ``myResponseType``
        uses the EWS enumeration names (``Accept``, ``Tentative``, ...).

        Raises:
            InvalidInputError: if a required key is missing or malformed
        """
        if not isinstance(data, dict):
            raise InvalidInputError(f"Appointment record must be an object, got {data!r}")
        try:
            start = datetime.datetime.fromisoformat(_normalize_utc(data["start"]))
            end = datetime.datetime.fromisoformat(_normalize_utc(data["end"]))
            response = ResponseType(data.get("myResponseType", ResponseType.UNKNOWN.value))
        except KeyError as e:
            raise InvalidInputError(f"Appointment record is missing {e}") from e
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Malformed appointment record: {e}") from e

        reminder = data.get("reminderMinutesBeforeStart")
        if not _json_bool(data, "isReminderSet", default=True):
            reminder = None

        return cls(
            start=start,
            end=end,
            subject=data.get("subject"),
            my_response_type=response,
            location=data.get("location"),
            reminder_minutes_before_start=reminder,
            body=data.get("body"),
            is_cancelled=_json_bool(data, "isCancelled"),
            is_all_day=_json_bool(data, "isAllDayEvent"),
        )


def _normalize_utc(value: str) -> str:
    # fromisoformat() only understands a trailing "Z" on Python 3.11+
    if isinstance(value, str) and value.endswith("Z"):
        return value[:-1] + "+00:00"
    return value


def _json_bool(data: dict, key: str, default: bool = False) -> bool:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise InvalidInputError(f"{key} must be true or false, got {value!r}")
    return value


@dataclass(eq=False)
class CanonicalEvent:
    """
    Source-agnostic event used for comparison and for writing to Google.

    ``source_id`` is the Google event id and ``is_canceled`` only matters for
    Exchange-sourced events; neither takes part in equality, so an event read
    back from Google compares equal to the Exchange event it mirrors. All-day
    events compare by calendar date, whatever zone their midnights are in.
    """

    start: datetime.datetime
    end: datetime.datetime
    subject: str | None
    is_all_day: bool = False
    location: str | None = None
    reminder_minutes_before_start: int | None = None
    body: str | None = None
    source_id: str | None = None
    is_canceled: bool = False

    def __post_init__(self):
        _require_aware("start", self.start)
        _require_aware("end", self.end)
        if self.is_all_day is None:
            raise InvalidInputError("is_all_day is required")

        if self.is_all_day:
            self.start = _start_of_day(self.start)
            self.end = _start_of_day(self.end)

        if self.start > self.end:
            raise InvalidInputError(f"start {self.start} is after end {self.end}")

        reminder = self.reminder_minutes_before_start
        if reminder is not None and (
            isinstance(reminder, bool) or not isinstance(reminder, int) or reminder < 0
        ):
            raise InvalidInputError(f"Invalid reminder minutes: {reminder!r}")

        # Google drops empty strings from the events it returns.
        if self.location is not None and not self.location.strip():
            self.location = None
        if self.body is not None and not self.body.strip():
            self.body = None

    def _comparison_key(self) -> tuple:
        if self.is_all_day:
            start, end = self.start.date(), self.end.date()
        else:
            start, end = self.start, self.end
        return (
            start,
            end,
            bool(self.is_all_day),
            self.subject,
            self.location,
            self.reminder_minutes_before_start,
            self.body,
        )

    def __eq__(self, other):
        if not isinstance(other, CanonicalEvent):
            return NotImplemented
        return self._comparison_key() == other._comparison_key()

    __hash__ = None  # mutable


@dataclass
class SyncConfig:
    """Configuration for calendar sync operation."""

    google_calendar_id: str
    client_secrets: Path | None = None
    token_file: Path = DEFAULT_TOKEN_FILE
    include_event_body: bool = False
    include_canceled_events: bool = False
    total_sync_days: int = DEFAULT_TOTAL_SYNC_DAYS
    dry_run: bool = False
    verbose: bool = False
    yes: bool = False  # Auto-confirm without prompting


@dataclass
class SyncStats:
    """Statistics for sync operation."""

    added: int = 0
    deleted: int = 0
    unchanged: int = 0
    errors: int = 0
