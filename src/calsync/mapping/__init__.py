"""
EventMapper: translates Exchange appointments and Google events to and from
CanonicalEvent.
"""

import datetime

from calsync.mapping.datetimes import to_datetime
from calsync.mapping.datetimes import to_event_date_time
from calsync.mapping.response import format_response
from calsync.models import CanonicalEvent
from calsync.models import ExchangeAppointment
from calsync.models import InvalidInputError
from calsync.plain_text import to_plain_text


class EventMapper:
    """Stateless mapping between the two calendar models and CanonicalEvent."""

    @staticmethod
    def is_all_day_event(event: dict) -> bool:
        """Return True if both start and end carry just a date.

        A date on one side and a dateTime on the other is a timed event.
        """
        if event is None:
            raise InvalidInputError("Google event is required")
        start = event.get("start") or {}
        end = event.get("end") or {}
        if not isinstance(start, dict) or not isinstance(end, dict):
            raise InvalidInputError(f"Malformed start/end in Google event {event.get('id')}")
        return bool(
            start.get("date")
            and not start.get("dateTime")
            and end.get("date")
            and not end.get("dateTime")
        )

    @classmethod
    def from_google_event(
        cls, event: dict, tz: datetime.tzinfo | None = None
    ) -> CanonicalEvent:
        """Map a Google Calendar event resource to a CanonicalEvent."""
        if event is None:
            raise InvalidInputError("Google event is required")

        overrides = (event.get("reminders") or {}).get("overrides") or []
        reminder = overrides[0].get("minutes") if overrides else None

        return CanonicalEvent(
            source_id=event.get("id"),
            start=to_datetime(event.get("start"), tz),
            end=to_datetime(event.get("end"), tz),
            subject=event.get("summary"),
            location=event.get("location"),
            reminder_minutes_before_start=reminder,
            body=event.get("description") or None,
            is_all_day=cls.is_all_day_event(event),
        )

    @staticmethod
    def from_exchange_appointment(
        appointment: ExchangeAppointment, include_body: bool
    ) -> CanonicalEvent:
        """
        Map an Exchange appointment to a CanonicalEvent.

        The subject is prefixed with the owner's response, e.g.
        ``ACCEPTED - Weekly sync``. The body is converted to plain text only
        when ``include_body`` is set; otherwise it is always dropped.
        """
        if appointment is None:
            raise InvalidInputError("Exchange appointment is required")
        if include_body is None:
            raise InvalidInputError("include_body is required")

        label = format_response(appointment.my_response_type)

        return CanonicalEvent(
            start=appointment.start,
            end=appointment.end,
            subject=f"{label} - {appointment.subject or ''}",
            location=appointment.location,
            reminder_minutes_before_start=appointment.reminder_minutes_before_start,
            body=to_plain_text(appointment.body) if include_body else None,
            is_canceled=appointment.is_cancelled,
            is_all_day=appointment.is_all_day,
        )

    @staticmethod
    def to_google_event(event: CanonicalEvent) -> dict:
        """Map a CanonicalEvent to a Google Calendar event resource for insert."""
        if event is None:
            raise InvalidInputError("Canonical event is required")

        body = {
            "start": to_event_date_time(event.is_all_day, event.start),
            "end": to_event_date_time(event.is_all_day, event.end),
            "summary": event.subject,
        }
        if event.source_id:
            body["id"] = event.source_id
        if event.location is not None:
            body["location"] = event.location
        if event.body is not None:
            body["description"] = event.body

        # Only send a reminder block when there is a reminder; otherwise the
        # calendar's default reminders apply.
        if event.reminder_minutes_before_start is not None:
            body["reminders"] = {
                "useDefault": False,
                "overrides": [
                    {"method": "popup", "minutes": event.reminder_minutes_before_start}
                ],
            }

        return body
