"""
Shared pytest fixtures and event builders.
"""

import datetime

import pytest

from calsync.models import ExchangeAppointment
from calsync.models import ResponseType
from calsync.models import SyncConfig

GOOGLE_CAL_ID = "personal-calendar-test"

CST = datetime.timezone(datetime.timedelta(hours=-6), "CST")

# Fixed "now" for sync runs: window is 2016-12-15 00:00 CST + 7 days.
NOW = datetime.datetime(2016, 12, 15, 8, 0, tzinfo=CST)


def make_appointment(
    subject: str = "Test Event",
    start: datetime.datetime | None = None,
    end: datetime.datetime | None = None,
    response: ResponseType = ResponseType.ACCEPT,
    **kwargs,
) -> ExchangeAppointment:
    """Return a one-hour appointment on 2016-12-15 10:00 CST unless overridden."""
    start = start or datetime.datetime(2016, 12, 15, 10, 0, tzinfo=CST)
    end = end or start + datetime.timedelta(hours=1)
    return ExchangeAppointment(
        start=start,
        end=end,
        subject=subject,
        my_response_type=response,
        **kwargs,
    )


def make_all_day_appointment(
    subject: str = "Holiday", day: datetime.date = datetime.date(2016, 12, 16), **kwargs
) -> ExchangeAppointment:
    start = datetime.datetime(day.year, day.month, day.day, tzinfo=CST)
    return make_appointment(
        subject,
        start=start,
        end=start + datetime.timedelta(days=1),
        is_all_day=True,
        **kwargs,
    )


def make_google_event(
    event_id: str | None = "gcal-1",
    summary: str = "ACCEPTED - Test Event",
    start: str = "2016-12-15T10:00:00-06:00",
    end: str = "2016-12-15T11:00:00-06:00",
    **extra,
) -> dict:
    """Return a timed Google event resource."""
    event = {
        "summary": summary,
        "start": {"dateTime": start},
        "end": {"dateTime": end},
    }
    if event_id is not None:
        event["id"] = event_id
    event.update(extra)
    return event


def make_all_day_google_event(
    event_id: str | None = "gcal-allday",
    summary: str = "ACCEPTED - Holiday",
    start: str = "2016-12-16",
    end: str = "2016-12-17",
    **extra,
) -> dict:
    event = {
        "summary": summary,
        "start": {"date": start},
        "end": {"date": end},
    }
    if event_id is not None:
        event["id"] = event_id
    event.update(extra)
    return event


@pytest.fixture
def sync_config():
    return SyncConfig(
        google_calendar_id=GOOGLE_CAL_ID,
        dry_run=False,
        verbose=False,
    )

