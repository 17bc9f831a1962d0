"""
Unit tests for calsync.mapping.datetimes.

The all-day path is exercised under several host time zones: a date-only
value must come back as the same calendar date no matter the local offset.
"""

import datetime
import time

import pytest

from calsync.mapping import EventMapper
from calsync.mapping.datetimes import human_readable
from calsync.mapping.datetimes import to_all_day_event_date_time
from calsync.mapping.datetimes import to_datetime
from calsync.mapping.datetimes import to_event_date_time
from calsync.mapping.datetimes import to_timed_event_date_time
from calsync.models import InvalidInputError
from tests.conftest import CST
from tests.conftest import make_all_day_google_event

# POSIX TZ strings, so no zoneinfo database is needed on the test host.
_HOST_ZONES = [
    "UTC0",
    "CST6CDT,M3.2.0,M11.1.0",  # US Central, 2016-12-15 is UTC-6
    "JST-9",
    "<-11>11",  # furthest behind UTC
    "<+14>-14",  # furthest ahead of UTC
]

_needs_tzset = pytest.mark.skipif(not hasattr(time, "tzset"), reason="time.tzset unavailable")


@pytest.fixture
def host_tz(monkeypatch):
    """Switch the process time zone; restored after the test."""

    def _set(tz: str):
        monkeypatch.setenv("TZ", tz)
        time.tzset()

    yield _set
    monkeypatch.undo()
    time.tzset()


# ---------------------------------------------------------------------------
# TestToDatetime
# ---------------------------------------------------------------------------


class TestToDatetime:
    def test_date_time_keeps_absolute_time(self):
        result = to_datetime({"dateTime": "2016-12-15T10:00:00-06:00"})
        assert result == datetime.datetime(2016, 12, 15, 16, 0, tzinfo=datetime.timezone.utc)
        assert result.utcoffset() == datetime.timedelta(hours=-6)

    def test_utc_z_suffix(self):
        result = to_datetime({"dateTime": "2016-12-15T16:00:00Z"})
        assert result == datetime.datetime(2016, 12, 15, 16, 0, tzinfo=datetime.timezone.utc)

    def test_date_time_wins_over_date(self):
        result = to_datetime({"dateTime": "2016-12-15T10:00:00-06:00", "date": "2016-01-01"})
        assert result.date() == datetime.date(2016, 12, 15)

    def test_date_with_explicit_zone(self):
        result = to_datetime({"date": "2016-12-15"}, tz=CST)
        assert result == datetime.datetime(2016, 12, 15, tzinfo=CST)

    def test_date_is_local_midnight(self):
        result = to_datetime({"date": "2016-12-15"})
        assert result.tzinfo is not None
        assert (result.hour, result.minute, result.second) == (0, 0, 0)
        assert result.date() == datetime.date(2016, 12, 15)

    @pytest.mark.parametrize(
        "value",
        [
            None,
            {},
            {"date": None, "dateTime": None},
            {"date": "2016-13-45"},
            {"dateTime": "not a timestamp"},
            {"dateTime": "2016-12-15T10:00:00"},  # no offset
            {"dateTime": 12345},
            {"date": 20161215},
            "2016-12-15",
        ],
    )
    def test_invalid_input(self, value):
        with pytest.raises(InvalidInputError):
            to_datetime(value)


# ---------------------------------------------------------------------------
# TestToEventDateTime
# ---------------------------------------------------------------------------


class TestToEventDateTime:
    def test_all_day_uses_date_in_own_zone(self):
        """23:30 CST is already the next day in UTC; the CST date is kept."""
        late = datetime.datetime(2016, 12, 15, 23, 30, tzinfo=CST)
        assert to_all_day_event_date_time(late) == {"date": "2016-12-15"}

    def test_timed_keeps_full_instant(self):
        dt = datetime.datetime(2016, 12, 15, 10, 0, 30, tzinfo=CST)
        assert to_timed_event_date_time(dt) == {"dateTime": "2016-12-15T10:00:30-06:00"}

    def test_dispatch(self):
        dt = datetime.datetime(2016, 12, 15, 10, 0, tzinfo=CST)
        assert to_event_date_time(True, dt) == {"date": "2016-12-15"}
        assert to_event_date_time(False, dt) == {"dateTime": "2016-12-15T10:00:00-06:00"}

    def test_missing_flag(self):
        with pytest.raises(InvalidInputError):
            to_event_date_time(None, datetime.datetime(2016, 12, 15, tzinfo=CST))

    def test_missing_datetime(self):
        with pytest.raises(InvalidInputError):
            to_event_date_time(False, None)


# ---------------------------------------------------------------------------
# TestHostTimeZoneIndependence
# ---------------------------------------------------------------------------


@_needs_tzset
class TestHostTimeZoneIndependence:
    @pytest.mark.parametrize("tz", _HOST_ZONES)
    def test_date_parses_to_same_calendar_day(self, host_tz, tz):
        host_tz(tz)
        result = to_datetime({"date": "2016-12-15"})
        assert result.date() == datetime.date(2016, 12, 15)
        assert to_all_day_event_date_time(result) == {"date": "2016-12-15"}

    @pytest.mark.parametrize("tz", _HOST_ZONES)
    def test_all_day_event_round_trip(self, host_tz, tz):
        host_tz(tz)
        event = make_all_day_google_event(start="2016-12-15", end="2016-12-16")
        back = EventMapper.to_google_event(EventMapper.from_google_event(event))
        assert back["start"] == {"date": "2016-12-15"}
        assert back["end"] == {"date": "2016-12-16"}

    @pytest.mark.parametrize("tz", _HOST_ZONES)
    def test_first_day_of_year(self, host_tz, tz):
        host_tz(tz)
        result = to_datetime({"date": "2017-01-01"})
        assert to_all_day_event_date_time(result) == {"date": "2017-01-01"}


def test_human_readable():
    dt = datetime.datetime(2016, 12, 15, 21, 5, tzinfo=CST)
    assert human_readable(dt) == "Dec 15 @ 09:05 PM"
