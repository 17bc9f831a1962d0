"""
Loading of Exchange appointments exported as JSON.

The export is a list of appointment records, e.g.::

    [
      {
        "start": "2016-12-15T09:00:00-06:00",
        "end": "2016-12-15T10:00:00-06:00",
        "subject": "Sprint planning",
        "location": "Room 4",
        "myResponseType": "Accept",
        "reminderMinutesBeforeStart": 15,
        "body": "<html><body><p>Agenda</p></body></html>",
        "isCancelled": false,
        "isAllDayEvent": false
      }
    ]
"""

import json
import logging
from pathlib import Path

from .models import CalendarSyncError

logger = logging.getLogger(__name__)


def load_appointments(path: Path) -> list[dict]:
    """
    Read the appointment records from a JSON export file.

    Records are returned as-is; each one is parsed with
    ExchangeAppointment.from_dict when it is synced, so a malformed record
    only fails on its own.

    Raises:
        CalendarSyncError: if the file cannot be read or is not a JSON list
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise CalendarSyncError(f"Cannot read appointments file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CalendarSyncError(f"Appointments file {path} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise CalendarSyncError(f"Appointments file {path} must contain a JSON list")

    logger.debug(f"Loaded {len(data)} appointment records from {path}")
    return data
