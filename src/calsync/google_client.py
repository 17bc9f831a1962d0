"""
Google Calendar API wrapper.
"""

import datetime
import logging
from pathlib import Path

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from .models import CalendarSyncError

SCOPES = ["https://www.googleapis.com/auth/calendar"]

logger = logging.getLogger(__name__)


def load_credentials(client_secrets: Path | None, token_file: Path) -> Credentials:
    """
    Load cached OAuth credentials, refreshing or re-authorizing as needed.

    The installed-app flow opens a browser the first time; the resulting
    token is cached in ``token_file``.
    """
    creds = None
    if token_file.exists():
        creds = Credentials.from_authorized_user_file(str(token_file), SCOPES)

    if creds and creds.valid:
        return creds

    if creds and creds.expired and creds.refresh_token:
        logger.debug("Refreshing expired Google token")
        creds.refresh(Request())
    else:
        if client_secrets is None or not client_secrets.exists():
            raise CalendarSyncError(
                f"Google client secrets file not found: {client_secrets}. "
                "Set client_secrets in the config file."
            )
        logger.info("Authorizing against Google...")
        flow = InstalledAppFlow.from_client_secrets_file(str(client_secrets), SCOPES)
        creds = flow.run_local_server(port=0)

    token_file.parent.mkdir(parents=True, exist_ok=True)
    token_file.write_text(creds.to_json(), encoding="utf-8")
    return creds


def build_service(client_secrets: Path | None, token_file: Path):
    creds = load_credentials(client_secrets, token_file)
    return build("calendar", "v3", credentials=creds, cache_discovery=False)


class GoogleCalendarClient:
    """Wrapper for the Google Calendar events we read and write."""

    def __init__(self, service, calendar_id: str):
        self.service = service
        self.calendar_id = calendar_id

    def list_events(
        self, time_min: datetime.datetime, time_max: datetime.datetime
    ) -> list[dict]:
        """Return all single-instance events overlapping [time_min, time_max)."""
        events: list[dict] = []
        page_token = None
        while True:
            response = (
                self.service.events()
                .list(
                    calendarId=self.calendar_id,
                    timeMin=time_min.isoformat(),
                    timeMax=time_max.isoformat(),
                    singleEvents=True,
                    showDeleted=False,
                    maxResults=2500,
                    pageToken=page_token,
                )
                .execute()
            )
            events.extend(response.get("items", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                break
        logger.debug(f"Fetched {len(events)} events from {self.calendar_id}")
        return events

    def insert_event(self, body: dict) -> str | None:
        """Create an event and return the id Google assigned to it."""
        created = (
            self.service.events().insert(calendarId=self.calendar_id, body=body).execute()
        )
        return created.get("id")

    def delete_event(self, event_id: str):
        if not event_id:
            raise CalendarSyncError("Cannot delete a Google event without an id")
        self.service.events().delete(calendarId=self.calendar_id, eventId=event_id).execute()
