"""
CalendarSynchronizer: thin orchestrator for the Exchange to Google mirror.
"""

import datetime
import logging

from googleapiclient.errors import HttpError

from calsync.google_client import GoogleCalendarClient
from calsync.mapping import EventMapper
from calsync.mapping.datetimes import human_readable
from calsync.models import CalendarSyncError
from calsync.models import CanonicalEvent
from calsync.models import ExchangeAppointment
from calsync.models import SyncConfig
from calsync.models import SyncStats
from calsync.sync.planner import SyncPlan
from calsync.sync.planner import plan_sync


def _describe(event: CanonicalEvent) -> str:
    return f"'{event.subject}' ({human_readable(event.start)} - {human_readable(event.end)})"


def _subject_of(appointment) -> str | None:
    if isinstance(appointment, dict):
        return appointment.get("subject")
    return getattr(appointment, "subject", None)


class CalendarSynchronizer:
    """Main synchronization engine."""

    def __init__(self, config: SyncConfig, google_client: GoogleCalendarClient):
        self.config = config
        self.google_client = google_client
        self.logger = logging.getLogger(__name__)
        self.stats = SyncStats()

    def sync_window(
        self, now: datetime.datetime | None = None
    ) -> tuple[datetime.datetime, datetime.datetime]:
        """Return (start, end): from the start of today for total_sync_days days."""
        now = now or datetime.datetime.now().astimezone()
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return start, start + datetime.timedelta(days=self.config.total_sync_days)

    def _map_appointments(
        self, appointments: list[ExchangeAppointment | dict]
    ) -> list[CanonicalEvent]:
        events = []
        for appointment in appointments:
            try:
                if not isinstance(appointment, ExchangeAppointment):
                    appointment = ExchangeAppointment.from_dict(appointment)
                events.append(
                    EventMapper.from_exchange_appointment(
                        appointment, self.config.include_event_body
                    )
                )
            except CalendarSyncError as e:
                self.logger.error(f"Skipping appointment '{_subject_of(appointment)}': {e}")
                self.stats.errors += 1
        return events

    def _fetch_google_events(
        self, time_min: datetime.datetime, time_max: datetime.datetime
    ) -> list[CanonicalEvent]:
        events = []
        for item in self.google_client.list_events(time_min, time_max):
            try:
                events.append(EventMapper.from_google_event(item))
            except CalendarSyncError as e:
                # Unreadable events are left alone rather than deleted.
                self.logger.warning(f"Ignoring Google event {item.get('id')}: {e}")
                self.stats.errors += 1
        return events

    def _apply(self, plan: SyncPlan) -> None:
        for event in plan.to_delete:
            if self.config.dry_run:
                self.logger.info(f"[DRY RUN] Would DELETE event: {_describe(event)}")
                self.stats.deleted += 1
                continue
            try:
                self.google_client.delete_event(event.source_id)
                self.stats.deleted += 1
                self.logger.debug(f"Deleted event {event.source_id}: {_describe(event)}")
            except (HttpError, CalendarSyncError) as e:
                self.logger.error(f"Failed to delete {event.source_id}: {e}")
                self.stats.errors += 1

        for event in plan.to_insert:
            if self.config.dry_run:
                self.logger.info(f"[DRY RUN] Would CREATE event: {_describe(event)}")
                self.stats.added += 1
                continue
            try:
                new_id = self.google_client.insert_event(EventMapper.to_google_event(event))
                self.stats.added += 1
                self.logger.debug(f"Created event {new_id}: {_describe(event)}")
            except (HttpError, CalendarSyncError) as e:
                self.logger.error(f"Failed to create event {_describe(event)}: {e}")
                self.stats.errors += 1

    def run(
        self,
        appointments: list[ExchangeAppointment | dict],
        now: datetime.datetime | None = None,
    ) -> SyncStats:
        """
        Mirror the given Exchange appointments into the Google calendar.

        Appointments may also be raw export records; a record that cannot be
        parsed is logged, counted in ``errors`` and skipped.
        """
        time_min, time_max = self.sync_window(now)
        self.logger.info(
            f"Syncing {human_readable(time_min)} to {human_readable(time_max)} "
            f"({self.config.total_sync_days} days)"
        )

        exchange_events = [
            event
            for event in self._map_appointments(appointments)
            if event.end > time_min and event.start < time_max
        ]
        self.logger.info(f"Exchange events in window: {len(exchange_events)}")

        google_events = self._fetch_google_events(time_min, time_max)
        self.logger.info(f"Google events in window: {len(google_events)}")

        plan = plan_sync(
            exchange_events,
            google_events,
            include_canceled=self.config.include_canceled_events,
        )
        self.stats.unchanged = len(plan.unchanged)

        if plan.is_empty:
            self.logger.info("Google calendar is up to date")
            return self.stats

        self._apply(plan)
        return self.stats
