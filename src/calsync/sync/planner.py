"""
Diffing of Exchange events against the events already in Google.
"""

import logging
from dataclasses import dataclass
from dataclasses import field

from calsync.models import CanonicalEvent

logger = logging.getLogger(__name__)


@dataclass
class SyncPlan:
    """What has to change in the Google calendar to mirror Exchange."""

    to_insert: list[CanonicalEvent] = field(default_factory=list)
    to_delete: list[CanonicalEvent] = field(default_factory=list)
    unchanged: list[CanonicalEvent] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.to_insert and not self.to_delete


def plan_sync(
    exchange_events: list[CanonicalEvent],
    google_events: list[CanonicalEvent],
    include_canceled: bool = False,
) -> SyncPlan:
    """
    Compute inserts and deletes for a one-way Exchange to Google mirror.

    Events are matched by value (everything but the Google id and the
    cancellation flag). Matching is one-to-one: if Google holds two copies of
    the same event and Exchange one, the extra copy is deleted. There is no
    in-place update; a changed event is deleted and re-inserted.

    Args:
        exchange_events: Exchange appointments mapped to canonical events
        google_events: events currently in the Google calendar
        include_canceled: keep canceled Exchange events instead of dropping them
    """
    plan = SyncPlan()
    remaining = list(google_events)

    for event in exchange_events:
        if event.is_canceled and not include_canceled:
            logger.debug(f"Skipping canceled event: {event.subject}")
            continue

        try:
            match_index = remaining.index(event)
        except ValueError:
            plan.to_insert.append(event)
            continue

        plan.unchanged.append(remaining.pop(match_index))

    plan.to_delete.extend(remaining)
    return plan
