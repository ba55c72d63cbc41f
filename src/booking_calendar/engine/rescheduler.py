"""Map date changes on calendar events back onto their source records."""

import logging
from datetime import datetime
from typing import Optional

from ..models.event import EventType
from ..utils.exceptions import (
    ConfigurationError,
    InvalidEventIdError,
    UnsupportedRescheduleError,
)
from ..writers.base import RecordWriter
from .synthesizer import (
    APPROVAL_NEEDED_PREFIX,
    BOOKING_DEADLINE_PREFIX,
    DELIVERABLE_PREFIX,
    PAYMENT_PREFIX,
)

logger = logging.getLogger(__name__)

# Longest prefix first: "booking-deadline-" must win over shorter matches
EVENT_ID_PREFIXES: list[tuple[str, EventType]] = [
    (BOOKING_DEADLINE_PREFIX, EventType.BOOKING_DEADLINE),
    (APPROVAL_NEEDED_PREFIX, EventType.APPROVAL_NEEDED),
    (DELIVERABLE_PREFIX, EventType.DELIVERABLE_DUE),
    (PAYMENT_PREFIX, EventType.PAYMENT_DUE),
]

SETTER_HINTS = {
    EventType.BOOKING_DEADLINE: "use update_booking_deadline() instead",
    EventType.DELIVERABLE_DUE: "use update_deliverable_due_date() instead",
}


def parse_event_id(event_id: str) -> tuple[EventType, str]:
    """
    Recover the source kind and record id from a derived event id.

    Args:
        event_id: Event id such as "deliverable-<id>"

    Returns:
        Tuple of (event type, source record id)

    Raises:
        InvalidEventIdError: If the id does not follow the derived id scheme
    """
    for prefix, event_type in EVENT_ID_PREFIXES:
        if event_id.startswith(prefix):
            source_id = event_id[len(prefix):]
            if not source_id:
                break
            return event_type, source_id
    raise InvalidEventIdError(f"Unrecognized calendar event id: {event_id!r}")


class RescheduleGate:
    """Validates and applies date changes to source records."""

    def __init__(self, writer: Optional[RecordWriter] = None):
        self.writer = writer

    def _require_writer(self) -> RecordWriter:
        if self.writer is None:
            raise ConfigurationError("No record writer configured")
        return self.writer

    def reschedule_event(
        self,
        event_id: str,
        new_start: datetime,
        new_end: Optional[datetime] = None,
    ) -> None:
        """
        Generic drag-and-drop reschedule entry point.

        No event kind has a generic mutation path, so this always raises;
        the per-kind setters are the supported way to move a date.

        Raises:
            InvalidEventIdError: If the event id cannot be parsed
            UnsupportedRescheduleError: For every recognized event kind
        """
        event_type, source_id = parse_event_id(event_id)
        logger.warning(f"Rejected reschedule of {event_id} to {new_start.isoformat()}")
        raise UnsupportedRescheduleError(
            event_id, event_type.value, SETTER_HINTS.get(event_type, "")
        )

    def update_deliverable_due_date(self, deliverable_id: str, new_date: datetime) -> None:
        """Write a new due date; re-synthesize to see the moved event."""
        self._require_writer().update_deliverable_due_date(deliverable_id, new_date)

    def update_booking_deadline(self, booking_id: str, new_deadline: datetime) -> None:
        """Write an explicit deadline, replacing the projected one."""
        self._require_writer().update_booking_deadline(booking_id, new_deadline)
