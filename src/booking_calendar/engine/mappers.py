"""Status-to-attribute mapping tables.

Every function here is pure: the result depends only on the arguments.
Statuses missing from a table resolve to a default instead of raising,
since the store's enums can grow independently of this engine.
"""

import math
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

from ..models.event import EventPriority, EventStatus
from ..models.records import BookingStatus, DeliverableStatus, PaymentStatus

DEFAULT_COMPLETION_DAYS = 7
DEFAULT_COLOR = "#6b7280"  # gray
APPROVAL_COLOR = "#f59e0b"

StatusValue = Union[str, Enum, None]


def _status_key(status: StatusValue) -> str:
    if isinstance(status, Enum):
        return str(status.value)
    return status or ""


ESTIMATED_COMPLETION_DAYS: dict[str, int] = {
    BookingStatus.PENDING.value: 7,
    BookingStatus.IN_PROCESS.value: 14,
    BookingStatus.CONTENT_SUBMITTED.value: 3,
    BookingStatus.APPROVED.value: 1,
    BookingStatus.COMPLETED.value: 0,
    BookingStatus.CANCELED.value: 0,
}

BOOKING_PRIORITIES: dict[str, EventPriority] = {
    BookingStatus.CONTENT_SUBMITTED.value: EventPriority.HIGH,
    BookingStatus.APPROVED.value: EventPriority.URGENT,
    BookingStatus.IN_PROCESS.value: EventPriority.MEDIUM,
}

BOOKING_COLORS: dict[str, str] = {
    BookingStatus.PENDING.value: "#f59e0b",  # amber
    BookingStatus.IN_PROCESS.value: "#3b82f6",  # blue
    BookingStatus.CONTENT_SUBMITTED.value: "#8b5cf6",  # purple
    BookingStatus.APPROVED.value: "#10b981",  # green
    BookingStatus.COMPLETED.value: "#059669",  # emerald
    BookingStatus.CANCELED.value: "#ef4444",  # red
}

DELIVERABLE_COLORS: dict[str, str] = {
    DeliverableStatus.PLANNED.value: "#94a3b8",  # slate
    DeliverableStatus.DUE.value: "#f97316",  # orange
    DeliverableStatus.SUBMITTED.value: "#8b5cf6",  # purple
    DeliverableStatus.REVISION.value: "#eab308",  # yellow
    DeliverableStatus.APPROVED.value: "#10b981",  # green
    DeliverableStatus.SCHEDULED.value: "#0ea5e9",  # sky
    DeliverableStatus.POSTED.value: "#059669",  # emerald
}

PAYMENT_COLORS: dict[str, str] = {
    PaymentStatus.UNCONFIRMED.value: "#94a3b8",
    PaymentStatus.PENDING_INVOICE.value: "#f59e0b",
    PaymentStatus.WAITING_PAYMENT.value: "#3b82f6",
    PaymentStatus.PAID.value: "#059669",
    PaymentStatus.FAILED.value: "#ef4444",
}


class ColorPalette(BaseModel):
    """Presentation colors, one per source status."""

    booking: dict[str, str] = Field(default_factory=lambda: dict(BOOKING_COLORS))
    deliverable: dict[str, str] = Field(default_factory=lambda: dict(DELIVERABLE_COLORS))
    payment: dict[str, str] = Field(default_factory=lambda: dict(PAYMENT_COLORS))
    approval: str = APPROVAL_COLOR
    default: str = DEFAULT_COLOR

    model_config = {"frozen": True}

    def booking_color(self, status: StatusValue) -> str:
        return self.booking.get(_status_key(status), self.default)

    def deliverable_color(self, status: StatusValue) -> str:
        return self.deliverable.get(_status_key(status), self.default)

    def payment_color(self, status: StatusValue) -> str:
        return self.payment.get(_status_key(status), self.default)

    def merged(self, overrides: Optional[dict]) -> "ColorPalette":
        """Return a palette with per-table overrides applied on top."""
        if not overrides:
            return self
        data = self.model_dump()
        for table in ("booking", "deliverable", "payment"):
            data[table].update(overrides.get(table) or {})
        for key in ("approval", "default"):
            if overrides.get(key):
                data[key] = overrides[key]
        return ColorPalette(**data)


DEFAULT_PALETTE = ColorPalette()


def estimated_completion_days(status: StatusValue) -> int:
    """Days from booking creation to its projected deadline."""
    return ESTIMATED_COMPLETION_DAYS.get(_status_key(status), DEFAULT_COMPLETION_DAYS)


def booking_priority(status: StatusValue) -> EventPriority:
    return BOOKING_PRIORITIES.get(_status_key(status), EventPriority.LOW)


def days_until(due: datetime, now: datetime) -> int:
    """Whole days from now until due, rounded up (negative when past)."""
    return math.ceil((due - now).total_seconds() / 86400)


def deliverable_priority(due: datetime, now: datetime) -> EventPriority:
    """
    Priority from time remaining until a due date.

    Args:
        due: Due date
        now: Current time

    Returns:
        urgent when overdue, high within a day, medium within three days,
        low otherwise
    """
    days = days_until(due, now)
    if days < 0:
        return EventPriority.URGENT
    if days <= 1:
        return EventPriority.HIGH
    if days <= 3:
        return EventPriority.MEDIUM
    return EventPriority.LOW


def booking_event_status(
    status: StatusValue, deadline: datetime, now: datetime
) -> EventStatus:
    key = _status_key(status)
    if key == BookingStatus.COMPLETED.value:
        return EventStatus.COMPLETED
    if key == BookingStatus.CANCELED.value:
        return EventStatus.CANCELLED
    if deadline < now:
        return EventStatus.OVERDUE
    if key == BookingStatus.IN_PROCESS.value:
        return EventStatus.IN_PROGRESS
    return EventStatus.SCHEDULED


def deliverable_event_status(
    status: StatusValue, due: datetime, now: datetime
) -> EventStatus:
    key = _status_key(status)
    if key in (DeliverableStatus.POSTED.value, DeliverableStatus.APPROVED.value):
        return EventStatus.COMPLETED
    if key == DeliverableStatus.SUBMITTED.value:
        return EventStatus.IN_PROGRESS
    if due < now:
        return EventStatus.OVERDUE
    return EventStatus.SCHEDULED


def payment_event_status(
    status: StatusValue, due: datetime, now: datetime
) -> EventStatus:
    key = _status_key(status)
    if key == PaymentStatus.PAID.value:
        return EventStatus.COMPLETED
    if key == PaymentStatus.FAILED.value:
        return EventStatus.CANCELLED
    if due < now:
        return EventStatus.OVERDUE
    if key == PaymentStatus.WAITING_PAYMENT.value:
        return EventStatus.IN_PROGRESS
    return EventStatus.SCHEDULED
