"""Derived calendar event data model."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class EventType(str, Enum):
    """Calendar event type enumeration."""

    BOOKING_DEADLINE = "booking_deadline"
    DELIVERABLE_DUE = "deliverable_due"
    APPROVAL_NEEDED = "approval_needed"
    CONTENT_REVIEW = "content_review"
    PAYMENT_DUE = "payment_due"


class EventPriority(str, Enum):
    """Event priority tiers, lowest first."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class EventStatus(str, Enum):
    """Derived event status enumeration."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    OVERDUE = "overdue"


class CalendarEvent(BaseModel):
    """
    Calendar event synthesized from a source record.

    Events are never stored; every field is recomputed from the source
    record and the synthesis time, so the model carries no wall-clock
    defaults.
    """

    # Identifiers
    id: str  # e.g. "booking-deadline-<booking id>"

    # Basic properties
    title: str
    description: Optional[str] = None
    type: EventType
    priority: EventPriority
    status: EventStatus

    # Time properties
    start_date: datetime
    end_date: Optional[datetime] = None
    all_day: bool = False

    # Cross references
    booking_id: Optional[str] = None
    deliverable_id: Optional[str] = None
    payment_id: Optional[str] = None
    campaign_id: Optional[str] = None
    creator_id: Optional[str] = None

    # Presentation
    color: str
    url: str

    model_config = {"frozen": True}
