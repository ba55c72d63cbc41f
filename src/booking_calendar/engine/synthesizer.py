"""Synthesize calendar events from booking, deliverable and payment records."""

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..models.event import CalendarEvent, EventPriority, EventStatus, EventType
from ..models.records import Booking, BookingRef, BookingStatus, Deliverable, Payment
from .mappers import (
    DEFAULT_PALETTE,
    ColorPalette,
    booking_event_status,
    booking_priority,
    deliverable_event_status,
    deliverable_priority,
    estimated_completion_days,
    payment_event_status,
)

logger = logging.getLogger(__name__)

# Event id prefixes, "<prefix><source id>"
BOOKING_DEADLINE_PREFIX = "booking-deadline-"
APPROVAL_NEEDED_PREFIX = "approval-needed-"
DELIVERABLE_PREFIX = "deliverable-"
PAYMENT_PREFIX = "payment-"


def _humanize(status: str) -> str:
    return str(status).replace("_", " ")


def projected_deadline(booking: Booking) -> datetime:
    """
    Deadline used for a booking's calendar entry.

    An explicit deadline wins; otherwise the deadline is projected from
    created_at by the status-dependent completion estimate. The projection
    is recomputed on every call and never written back.
    """
    if booking.deadline is not None:
        return booking.deadline
    return booking.created_at + timedelta(days=estimated_completion_days(booking.status))


def booking_events(
    booking: Booking,
    now: datetime,
    palette: ColorPalette = DEFAULT_PALETTE,
) -> list[CalendarEvent]:
    """Build the deadline event (and approval event, if any) for a booking."""
    deadline = projected_deadline(booking)
    label = "Deadline" if booking.deadline is not None else "Estimated deadline"

    events = [
        CalendarEvent(
            id=f"{BOOKING_DEADLINE_PREFIX}{booking.id}",
            title=f"{booking.creator_name} - {booking.campaign_name}",
            description=f"{label} - {_humanize(booking.status)} status",
            type=EventType.BOOKING_DEADLINE,
            priority=booking_priority(booking.status),
            status=booking_event_status(booking.status, deadline, now),
            start_date=deadline,
            all_day=True,
            booking_id=booking.id,
            campaign_id=booking.campaign_id,
            creator_id=booking.creator_id,
            color=palette.booking_color(booking.status),
            url=f"/bookings/{booking.id}",
        )
    ]

    if booking.status == BookingStatus.CONTENT_SUBMITTED:
        events.append(
            CalendarEvent(
                id=f"{APPROVAL_NEEDED_PREFIX}{booking.id}",
                title=f"Review Required: {booking.creator_name}",
                description="Content submitted and awaiting approval",
                type=EventType.APPROVAL_NEEDED,
                priority=EventPriority.HIGH,
                status=EventStatus.SCHEDULED,
                # Due "now" for as long as the booking sits in review
                start_date=now,
                all_day=False,
                booking_id=booking.id,
                campaign_id=booking.campaign_id,
                creator_id=booking.creator_id,
                color=palette.approval,
                url=f"/bookings/{booking.id}",
            )
        )

    return events


def _booking_ids(booking_id: Optional[str], ref: Optional[BookingRef]) -> dict:
    return {
        "booking_id": booking_id or (ref.id if ref else None),
        "campaign_id": ref.campaign_id if ref else None,
        "creator_id": ref.creator_id if ref else None,
    }


def deliverable_events(
    deliverable: Deliverable,
    now: datetime,
    palette: ColorPalette = DEFAULT_PALETTE,
) -> list[CalendarEvent]:
    """Build the due-date event for a deliverable; none without a due date."""
    if deliverable.due_date is None:
        return []

    ref = deliverable.booking
    creator = ref.creator_name if ref else "Unknown"
    campaign = ref.campaign_name if ref else "No Campaign"
    what = deliverable.title or (
        f"{deliverable.platform} post" if deliverable.platform else "Deliverable"
    )

    return [
        CalendarEvent(
            id=f"{DELIVERABLE_PREFIX}{deliverable.id}",
            title=f"{creator} - {what}",
            description=f"{campaign} - {_humanize(deliverable.status)} deliverable",
            type=EventType.DELIVERABLE_DUE,
            priority=deliverable_priority(deliverable.due_date, now),
            status=deliverable_event_status(deliverable.status, deliverable.due_date, now),
            start_date=deliverable.due_date,
            end_date=deliverable.publish_date,
            all_day=True,
            deliverable_id=deliverable.id,
            color=palette.deliverable_color(deliverable.status),
            url=f"/deliverables/{deliverable.id}",
            **_booking_ids(deliverable.booking_id, ref),
        )
    ]


def payment_events(
    payment: Payment,
    now: datetime,
    palette: ColorPalette = DEFAULT_PALETTE,
) -> list[CalendarEvent]:
    """Build the due-date event for a payment; none without a due date."""
    if payment.due_date is None:
        return []

    ref = payment.booking
    creator = ref.creator_name if ref else "Unknown"
    campaign = ref.campaign_name if ref else "No Campaign"
    title = f"Payment: {creator}"
    if payment.amount is not None:
        amount = f"{payment.amount:,.0f}"
        if payment.currency:
            amount = f"{amount} {payment.currency}"
        title = f"{title} ({amount})"

    ids = _booking_ids(payment.booking_id, ref)
    url = f"/bookings/{ids['booking_id']}" if ids["booking_id"] else "/payments"

    return [
        CalendarEvent(
            id=f"{PAYMENT_PREFIX}{payment.id}",
            title=title,
            description=f"{campaign} - {_humanize(payment.status)}",
            type=EventType.PAYMENT_DUE,
            priority=deliverable_priority(payment.due_date, now),
            status=payment_event_status(payment.status, payment.due_date, now),
            start_date=payment.due_date,
            all_day=True,
            payment_id=payment.id,
            color=palette.payment_color(payment.status),
            url=url,
            **ids,
        )
    ]


def synthesize(
    now: datetime,
    bookings: Iterable[Booking] = (),
    deliverables: Iterable[Deliverable] = (),
    payments: Iterable[Payment] = (),
    palette: ColorPalette = DEFAULT_PALETTE,
) -> list[CalendarEvent]:
    """
    Synthesize unsorted events from all record kinds.

    Args:
        now: Synthesis time; all derived status/priority use this instant
        bookings: Booking records
        deliverables: Deliverable records
        payments: Payment records
        palette: Colors per source status

    Returns:
        Fresh list of events, bookings first, then deliverables, then payments
    """
    events: list[CalendarEvent] = []
    for booking in bookings:
        events.extend(booking_events(booking, now, palette))
    for deliverable in deliverables:
        events.extend(deliverable_events(deliverable, now, palette))
    for payment in payments:
        events.extend(payment_events(payment, now, palette))

    logger.debug(f"Synthesized {len(events)} calendar events")
    return events
