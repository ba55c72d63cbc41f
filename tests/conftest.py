"""
Pytest configuration and shared fixtures.
Provides fixed clocks, record factories and in-memory store fakes.
"""

import asyncio
from datetime import datetime
from typing import Optional

import pytest
import pytz

from booking_calendar.engine.calendar_engine import CalendarEngine
from booking_calendar.models.records import Booking, Deliverable, Payment
from booking_calendar.readers.base import RecordReader
from booking_calendar.utils.exceptions import RecordReadError
from booking_calendar.writers.base import RecordWriter

NOW = datetime(2024, 1, 5, 12, 0, tzinfo=pytz.utc)


# ==================== In-memory store fakes ====================


def _in_window(value: Optional[datetime], start: Optional[datetime], end: Optional[datetime]) -> bool:
    if value is None:
        return False
    if start and value < start:
        return False
    if end and value > end:
        return False
    return True


class FakeRecordReader(RecordReader):
    """In-memory reader applying the same source-timestamp window policy."""

    def __init__(self, bookings=(), deliverables=(), payments=()):
        self.bookings: dict[str, Booking] = {b.id: b for b in bookings}
        self.deliverables: dict[str, Deliverable] = {d.id: d for d in deliverables}
        self.payments: dict[str, Payment] = {p.id: p for p in payments}
        self.failing: set[str] = set()
        self.delays: dict[str, float] = {}
        self.calls: list[tuple[str, Optional[datetime], Optional[datetime]]] = []

    async def _before(self, kind, start_date, end_date):
        self.calls.append((kind, start_date, end_date))
        if kind in self.delays:
            await asyncio.sleep(self.delays[kind])
        if kind in self.failing:
            raise RecordReadError(f"{kind} table unreachable")

    async def fetch_bookings(self, start_date=None, end_date=None):
        await self._before("bookings", start_date, end_date)
        rows = sorted(self.bookings.values(), key=lambda b: b.created_at)
        if start_date is None and end_date is None:
            return rows
        return [
            b for b in rows
            if _in_window(b.created_at, start_date, end_date)
            or _in_window(b.deadline, start_date, end_date)
        ]

    async def fetch_deliverables(self, start_date=None, end_date=None):
        await self._before("deliverables", start_date, end_date)
        rows = [d for d in self.deliverables.values() if d.due_date is not None]
        rows.sort(key=lambda d: d.due_date)
        if start_date is None and end_date is None:
            return rows
        return [d for d in rows if _in_window(d.due_date, start_date, end_date)]

    async def fetch_payments(self, start_date=None, end_date=None):
        await self._before("payments", start_date, end_date)
        rows = [p for p in self.payments.values() if p.due_date is not None]
        rows.sort(key=lambda p: p.due_date)
        if start_date is None and end_date is None:
            return rows
        return [p for p in rows if _in_window(p.due_date, start_date, end_date)]


class FakeRecordWriter(RecordWriter):
    """Writer that mutates a FakeRecordReader's rows."""

    def __init__(self, reader: FakeRecordReader, now: datetime = NOW):
        super().__init__()
        self.reader = reader
        self.now = now

    def update_deliverable_due_date(self, deliverable_id, due_date):
        current = self.reader.deliverables[deliverable_id]
        self.reader.deliverables[deliverable_id] = current.model_copy(
            update={"due_date": due_date, "updated_at": self.now}
        )
        self._notify_change("deliverable", deliverable_id)

    def update_booking_deadline(self, booking_id, deadline):
        current = self.reader.bookings[booking_id]
        self.reader.bookings[booking_id] = current.model_copy(
            update={"deadline": deadline, "updated_at": self.now}
        )
        self._notify_change("booking", booking_id)


# ==================== Clock Fixtures ====================


@pytest.fixture
def now():
    """Fixed synthesis time: 2024-01-05 12:00 UTC."""
    return NOW


# ==================== Record Factories ====================


@pytest.fixture
def make_booking():
    """Factory fixture for bookings with embedded names."""
    def _create(
        id: str = "b1",
        status: str = "pending",
        created_at: str = "2024-01-01",
        deadline: Optional[str] = None,
        creator_name: str = "Linh Tran",
        campaign_name: str = "Tet Launch",
    ) -> Booking:
        return Booking.model_validate({
            "id": id,
            "status": status,
            "created_at": created_at,
            "deadline": deadline,
            "campaign_id": f"camp-{id}",
            "creator_id": f"creator-{id}",
            "campaign": {"id": f"camp-{id}", "name": campaign_name},
            "creator": {"id": f"creator-{id}", "name": creator_name},
        })

    return _create


@pytest.fixture
def make_deliverable():
    """Factory fixture for deliverables linked to a booking."""
    def _create(
        id: str = "d1",
        status: str = "planned",
        due_date: Optional[str] = "2024-01-10",
        publish_date: Optional[str] = None,
        booking_id: Optional[str] = "b1",
        title: Optional[str] = "Unboxing reel",
    ) -> Deliverable:
        booking = None
        if booking_id:
            booking = {
                "id": booking_id,
                "campaign_id": f"camp-{booking_id}",
                "creator_id": f"creator-{booking_id}",
                "campaign": {"name": "Tet Launch"},
                "creator": {"name": "Linh Tran"},
            }
        return Deliverable.model_validate({
            "id": id,
            "status": status,
            "title": title,
            "due_date": due_date,
            "publish_date": publish_date,
            "booking_id": booking_id,
            "booking": booking,
        })

    return _create


@pytest.fixture
def make_payment():
    """Factory fixture for payments linked to a booking."""
    def _create(
        id: str = "p1",
        status: str = "waiting_payment",
        due_date: Optional[str] = "2024-01-20",
        amount: Optional[float] = 5000000,
        currency: Optional[str] = "VND",
        booking_id: Optional[str] = "b1",
    ) -> Payment:
        return Payment.model_validate({
            "id": id,
            "status": status,
            "due_date": due_date,
            "amount": amount,
            "currency": currency,
            "booking_id": booking_id,
            "booking": {"id": booking_id, "creator": {"name": "Linh Tran"}} if booking_id else None,
        })

    return _create


# ==================== Engine Fixtures ====================


@pytest.fixture
def store(make_booking, make_deliverable, make_payment):
    """A small store covering every record kind."""
    return FakeRecordReader(
        bookings=[
            make_booking("b1", "pending", "2024-01-01"),
            make_booking("b2", "content_submitted", "2024-01-01", creator_name="Minh Anh"),
            make_booking("b3", "completed", "2023-12-01"),
        ],
        deliverables=[
            make_deliverable("d1", "posted", "2024-01-03"),
            make_deliverable("d2", "planned", "2024-01-06", publish_date="2024-01-07"),
            make_deliverable("d3", "planned", None),
        ],
        payments=[make_payment("p1", "waiting_payment", "2024-01-20")],
    )


@pytest.fixture
def engine(store, now):
    """Engine over the in-memory store with a fixed clock."""
    return CalendarEngine(
        reader=store,
        writer=FakeRecordWriter(store, now),
        clock=lambda: now,
        fetch_timeout=1.0,
    )


# ==================== Pytest Markers ====================


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
