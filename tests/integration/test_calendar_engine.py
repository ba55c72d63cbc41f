"""
Integration tests for the calendar engine over an in-memory store.
"""

import asyncio
import logging
from datetime import datetime, timedelta

import pytest
import pytz

from booking_calendar.engine.calendar_engine import CalendarEngine
from booking_calendar.models.event import EventStatus, EventType
from booking_calendar.utils.exceptions import UnsupportedRescheduleError
from conftest import FakeRecordReader, FakeRecordWriter


def utc(*args):
    return datetime(*args, tzinfo=pytz.utc)


# ==================== Event Listing ====================

class TestGetCalendarEvents:
    """Tests for fetching, synthesizing and sorting events."""

    def test_sorted_by_start_date(self, engine):
        events = asyncio.run(engine.get_calendar_events())
        starts = [e.start_date for e in events]
        assert starts == sorted(starts)

    def test_expected_ids(self, engine):
        events = asyncio.run(engine.get_calendar_events())
        assert [e.id for e in events] == [
            "booking-deadline-b3",   # 2023-12-01 + 0 days
            "deliverable-d1",        # 2024-01-03
            "booking-deadline-b2",   # 2024-01-04
            "approval-needed-b2",    # now
            "deliverable-d2",        # 2024-01-06
            "booking-deadline-b1",   # 2024-01-08
            "payment-p1",            # 2024-01-20
        ]

    def test_determinism(self, engine):
        first = asyncio.run(engine.get_calendar_events())
        second = asyncio.run(engine.get_calendar_events())
        assert [e.model_dump_json() for e in first] == [e.model_dump_json() for e in second]

    def test_fetches_run_for_every_kind(self, engine, store):
        asyncio.run(engine.get_calendar_events())
        assert sorted(call[0] for call in store.calls) == ["bookings", "deliverables", "payments"]

    def test_window_is_pushed_down_to_source_timestamps(self, engine, store, make_booking):
        # Created before the window; projected deadline (2024-01-06) falls inside it
        store.bookings["b4"] = make_booking("b4", "pending", "2023-12-30")
        start, end = utc(2024, 1, 1), utc(2024, 1, 31)

        events = asyncio.run(engine.get_calendar_events(start, end))
        ids = {e.id for e in events}

        assert "booking-deadline-b1" in ids
        assert "booking-deadline-b4" not in ids
        assert "booking-deadline-b3" not in ids
        assert all(call[1] == start and call[2] == end for call in store.calls)

    def test_booking_with_explicit_deadline_in_window(self, engine, store, make_booking):
        store.bookings["b5"] = make_booking("b5", "in_process", "2023-11-01", deadline="2024-01-15")
        events = asyncio.run(engine.get_calendar_events(utc(2024, 1, 1), utc(2024, 1, 31)))
        event = next(e for e in events if e.id == "booking-deadline-b5")
        assert event.start_date == utc(2024, 1, 15)
        assert event.status == EventStatus.IN_PROGRESS


# ==================== Degraded Fetches ====================

class TestFetchFailures:
    """A failing source yields no events of that kind, never an exception."""

    def test_failed_source_is_empty(self, engine, store, caplog):
        store.failing.add("bookings")
        with caplog.at_level(logging.WARNING):
            events = asyncio.run(engine.get_calendar_events())

        assert {e.type for e in events} == {EventType.DELIVERABLE_DUE, EventType.PAYMENT_DUE}
        assert "Could not fetch bookings" in caplog.text

    def test_all_sources_failing(self, engine, store):
        store.failing.update({"bookings", "deliverables", "payments"})
        assert asyncio.run(engine.get_calendar_events()) == []

    def test_timeout_is_treated_as_failure(self, store, now, caplog):
        store.delays["deliverables"] = 1.0
        engine = CalendarEngine(store, clock=lambda: now, fetch_timeout=0.05)

        with caplog.at_level(logging.WARNING):
            events = asyncio.run(engine.get_calendar_events())

        assert not any(e.type == EventType.DELIVERABLE_DUE for e in events)
        assert any(e.type == EventType.BOOKING_DEADLINE for e in events)
        assert "Timed out" in caplog.text

    def test_fetches_are_concurrent(self, store, now):
        for kind in ("bookings", "deliverables", "payments"):
            store.delays[kind] = 0.3
        engine = CalendarEngine(store, clock=lambda: now, fetch_timeout=2.0)

        loop_time = {}

        async def timed():
            loop = asyncio.get_running_loop()
            started = loop.time()
            await engine.get_calendar_events()
            loop_time["elapsed"] = loop.time() - started

        asyncio.run(timed())
        assert loop_time["elapsed"] < 0.8


# ==================== Statistics ====================

class TestGetCalendarStats:
    """Tests for statistics over a synthesized window."""

    def test_consistency_with_events(self, engine):
        start, end = utc(2023, 11, 1), utc(2024, 2, 1)
        events = asyncio.run(engine.get_calendar_events(start, end))
        stats = asyncio.run(engine.get_calendar_stats(start, end))

        assert stats.total_events == len(events)
        assert sum(stats.by_status.values()) == stats.total_events

    def test_default_window(self, engine, now):
        stats = asyncio.run(engine.get_calendar_stats())
        assert stats.window_start == utc(2024, 1, 5)
        assert stats.window_end.date() == (now + timedelta(days=30)).date()

    def test_headline_figures(self, engine):
        stats = asyncio.run(engine.get_calendar_stats(utc(2023, 11, 1), utc(2024, 2, 1)))

        # b2 deadline (2024-01-04) is overdue by status; d2 is due tomorrow
        assert stats.overdue_count == 1
        # approval-needed-b2 starts now
        assert stats.due_today == 1
        # approval, d2, b1
        assert stats.due_this_week == 3
        assert stats.by_type["booking_deadline"] == 3
        assert stats.by_status["completed"] == 2


# ==================== Rescheduling ====================

class TestRescheduling:
    """Tests for date changes flowing back to source records."""

    def test_reschedule_event_always_raises(self, engine):
        with pytest.raises(UnsupportedRescheduleError):
            engine.reschedule_event("booking-deadline-xyz", utc(2024, 2, 1))

    def test_update_deliverable_then_resynthesize(self, engine):
        before = asyncio.run(engine.get_calendar_events())
        new_date = utc(2024, 3, 1, 10, 0)

        engine.update_deliverable_due_date("d2", new_date)

        # Previously emitted events are not patched
        assert next(e for e in before if e.id == "deliverable-d2").start_date == utc(2024, 1, 6)

        after = asyncio.run(engine.get_calendar_events())
        moved = next(e for e in after if e.id == "deliverable-d2")
        assert moved.start_date == new_date
        assert moved.end_date == utc(2024, 1, 7)

    def test_update_booking_deadline_replaces_projection(self, engine):
        engine.update_booking_deadline("b1", utc(2024, 1, 20))
        events = asyncio.run(engine.get_calendar_events())
        assert next(e for e in events if e.id == "booking-deadline-b1").start_date == utc(2024, 1, 20)

    def test_listener_sees_change(self, store, now):
        writer = FakeRecordWriter(store, now)
        changes = []
        writer.add_listener(changes.append)
        engine = CalendarEngine(store, writer=writer, clock=lambda: now)

        engine.update_deliverable_due_date("d1", utc(2024, 2, 1))

        assert [(c.kind, c.record_id) for c in changes] == [("deliverable", "d1")]
        assert "/calendar" in changes[0].paths

    def test_empty_store(self, now):
        engine = CalendarEngine(FakeRecordReader(), clock=lambda: now)
        assert asyncio.run(engine.get_calendar_events()) == []
        assert asyncio.run(engine.get_calendar_stats()).total_events == 0
