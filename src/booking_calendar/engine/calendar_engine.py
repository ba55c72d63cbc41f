"""Calendar engine: fetch, synthesize, sort and summarize events."""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional, TypeVar

import pytz

from ..config import AppConfig, CalendarConfig
from ..models.event import CalendarEvent
from ..models.stats import CalendarStats
from ..readers.base import RecordReader
from ..utils.date_utils import ensure_utc, get_stats_window
from ..utils.exceptions import RecordReadError
from ..writers.base import RecordWriter
from .mappers import DEFAULT_PALETTE, ColorPalette
from .rescheduler import RescheduleGate
from .stats import compute_stats
from .synthesizer import synthesize

logger = logging.getLogger(__name__)

T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(pytz.utc)


class CalendarEngine:
    """Derives the booking calendar from source records on every read."""

    def __init__(
        self,
        reader: RecordReader,
        writer: Optional[RecordWriter] = None,
        clock: Optional[Callable[[], datetime]] = None,
        palette: Optional[ColorPalette] = None,
        fetch_timeout: float = 10.0,
        tz_name: str = "UTC",
        stats_window_days: int = 30,
    ):
        """
        Initialize the calendar engine.

        Args:
            reader: Source record reader
            writer: Source record writer for date changes (optional)
            clock: Returns the current time (defaults to UTC wall clock)
            palette: Colors per source status
            fetch_timeout: Upper bound in seconds for each fetch
            tz_name: Business timezone for day boundaries in statistics
            stats_window_days: Default statistics lookahead
        """
        self.reader = reader
        self.clock = clock or utc_now
        self.palette = palette or DEFAULT_PALETTE
        self.fetch_timeout = fetch_timeout
        self.tz_name = tz_name
        self.stats_window_days = stats_window_days
        self.gate = RescheduleGate(writer)

    @classmethod
    def from_config(
        cls,
        app_config: AppConfig,
        calendar_config: CalendarConfig,
    ) -> "CalendarEngine":
        """Build an engine backed by the hosted store."""
        from ..readers.supabase_reader import SupabaseRecordReader
        from ..writers.supabase_writer import SupabaseRecordWriter

        timeout = app_config.fetch_timeout_seconds
        return cls(
            reader=SupabaseRecordReader(app_config.supabase, timeout=timeout),
            writer=SupabaseRecordWriter(app_config.supabase, timeout=timeout),
            palette=calendar_config.palette,
            fetch_timeout=timeout,
            tz_name=calendar_config.resolve_timezone(app_config),
            stats_window_days=calendar_config.resolve_stats_window_days(app_config),
        )

    async def _fetch(self, kind: str, fetch: Awaitable[list[T]]) -> list[T]:
        """Await one fetch; any failure degrades to no records of that kind."""
        try:
            return await asyncio.wait_for(fetch, timeout=self.fetch_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Timed out after {self.fetch_timeout}s fetching {kind}")
        except RecordReadError as e:
            logger.warning(f"Could not fetch {kind}: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error fetching {kind}: {e}")
        return []

    async def _collect(
        self,
        now: datetime,
        start_date: Optional[datetime],
        end_date: Optional[datetime],
    ) -> list[CalendarEvent]:
        bookings, deliverables, payments = await asyncio.gather(
            self._fetch("bookings", self.reader.fetch_bookings(start_date, end_date)),
            self._fetch("deliverables", self.reader.fetch_deliverables(start_date, end_date)),
            self._fetch("payments", self.reader.fetch_payments(start_date, end_date)),
        )

        events = synthesize(now, bookings, deliverables, payments, self.palette)
        # sorted() is stable: equal start dates keep synthesis order
        return sorted(events, key=lambda e: e.start_date)

    async def get_calendar_events(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[CalendarEvent]:
        """
        Get calendar events, sorted by start date.

        The window is applied to each record's own timestamp when fetching,
        not to the derived start date.

        Args:
            start_date: Start of the source window
            end_date: End of the source window

        Returns:
            Freshly synthesized events
        """
        start_date = ensure_utc(start_date) if start_date else None
        end_date = ensure_utc(end_date) if end_date else None

        events = await self._collect(self.clock(), start_date, end_date)
        logger.info(f"Derived {len(events)} calendar events")
        return events

    async def get_calendar_stats(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> CalendarStats:
        """
        Get calendar statistics for a window.

        Args:
            start_date: Window start (defaults to start of today)
            end_date: Window end (defaults to end of today + stats_window_days)

        Returns:
            CalendarStats computed from a fresh synthesis
        """
        now = self.clock()
        default_start, default_end = get_stats_window(
            now, self.stats_window_days, self.tz_name
        )
        window_start = ensure_utc(start_date) if start_date else default_start
        window_end = ensure_utc(end_date) if end_date else default_end

        events = await self._collect(now, window_start, window_end)
        return compute_stats(events, now, window_start, window_end, self.tz_name)

    def reschedule_event(
        self,
        event_id: str,
        new_start: datetime,
        new_end: Optional[datetime] = None,
    ) -> None:
        self.gate.reschedule_event(event_id, new_start, new_end)

    def update_deliverable_due_date(self, deliverable_id: str, new_date: datetime) -> None:
        self.gate.update_deliverable_due_date(deliverable_id, new_date)

    def update_booking_deadline(self, booking_id: str, new_deadline: datetime) -> None:
        self.gate.update_booking_deadline(booking_id, new_deadline)

    async def aclose(self) -> None:
        await self.reader.aclose()
