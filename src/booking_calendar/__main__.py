"""CLI entry point for the booking calendar engine."""

import argparse
import asyncio
import sys
from datetime import datetime
from typing import Optional

import pytz

from .config import calendar_config, config
from .engine.calendar_engine import CalendarEngine
from .models.event import CalendarEvent
from .models.stats import CalendarStats
from .utils.exceptions import BookingCalendarError
from .utils.logging import setup_logging


def _parse_day(value: str, end_of_day: bool = False) -> datetime:
    """Parse YYYY-MM-DD as a UTC day boundary."""
    day = datetime.strptime(value, "%Y-%m-%d")
    if end_of_day:
        return day.replace(hour=23, minute=59, second=59, tzinfo=pytz.utc)
    return day.replace(hour=0, minute=0, second=0, tzinfo=pytz.utc)


def _print_events(events: list[CalendarEvent]) -> None:
    print(f"Found {len(events)} event(s):")
    for event in events:
        print(f"  - [{event.priority.value:>6}] {event.title}")
        print(f"    {event.type.value} | {event.status.value} | {event.start_date.isoformat()}")
        if event.end_date:
            print(f"    Ends: {event.end_date.isoformat()}")
        print(f"    Link: {event.url}")


def _print_stats(stats: CalendarStats) -> None:
    print(f"Window: {stats.window_start.date()} to {stats.window_end.date()}")
    print(f"  Total events:  {stats.total_events}")
    print(f"  Overdue:       {stats.overdue_count}")
    print(f"  Due today:     {stats.due_today}")
    print(f"  Due this week: {stats.due_this_week}")
    for label, counts in (
        ("By type", stats.by_type),
        ("By status", stats.by_status),
        ("By priority", stats.by_priority),
    ):
        print(f"  {label}:")
        for key, count in sorted(counts.items()):
            print(f"    {key}: {count}")


async def _run(
    engine: CalendarEngine,
    args: argparse.Namespace,
    start: Optional[datetime],
    end: Optional[datetime],
    new_day: Optional[datetime],
) -> None:
    """Run the requested command, closing the engine's client afterwards."""
    try:
        if args.set_deliverable_due:
            deliverable_id, day = args.set_deliverable_due
            engine.update_deliverable_due_date(deliverable_id, new_day)
            print(f"Deliverable {deliverable_id} now due {day}")
        elif args.set_booking_deadline:
            booking_id, day = args.set_booking_deadline
            engine.update_booking_deadline(booking_id, new_day)
            print(f"Booking {booking_id} deadline set to {day}")
        elif args.reschedule:
            engine.reschedule_event(args.reschedule[0], new_day)
        else:
            if args.events:
                _print_events(await engine.get_calendar_events(start, end))
            if args.stats:
                _print_stats(await engine.get_calendar_stats(start, end))
    finally:
        await engine.aclose()


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Booking Calendar - Derived deadlines for creator bookings"
    )
    parser.add_argument("--events", action="store_true", help="List calendar events")
    parser.add_argument("--stats", action="store_true", help="Show calendar statistics")
    parser.add_argument(
        "--start-date",
        type=str,
        default=None,
        help="Start of the window (YYYY-MM-DD format)",
    )
    parser.add_argument(
        "--end-date",
        type=str,
        default=None,
        help="End of the window (YYYY-MM-DD format)",
    )
    parser.add_argument(
        "--set-deliverable-due",
        nargs=2,
        metavar=("DELIVERABLE_ID", "DATE"),
        help="Move a deliverable's due date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--set-booking-deadline",
        nargs=2,
        metavar=("BOOKING_ID", "DATE"),
        help="Set a booking's explicit deadline (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--reschedule",
        nargs=2,
        metavar=("EVENT_ID", "DATE"),
        help="Reschedule a calendar event by id (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args()

    log_level = "DEBUG" if args.verbose else config.log_level
    logger = setup_logging(level=log_level, log_file=config.log_file)

    try:
        try:
            start = _parse_day(args.start_date) if args.start_date else None
            end = _parse_day(args.end_date, end_of_day=True) if args.end_date else None
            change = args.set_deliverable_due or args.set_booking_deadline or args.reschedule
            new_day = _parse_day(change[1]) if change else None
        except ValueError as e:
            logger.error(f"Invalid date format. Use YYYY-MM-DD (e.g., 2024-01-31). Error: {e}")
            return 1

        if not (change or args.events or args.stats):
            parser.print_help()
            return 0

        engine = CalendarEngine.from_config(config, calendar_config)
        asyncio.run(_run(engine, args, start, end, new_day))
        return 0

    except BookingCalendarError as e:
        logger.error(f"Booking calendar error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
