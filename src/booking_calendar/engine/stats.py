"""Headline figures and breakdowns over a set of calendar events."""

from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable

from ..models.event import CalendarEvent, EventStatus
from ..models.stats import CalendarStats
from ..utils.date_utils import end_of_day, start_of_day

WEEK_DAYS = 7


def is_overdue(event: CalendarEvent, now: datetime) -> bool:
    """Overdue by status, or still scheduled with a start already past."""
    if event.status == EventStatus.OVERDUE:
        return True
    return event.start_date < now and event.status == EventStatus.SCHEDULED


def compute_stats(
    events: Iterable[CalendarEvent],
    now: datetime,
    window_start: datetime,
    window_end: datetime,
    tz_name: str = "UTC",
) -> CalendarStats:
    """
    Compute a statistics snapshot.

    Args:
        events: Events synthesized for the window
        now: Reference time for overdue/today/week figures
        window_start: Start of the window the events were fetched for
        window_end: End of the window the events were fetched for
        tz_name: Business timezone used for day boundaries

    Returns:
        CalendarStats with sparse breakdown maps
    """
    events = list(events)
    today_start = start_of_day(now, tz_name)
    today_end = end_of_day(now, tz_name)
    week_end = end_of_day(now + timedelta(days=WEEK_DAYS), tz_name)

    by_type: Counter = Counter()
    by_status: Counter = Counter()
    by_priority: Counter = Counter()
    overdue = due_today = due_this_week = 0

    for event in events:
        by_type[event.type.value] += 1
        by_status[event.status.value] += 1
        by_priority[event.priority.value] += 1

        if is_overdue(event, now):
            overdue += 1
        if today_start <= event.start_date <= today_end:
            due_today += 1
        if now <= event.start_date <= week_end:
            due_this_week += 1

    return CalendarStats(
        window_start=window_start,
        window_end=window_end,
        total_events=len(events),
        overdue_count=overdue,
        due_today=due_today,
        due_this_week=due_this_week,
        by_type=dict(by_type),
        by_status=dict(by_status),
        by_priority=dict(by_priority),
    )
