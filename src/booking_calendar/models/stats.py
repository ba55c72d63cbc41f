"""Calendar statistics model."""

from datetime import datetime

from pydantic import BaseModel, Field


class CalendarStats(BaseModel):
    """Aggregate snapshot over a window of synthesized events."""

    window_start: datetime
    window_end: datetime

    total_events: int = 0
    overdue_count: int = 0
    due_today: int = 0
    due_this_week: int = 0

    # Sparse: only observed keys are present
    by_type: dict[str, int] = Field(default_factory=dict)
    by_status: dict[str, int] = Field(default_factory=dict)
    by_priority: dict[str, int] = Field(default_factory=dict)
