"""Abstract base class for source record writers."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceChange:
    """A committed write to a source record."""

    kind: str  # "booking" or "deliverable"
    record_id: str
    # Views whose cached rendering depends on the record
    paths: tuple[str, ...] = field(default_factory=tuple)


ChangeListener = Callable[[SourceChange], None]


class RecordWriter(ABC):
    """Abstract base class for writing date changes back to source records."""

    def __init__(self) -> None:
        self._listeners: list[ChangeListener] = []

    def add_listener(self, listener: ChangeListener) -> None:
        """Register a callback invoked after every committed write."""
        self._listeners.append(listener)

    def _notify_change(self, kind: str, record_id: str) -> None:
        change = SourceChange(
            kind=kind,
            record_id=record_id,
            paths=("/calendar", f"/{kind}s", f"/{kind}s/{record_id}"),
        )
        for listener in self._listeners:
            try:
                listener(change)
            except Exception as e:
                # The write is already committed; a stale view is recoverable
                logger.error(f"Change listener failed for {kind} {record_id}: {e}")

    @abstractmethod
    def update_deliverable_due_date(self, deliverable_id: str, due_date: datetime) -> None:
        """
        Set a deliverable's due date.

        Args:
            deliverable_id: Deliverable identifier
            due_date: New due date

        Raises:
            RecordWriteError: If the update fails
        """

    @abstractmethod
    def update_booking_deadline(self, booking_id: str, deadline: datetime) -> None:
        """
        Set a booking's explicit deadline.

        Args:
            booking_id: Booking identifier
            deadline: New deadline (stored as a date)

        Raises:
            RecordWriteError: If the update fails
        """
