"""Abstract base class for source record readers."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ..models.records import Booking, Deliverable, Payment


class RecordReader(ABC):
    """Read-only access to the records calendar events are derived from.

    When a window is given, implementations filter on the record's own
    timestamp: bookings on created_at or explicit deadline, deliverables
    and payments on due_date.
    """

    @abstractmethod
    async def fetch_bookings(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[Booking]:
        """
        Fetch bookings with their campaign and creator summaries.

        Args:
            start_date: Start of the window (inclusive)
            end_date: End of the window (inclusive)

        Returns:
            List of Booking records ordered by created_at

        Raises:
            RecordReadError: If the store cannot be queried
        """

    @abstractmethod
    async def fetch_deliverables(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[Deliverable]:
        """
        Fetch deliverables that have a due date.

        Args:
            start_date: Start of the window (inclusive)
            end_date: End of the window (inclusive)

        Returns:
            List of Deliverable records ordered by due_date

        Raises:
            RecordReadError: If the store cannot be queried
        """

    @abstractmethod
    async def fetch_payments(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[Payment]:
        """
        Fetch payments that have a due date.

        Args:
            start_date: Start of the window (inclusive)
            end_date: End of the window (inclusive)

        Returns:
            List of Payment records ordered by due_date

        Raises:
            RecordReadError: If the store cannot be queried
        """

    async def aclose(self) -> None:
        """Release any underlying connections."""
