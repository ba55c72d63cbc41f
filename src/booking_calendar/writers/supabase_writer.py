"""Record writer for the hosted Supabase (PostgREST) store."""

import logging
from datetime import datetime
from typing import Any, Callable, Optional

import pytz
import requests

from ..config import SupabaseConfig
from ..utils.date_utils import ensure_utc, to_date_string
from ..utils.exceptions import ConfigurationError, RecordWriteError
from .base import RecordWriter

logger = logging.getLogger(__name__)


class SupabaseRecordWriter(RecordWriter):
    """Write date changes to bookings and deliverables through PostgREST."""

    def __init__(
        self,
        supabase_config: SupabaseConfig,
        timeout: float = 10.0,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        super().__init__()
        if not supabase_config.rest_url or not supabase_config.service_key:
            raise ConfigurationError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required")

        self.base_url = supabase_config.rest_url
        self.db_schema = supabase_config.db_schema
        self.timeout = timeout
        self._service_key = supabase_config.service_key
        self._clock = clock or (lambda: datetime.now(pytz.utc))

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._service_key,
            "Authorization": f"Bearer {self._service_key}",
            "Content-Type": "application/json",
            "Content-Profile": self.db_schema,
            "Prefer": "return=representation",
        }

    def _patch(self, table: str, record_id: str, data: dict[str, Any]) -> list:
        url = f"{self.base_url}/{table}"
        try:
            resp = requests.patch(
                url,
                params={"id": f"eq.{record_id}"},
                headers=self._headers(),
                json=data,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            return resp.json()

        except Exception as e:
            raise RecordWriteError(f"Failed to update {table} row {record_id}: {e}") from e

    def update_deliverable_due_date(self, deliverable_id: str, due_date: datetime) -> None:
        rows = self._patch(
            "deliverables",
            deliverable_id,
            {
                "due_date": ensure_utc(due_date).isoformat(),
                "updated_at": self._clock().isoformat(),
            },
        )
        if not rows:
            raise RecordWriteError(f"Deliverable {deliverable_id} not found")

        logger.info(f"Updated deliverable {deliverable_id} due date to {due_date.isoformat()}")
        self._notify_change("deliverable", deliverable_id)

    def update_booking_deadline(self, booking_id: str, deadline: datetime) -> None:
        rows = self._patch(
            "bookings",
            booking_id,
            {
                "deadline": to_date_string(deadline),
                "updated_at": self._clock().isoformat(),
            },
        )
        if not rows:
            raise RecordWriteError(f"Booking {booking_id} not found")

        logger.info(f"Updated booking {booking_id} deadline to {to_date_string(deadline)}")
        self._notify_change("booking", booking_id)
