"""Record reader for the hosted Supabase (PostgREST) store."""

import logging
from datetime import datetime
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..config import SupabaseConfig
from ..models.records import Booking, Deliverable, Payment
from ..utils.date_utils import ensure_utc, to_date_string
from ..utils.exceptions import ConfigurationError, RecordReadError
from .base import RecordReader

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

NAMES = "campaign:campaigns(id,name),creator:creators(id,name)"
BOOKING_SELECT = f"*,{NAMES}"
BOOKING_REF_SELECT = f"booking:bookings(id,campaign_id,creator_id,{NAMES})"


def _quoted(dt: datetime) -> str:
    # PostgREST logic trees need quoting for values with reserved characters
    return f'"{ensure_utc(dt).isoformat()}"'


class SupabaseRecordReader(RecordReader):
    """Read bookings, deliverables and payments through the PostgREST API."""

    def __init__(
        self,
        supabase_config: SupabaseConfig,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the reader.

        Args:
            supabase_config: Store URL and service key
            timeout: Per-request timeout in seconds
            http_client: Optional preconfigured client (used by tests)
        """
        if not supabase_config.rest_url or not supabase_config.service_key:
            raise ConfigurationError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required")

        self.base_url = supabase_config.rest_url
        self.db_schema = supabase_config.db_schema
        self._service_key = supabase_config.service_key
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._service_key,
            "Authorization": f"Bearer {self._service_key}",
            "Accept": "application/json",
            "Accept-Profile": self.db_schema,
        }

    async def _select(self, table: str, params: list[tuple[str, str]]) -> list[dict[str, Any]]:
        """Run a select against a table and return the raw rows."""
        url = f"{self.base_url}/{table}"
        try:
            response = await self._client.get(url, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            raise RecordReadError(f"Failed to query {table}: {e}") from e

        if response.status_code < 200 or response.status_code >= 300:
            raise RecordReadError(
                f"Failed to query {table} ({response.status_code}): {response.text[:200]}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RecordReadError(f"Store returned invalid JSON for {table}") from e

        if not isinstance(payload, list):
            raise RecordReadError(f"Store returned an unexpected payload shape for {table}")
        return payload

    def _parse(self, rows: list[dict[str, Any]], model: type[RecordT]) -> list[RecordT]:
        """Validate rows, skipping any that do not match the model."""
        result = []
        for row in rows:
            try:
                result.append(model.model_validate(row))
            except ValidationError as e:
                logger.warning(
                    f"Skipping malformed {model.__name__} row {row.get('id', '?')}: "
                    f"{e.error_count()} validation error(s)"
                )
        return result

    def _due_date_params(
        self,
        select: str,
        start_date: Optional[datetime],
        end_date: Optional[datetime],
    ) -> list[tuple[str, str]]:
        params = [
            ("select", select),
            ("due_date", "not.is.null"),
            ("order", "due_date.asc"),
        ]
        if start_date:
            params.append(("due_date", f"gte.{ensure_utc(start_date).isoformat()}"))
        if end_date:
            params.append(("due_date", f"lte.{ensure_utc(end_date).isoformat()}"))
        return params

    async def fetch_bookings(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[Booking]:
        """Fetch bookings created, or with an explicit deadline, inside the window."""
        params = [("select", BOOKING_SELECT), ("order", "created_at.asc")]

        if start_date and end_date:
            created = f"and(created_at.gte.{_quoted(start_date)},created_at.lte.{_quoted(end_date)})"
            deadline = (
                f"and(deadline.gte.{to_date_string(start_date)},"
                f"deadline.lte.{to_date_string(end_date)})"
            )
            params.append(("or", f"({created},{deadline})"))
        elif start_date:
            params.append((
                "or",
                f"(created_at.gte.{_quoted(start_date)},deadline.gte.{to_date_string(start_date)})",
            ))
        elif end_date:
            params.append((
                "or",
                f"(created_at.lte.{_quoted(end_date)},deadline.lte.{to_date_string(end_date)})",
            ))

        bookings = self._parse(await self._select("bookings", params), Booking)
        logger.info(f"Read {len(bookings)} bookings from store")
        return bookings

    async def fetch_deliverables(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[Deliverable]:
        params = self._due_date_params(f"*,{BOOKING_REF_SELECT}", start_date, end_date)
        deliverables = self._parse(await self._select("deliverables", params), Deliverable)
        logger.info(f"Read {len(deliverables)} deliverables from store")
        return deliverables

    async def fetch_payments(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[Payment]:
        params = self._due_date_params(f"*,{BOOKING_REF_SELECT}", start_date, end_date)
        payments = self._parse(await self._select("payments", params), Payment)
        logger.info(f"Read {len(payments)} payments from store")
        return payments

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
