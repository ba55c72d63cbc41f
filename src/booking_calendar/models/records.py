"""Source record models read from the external store."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from ..utils.date_utils import parse_timestamp


class BookingStatus(str, Enum):
    """Booking workflow status."""

    PENDING = "pending"
    IN_PROCESS = "in_process"
    CONTENT_SUBMITTED = "content_submitted"
    APPROVED = "approved"
    COMPLETED = "completed"
    CANCELED = "canceled"


class DeliverableStatus(str, Enum):
    """Deliverable workflow status."""

    PLANNED = "planned"
    DUE = "due"
    SUBMITTED = "submitted"
    REVISION = "revision"
    APPROVED = "approved"
    SCHEDULED = "scheduled"
    POSTED = "posted"


class PaymentStatus(str, Enum):
    """Payment workflow status."""

    UNCONFIRMED = "unconfirmed"
    PENDING_INVOICE = "pending_invoice"
    WAITING_PAYMENT = "waiting_payment"
    PAID = "paid"
    FAILED = "failed"


class CampaignRef(BaseModel):
    """Campaign summary embedded in a booking row."""

    id: Optional[str] = None
    name: Optional[str] = None


class CreatorRef(BaseModel):
    """Creator summary embedded in a booking row."""

    id: Optional[str] = None
    name: Optional[str] = None


class Record(BaseModel):
    """Base for store rows; normalizes timestamp columns to UTC."""

    model_config = {"extra": "ignore"}

    @field_validator(
        "created_at",
        "updated_at",
        "deadline",
        "due_date",
        "publish_date",
        "paid_at",
        mode="before",
        check_fields=False,
    )
    @classmethod
    def _parse_timestamps(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return parse_timestamp(value)


class BookingRef(BaseModel):
    """Booking summary embedded in deliverable and payment rows."""

    model_config = {"extra": "ignore"}

    id: Optional[str] = None
    campaign_id: Optional[str] = None
    creator_id: Optional[str] = None

    campaign: Optional[CampaignRef] = None
    creator: Optional[CreatorRef] = None

    @property
    def creator_name(self) -> str:
        if self.creator and self.creator.name:
            return self.creator.name
        return "Unknown"

    @property
    def campaign_name(self) -> str:
        if self.campaign and self.campaign.name:
            return self.campaign.name
        return "No Campaign"


class Booking(Record):
    """Booking between a creator and a campaign."""

    id: str
    # Plain string so statuses unknown to this engine still parse
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    deadline: Optional[datetime] = None
    campaign_id: Optional[str] = None
    creator_id: Optional[str] = None

    campaign: Optional[CampaignRef] = None
    creator: Optional[CreatorRef] = None

    @property
    def creator_name(self) -> str:
        if self.creator and self.creator.name:
            return self.creator.name
        return "Unknown"

    @property
    def campaign_name(self) -> str:
        if self.campaign and self.campaign.name:
            return self.campaign.name
        return "No Campaign"


class Deliverable(Record):
    """Content deliverable owed under a booking."""

    id: str
    status: str
    title: Optional[str] = None
    platform: Optional[str] = None
    due_date: Optional[datetime] = None
    publish_date: Optional[datetime] = None
    booking_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    booking: Optional[BookingRef] = None


class Payment(Record):
    """Payment owed to a creator for a booking."""

    id: str
    status: str
    amount: Optional[float] = None
    currency: Optional[str] = None
    due_date: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    booking_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    booking: Optional[BookingRef] = None
