"""Payment schemas."""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import Field, model_validator

from rehaish.models.enums import PaymentMethod, PaymentStatus, PaymentType
from rehaish.schemas.base import BaseSchema, IDMixin, Page, PageParams, TimestampMixin


class PaymentCreate(BaseSchema):
    """Record a payment against a lease or a property.

    Property-only payments must name the paying tenant explicitly.
    """

    lease_id: Optional[UUID] = None
    property_id: Optional[UUID] = None
    tenant_id: Optional[UUID] = None

    amount: int = Field(..., gt=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    payment_type: PaymentType
    method: PaymentMethod
    payment_date: datetime

    reference_id: Optional[str] = Field(None, max_length=100)
    note: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="after")
    def validate_reference(self):
        """A payment needs a lease or a property to attach to."""
        if self.lease_id is None and self.property_id is None:
            raise ValueError("Either lease_id or property_id is required")
        return self


class PaymentUpdate(BaseSchema):
    """Manager update of a payment's status and references."""

    status: PaymentStatus
    reference_id: Optional[str] = Field(None, max_length=100)
    receipt_url: Optional[str] = Field(None, max_length=500)
    note: Optional[str] = Field(None, max_length=500)


class PaymentResponse(BaseSchema, IDMixin, TimestampMixin):
    """Payment response."""

    tenant_id: UUID
    lease_id: Optional[UUID] = None
    property_id: Optional[UUID] = None
    amount: int
    currency: str
    payment_type: PaymentType
    status: PaymentStatus
    method: PaymentMethod
    payment_date: datetime
    reference_id: Optional[str] = None
    receipt_url: Optional[str] = None
    note: Optional[str] = None


class PaymentStats(BaseSchema):
    """Payment counts by status and the completed total."""

    total: int = 0
    completed: int = 0
    pending: int = 0
    failed: int = 0
    refunded: int = 0
    total_completed_amount: int = 0


PaymentSort = Literal["payment_date", "-payment_date", "amount", "-amount", "created_at", "-created_at"]


class PaymentListParams(PageParams):
    status: Optional[PaymentStatus] = None
    payment_type: Optional[PaymentType] = None
    lease_id: Optional[UUID] = None
    property_id: Optional[UUID] = None
    sort: PaymentSort = "-payment_date"


class PaymentPage(Page[PaymentResponse]):
    stats: PaymentStats
