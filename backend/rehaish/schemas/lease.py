"""Lease schemas."""

from datetime import date
from typing import Literal, Optional
from uuid import UUID

from pydantic import Field, model_validator

from rehaish.models.enums import LeaseStatus
from rehaish.schemas.base import BaseSchema, IDMixin, Page, PageParams, TimestampMixin
from rehaish.schemas.payment import PaymentResponse


class LeaseCreate(BaseSchema):
    """Create a lease from an approved application."""

    application_id: UUID

    start_date: date
    end_date: date

    # Money in currency units (integers only)
    rent_amount: int = Field(..., gt=0)
    security_deposit: int = Field(default=0, ge=0)
    payment_due_day: int = Field(..., ge=1, le=31)

    lease_agreement_url: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="after")
    def validate_dates(self):
        """End date may not precede start date; a one-day lease is allowed."""
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class LeaseStatusUpdate(BaseSchema):
    """Request a lease status transition."""

    status: LeaseStatus


class LeaseResponse(BaseSchema, IDMixin, TimestampMixin):
    """Lease response."""

    property_id: UUID
    tenant_id: UUID
    application_id: Optional[UUID] = None
    status: LeaseStatus
    start_date: date
    end_date: date
    rent_amount: int
    security_deposit: int
    payment_due_day: int
    lease_agreement_url: Optional[str] = None

    # Denormalized fields for list views
    property_title: Optional[str] = None
    tenant_name: Optional[str] = None


class LeaseMetrics(BaseSchema):
    """Derived figures for a single lease."""

    total_paid: int = 0
    total_payments: int = 0
    next_payment_due: Optional[date] = None
    days_until_expiry: Optional[int] = None


class LeaseDetailResponse(LeaseResponse):
    metrics: LeaseMetrics
    # Newest payment_date first
    payments: list[PaymentResponse] = []


class LeaseStats(BaseSchema):
    """Lease counts per status over the filtered set."""

    total: int = 0
    pending_signature: int = 0
    active: int = 0
    terminated: int = 0
    completed: int = 0


LeaseSort = Literal[
    "created_at",
    "-created_at",
    "start_date",
    "-start_date",
    "end_date",
    "-end_date",
    "rent_amount",
    "-rent_amount",
]


class LeaseListParams(PageParams):
    status: Optional[LeaseStatus] = None
    property_id: Optional[UUID] = None
    sort: LeaseSort = "-created_at"


class LeasePage(Page[LeaseResponse]):
    stats: LeaseStats
