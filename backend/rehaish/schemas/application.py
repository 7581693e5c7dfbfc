"""Application schemas."""

from typing import Literal, Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from rehaish.models.enums import ApplicationStatus
from rehaish.schemas.base import BaseSchema, IDMixin, PageParams, TimestampMixin


class ApplicationCreate(BaseSchema):
    """Submit an application. Contact fields default to the tenant profile."""

    property_id: UUID
    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(None, min_length=5, max_length=50)
    message: Optional[str] = Field(None, max_length=1000)


class ApplicationDecision(BaseSchema):
    """Manager decision on a pending application."""

    status: ApplicationStatus

    @field_validator("status")
    @classmethod
    def validate_decision(cls, value: ApplicationStatus) -> ApplicationStatus:
        """Only APPROVED or REJECTED are decisions."""
        if value not in (ApplicationStatus.APPROVED, ApplicationStatus.REJECTED):
            raise ValueError("status must be APPROVED or REJECTED")
        return value


class ApplicationResponse(BaseSchema, IDMixin, TimestampMixin):
    """Application response."""

    property_id: UUID
    tenant_id: UUID
    full_name: str
    email: str
    phone_number: str
    message: Optional[str] = None
    status: ApplicationStatus

    # Denormalized for list views
    property_title: Optional[str] = None
    property_slug: Optional[str] = None


ApplicationSort = Literal["created_at", "-created_at", "updated_at", "-updated_at"]


class ApplicationListParams(PageParams):
    status: Optional[ApplicationStatus] = None
    property_id: Optional[UUID] = None
    sort: ApplicationSort = "-created_at"
