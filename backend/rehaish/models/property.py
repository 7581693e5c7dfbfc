"""Property model."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Enum as SQLEnum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rehaish.core.database import Base
from rehaish.models.enums import PropertyType

if TYPE_CHECKING:
    from rehaish.models.user import Manager
    from rehaish.models.application import Application
    from rehaish.models.lease import Lease

# JSONB on PostgreSQL, plain JSON elsewhere
JSONList = JSON().with_variant(JSONB(), "postgresql")


class Property(Base):
    """A rentable property listed by a manager."""

    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    manager_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("managers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    slug: Mapped[str] = mapped_column(String(120), unique=True, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    photo_urls: Mapped[list[str]] = mapped_column(JSONList, default=list)

    # Money (integer currency units)
    price_per_month: Mapped[int] = mapped_column(Integer, nullable=False)
    security_deposit: Mapped[int] = mapped_column(Integer, nullable=False)
    application_fee: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    property_type: Mapped[PropertyType] = mapped_column(SQLEnum(PropertyType), nullable=False)
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False)
    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False)
    area: Mapped[int] = mapped_column(Integer, nullable=False)  # sq ft

    is_pets_allowed: Mapped[bool] = mapped_column(Boolean, default=False)
    is_parking_included: Mapped[bool] = mapped_column(Boolean, default=False)
    is_furnished: Mapped[bool] = mapped_column(Boolean, default=False)

    highlights: Mapped[list[str]] = mapped_column(JSONList, default=list)
    amenities: Mapped[list[str]] = mapped_column(JSONList, default=list)

    # Address
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False)
    country: Mapped[str] = mapped_column(String(50), default="Pakistan")
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)

    posted_date: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    manager: Mapped["Manager"] = relationship("Manager", back_populates="properties")
    applications: Mapped[list["Application"]] = relationship(
        "Application", back_populates="property", passive_deletes=True
    )
    leases: Mapped[list["Lease"]] = relationship("Lease", back_populates="property")

    __table_args__ = (
        CheckConstraint("price_per_month >= 0", name="ck_property_price_non_negative"),
        CheckConstraint("security_deposit >= 0", name="ck_property_deposit_non_negative"),
    )
