"""Lease model."""

import uuid
from datetime import datetime, date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, Date, ForeignKey, Enum as SQLEnum, Integer, CheckConstraint, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rehaish.core.database import Base
from rehaish.models.enums import LeaseStatus

if TYPE_CHECKING:
    from rehaish.models.property import Property
    from rehaish.models.user import Tenant
    from rehaish.models.application import Application
    from rehaish.models.payment import Payment


class Lease(Base):
    """A binding tenancy agreement. Never deleted (financial/legal record)."""

    __tablename__ = "leases"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("properties.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("tenants.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    # At most one lease per application
    application_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("applications.id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )

    status: Mapped[LeaseStatus] = mapped_column(
        SQLEnum(LeaseStatus),
        default=LeaseStatus.PENDING_SIGNATURE,
        nullable=False,
        index=True,
    )

    # Dates (inclusive range)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Money (integer currency units)
    rent_amount: Mapped[int] = mapped_column(Integer, nullable=False)
    security_deposit: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    payment_due_day: Mapped[int] = mapped_column(Integer, nullable=False)

    lease_agreement_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    property: Mapped["Property"] = relationship("Property", back_populates="leases")
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="leases")
    application: Mapped[Optional["Application"]] = relationship("Application", back_populates="lease")
    payments: Mapped[list["Payment"]] = relationship("Payment", back_populates="lease")

    __table_args__ = (
        Index("ix_leases_property_status_dates", "property_id", "status", "start_date", "end_date"),
        CheckConstraint("end_date > start_date", name="ck_lease_date_order"),
        CheckConstraint(
            "payment_due_day >= 1 AND payment_due_day <= 31",
            name="ck_lease_payment_due_day_range",
        ),
    )
