"""Lease lifecycle: create from an approved application, transition, read."""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rehaish.core.errors import Conflict, NotFound
from rehaish.core.security import AuthenticatedUser
from rehaish.models.application import Application
from rehaish.models.enums import ApplicationStatus, AuditAction, LeaseStatus, PaymentStatus
from rehaish.models.lease import Lease
from rehaish.models.payment import Payment
from rehaish.models.property import Property
from rehaish.models.user import Tenant
from rehaish.schemas.base import PaginationMeta
from rehaish.schemas.lease import (
    LeaseCreate,
    LeaseDetailResponse,
    LeaseListParams,
    LeaseResponse,
    LeaseStats,
)
from rehaish.schemas.payment import PaymentResponse
from rehaish.services.access import lease_scope, owned_property_ids
from rehaish.services.audit import AuditService
from rehaish.services.lifecycle import compute_lease_metrics, ensure_lease_transition
from rehaish.services.pagination import count_rows, order_clause

logger = logging.getLogger(__name__)


def _lease_exists_error(lease: Lease) -> Conflict:
    return Conflict(
        "A lease already exists for this application",
        code="LEASE_EXISTS",
        data={
            "existing_lease": {
                "id": str(lease.id),
                "status": lease.status.value,
                "created_at": lease.created_at.isoformat(),
            }
        },
    )


class LeaseService:
    """Manager-driven lease lifecycle."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def _lock_property(self, property_id: UUID) -> None:
        await self.db.execute(
            select(Property.id).where(Property.id == property_id).with_for_update()
        )

    async def _find_active_overlap(
        self,
        property_id: UUID,
        start_date: date,
        end_date: date,
        exclude_id: Optional[UUID] = None,
    ) -> Optional[Lease]:
        """First ACTIVE lease on the property whose inclusive range touches [start, end]."""
        query = select(Lease).where(
            Lease.property_id == property_id,
            Lease.status == LeaseStatus.ACTIVE,
            Lease.start_date <= end_date,
            Lease.end_date >= start_date,
        )
        if exclude_id is not None:
            query = query.where(Lease.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none()

    @staticmethod
    def _overlap_error(lease: Lease) -> Conflict:
        return Conflict(
            "Property already has an active lease for the requested dates",
            code="LEASE_CONFLICT",
            data={
                "conflicting_lease": {
                    "id": str(lease.id),
                    "start_date": lease.start_date.isoformat(),
                    "end_date": lease.end_date.isoformat(),
                }
            },
        )

    async def create(
        self,
        manager_id: UUID,
        data: LeaseCreate,
        ip_address: Optional[str] = None,
    ) -> Lease:
        """Convert an APPROVED application into a PENDING_SIGNATURE lease.

        Checks run in order: ownership and approval, one lease per
        application, no overlap with an ACTIVE lease on the property.
        """
        result = await self.db.execute(
            select(Application).where(
                Application.id == data.application_id,
                Application.property_id.in_(owned_property_ids(manager_id)),
            )
        )
        application = result.scalar_one_or_none()
        if not application:
            raise NotFound("Application not found", code="APPLICATION_NOT_FOUND")

        await self._lock_property(application.property_id)

        if application.status != ApplicationStatus.APPROVED:
            raise NotFound(
                "Approved application not found",
                code="APPLICATION_NOT_FOUND",
                data={"current_status": application.status.value},
            )

        result = await self.db.execute(
            select(Lease).where(Lease.application_id == application.id)
        )
        existing = result.scalar_one_or_none()
        if existing:
            raise _lease_exists_error(existing)

        overlap = await self._find_active_overlap(
            application.property_id, data.start_date, data.end_date
        )
        if overlap:
            raise self._overlap_error(overlap)

        lease = Lease(
            property_id=application.property_id,
            tenant_id=application.tenant_id,
            application_id=application.id,
            status=LeaseStatus.PENDING_SIGNATURE,
            start_date=data.start_date,
            end_date=data.end_date,
            rent_amount=data.rent_amount,
            security_deposit=data.security_deposit,
            payment_due_day=data.payment_due_day,
            lease_agreement_url=data.lease_agreement_url,
        )
        self.db.add(lease)
        try:
            await self.db.flush()
        except IntegrityError:
            # Lost a race on the application_id unique constraint
            await self.db.rollback()
            result = await self.db.execute(
                select(Lease).where(Lease.application_id == data.application_id)
            )
            existing = result.scalar_one_or_none()
            if existing:
                raise _lease_exists_error(existing)
            raise

        await self.audit.log(
            action=AuditAction.LEASE_CREATED,
            resource_type="lease",
            resource_id=lease.id,
            actor_id=manager_id,
            actor_role="manager",
            details={
                "application_id": str(application.id),
                "start_date": data.start_date.isoformat(),
                "end_date": data.end_date.isoformat(),
            },
            ip_address=ip_address,
        )
        await self.db.commit()

        logger.info(f"[LEASE] Created lease {lease.id} from application {application.id}")
        return lease

    async def transition(
        self,
        manager_id: UUID,
        lease_id: UUID,
        new_status: LeaseStatus,
        ip_address: Optional[str] = None,
    ) -> Lease:
        """Move a lease along the status table.

        Activation re-checks overlap so two signed-off leases cannot both go
        ACTIVE for the same dates.
        """
        result = await self.db.execute(
            select(Lease).where(
                Lease.id == lease_id,
                Lease.property_id.in_(owned_property_ids(manager_id)),
            )
        )
        lease = result.scalar_one_or_none()
        if not lease:
            raise NotFound("Lease not found", code="LEASE_NOT_FOUND")

        await self._lock_property(lease.property_id)
        await self.db.refresh(lease)

        previous = lease.status
        ensure_lease_transition(previous, new_status)

        if new_status == LeaseStatus.ACTIVE:
            overlap = await self._find_active_overlap(
                lease.property_id, lease.start_date, lease.end_date, exclude_id=lease.id
            )
            if overlap:
                raise self._overlap_error(overlap)

        lease.status = new_status

        await self.audit.log_lease_status_changed(
            lease_id=lease.id,
            manager_id=manager_id,
            previous_status=previous.value,
            new_status=new_status.value,
            ip_address=ip_address,
        )
        await self.db.commit()

        logger.info(f"[LEASE] {lease.id} {previous.value} -> {new_status.value}")
        return lease

    async def get_detail(
        self,
        user: AuthenticatedUser,
        lease_id: UUID,
        today: Optional[date] = None,
    ) -> LeaseDetailResponse:
        """Lease with its payments and metrics, for its tenant, owning manager or an admin."""
        result = await self.db.execute(
            select(Lease, Property.title, Tenant.name)
            .join(Property, Lease.property_id == Property.id)
            .join(Tenant, Lease.tenant_id == Tenant.id)
            .where(Lease.id == lease_id, lease_scope(user))
        )
        row = result.one_or_none()
        if not row:
            raise NotFound("Lease not found", code="LEASE_NOT_FOUND")
        lease, title, tenant_name = row

        paid_result = await self.db.execute(
            select(func.coalesce(func.sum(Payment.amount), 0)).where(
                Payment.lease_id == lease.id,
                Payment.status == PaymentStatus.COMPLETED,
            )
        )
        total_paid = paid_result.scalar_one()

        payments_result = await self.db.execute(
            select(Payment)
            .where(Payment.lease_id == lease.id)
            .order_by(Payment.payment_date.desc(), Payment.id)
        )
        payments = payments_result.scalars().all()

        metrics = compute_lease_metrics(
            status=lease.status,
            end_date=lease.end_date,
            payment_due_day=lease.payment_due_day,
            total_paid=int(total_paid),
            total_payments=len(payments),
            today=today,
        )

        base = LeaseResponse.model_validate(lease)
        return LeaseDetailResponse(
            **base.model_dump(exclude={"property_title", "tenant_name"}),
            property_title=title,
            tenant_name=tenant_name,
            metrics=metrics,
            payments=[PaymentResponse.model_validate(p) for p in payments],
        )

    async def list_for_user(
        self,
        user: AuthenticatedUser,
        params: LeaseListParams,
    ) -> tuple[list[LeaseResponse], PaginationMeta, LeaseStats]:
        """Leases visible to the caller with per-status counts."""
        clauses = [lease_scope(user)]
        if params.status:
            clauses.append(Lease.status == params.status)
        if params.property_id:
            clauses.append(Lease.property_id == params.property_id)

        total = await count_rows(self.db, Lease, *clauses)

        result = await self.db.execute(
            select(Lease, Property.title, Tenant.name)
            .join(Property, Lease.property_id == Property.id)
            .join(Tenant, Lease.tenant_id == Tenant.id)
            .where(*clauses)
            .order_by(order_clause(Lease, params.sort), Lease.id)
            .offset(params.offset)
            .limit(params.limit)
        )
        items = []
        for lease, title, tenant_name in result.all():
            item = LeaseResponse.model_validate(lease)
            item.property_title = title
            item.tenant_name = tenant_name
            items.append(item)

        stats_result = await self.db.execute(
            select(Lease.status, func.count()).where(*clauses).group_by(Lease.status)
        )
        stats = LeaseStats(total=total)
        for lease_status, count in stats_result.all():
            setattr(stats, lease_status.value.lower(), count)

        return items, PaginationMeta.build(params.page, params.limit, total), stats
