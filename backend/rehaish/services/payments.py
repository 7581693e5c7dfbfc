"""Payment ledger: record, update status, read."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rehaish.core.config import get_settings
from rehaish.core.errors import NotFound, ValidationFailed
from rehaish.core.security import AuthenticatedUser
from rehaish.models.enums import AuditAction, PaymentStatus
from rehaish.models.lease import Lease
from rehaish.models.payment import Payment
from rehaish.models.property import Property
from rehaish.models.user import Tenant
from rehaish.schemas.base import PaginationMeta
from rehaish.schemas.payment import (
    PaymentCreate,
    PaymentListParams,
    PaymentStats,
    PaymentUpdate,
)
from rehaish.services.access import owned_property_ids, payment_scope
from rehaish.services.audit import AuditService
from rehaish.services.pagination import count_rows, order_clause

logger = logging.getLogger(__name__)


class PaymentService:
    """Records payments; never processes or deletes them."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def _resolve_references(
        self,
        manager_id: UUID,
        data: PaymentCreate,
    ) -> tuple[UUID, Optional[UUID], UUID]:
        """Resolve (tenant_id, lease_id, property_id) for a new payment.

        PaymentCreate guarantees a lease_id or a property_id.
        """
        if data.lease_id:
            result = await self.db.execute(
                select(Lease).where(
                    Lease.id == data.lease_id,
                    Lease.property_id.in_(owned_property_ids(manager_id)),
                )
            )
            lease = result.scalar_one_or_none()
            if not lease:
                raise NotFound("Lease not found", code="LEASE_NOT_FOUND")
            if data.property_id and data.property_id != lease.property_id:
                raise ValidationFailed(
                    "property_id does not match the lease's property",
                    code="REFERENCE_MISMATCH",
                )
            if data.tenant_id and data.tenant_id != lease.tenant_id:
                raise ValidationFailed(
                    "tenant_id does not match the lease's tenant",
                    code="REFERENCE_MISMATCH",
                )
            return lease.tenant_id, lease.id, lease.property_id

        result = await self.db.execute(
            select(Property.id).where(
                Property.id == data.property_id,
                Property.manager_id == manager_id,
            )
        )
        property_id = result.scalar_one_or_none()
        if not property_id:
            raise NotFound("Property not found", code="PROPERTY_NOT_FOUND")

        # Without a lease the tenant cannot be inferred
        if not data.tenant_id:
            raise ValidationFailed(
                "tenant_id is required for payments without a lease",
                code="TENANT_REQUIRED",
            )
        tenant = await self.db.get(Tenant, data.tenant_id)
        if not tenant:
            raise NotFound("Tenant not found", code="TENANT_NOT_FOUND")

        return tenant.id, None, property_id

    async def record(
        self,
        manager_id: UUID,
        data: PaymentCreate,
        ip_address: Optional[str] = None,
    ) -> Payment:
        """Record a PENDING payment against a lease or a property."""
        tenant_id, lease_id, property_id = await self._resolve_references(manager_id, data)

        payment = Payment(
            tenant_id=tenant_id,
            lease_id=lease_id,
            property_id=property_id,
            amount=data.amount,
            currency=(data.currency or get_settings().default_currency).upper(),
            payment_type=data.payment_type,
            status=PaymentStatus.PENDING,
            method=data.method,
            payment_date=data.payment_date,
            reference_id=data.reference_id,
            note=data.note,
        )
        self.db.add(payment)
        await self.db.flush()

        await self.audit.log_payment_recorded(
            payment_id=payment.id,
            manager_id=manager_id,
            amount=payment.amount,
            currency=payment.currency,
            lease_id=lease_id,
            property_id=property_id,
            ip_address=ip_address,
        )
        await self.db.commit()

        logger.info(f"[PAYMENT] Recorded {payment.amount} {payment.currency} ({payment.id}) for tenant {tenant_id}")
        return payment

    async def update_status(
        self,
        manager: AuthenticatedUser,
        payment_id: UUID,
        data: PaymentUpdate,
        ip_address: Optional[str] = None,
    ) -> Payment:
        """Set status and references. Any status may move to any other."""
        result = await self.db.execute(
            select(Payment).where(Payment.id == payment_id, payment_scope(manager))
        )
        payment = result.scalar_one_or_none()
        if not payment:
            raise NotFound("Payment not found", code="PAYMENT_NOT_FOUND")

        previous = payment.status
        payment.status = data.status
        if data.reference_id is not None:
            payment.reference_id = data.reference_id
        if data.receipt_url is not None:
            payment.receipt_url = data.receipt_url
        if data.note is not None:
            payment.note = data.note

        await self.audit.log(
            action=AuditAction.PAYMENT_UPDATED,
            resource_type="payment",
            resource_id=payment.id,
            actor_id=manager.db_user_id,
            actor_role="manager",
            details={"from": previous.value, "to": data.status.value},
            ip_address=ip_address,
        )
        await self.db.commit()

        logger.info(f"[PAYMENT] {payment.id} {previous.value} -> {data.status.value}")
        return payment

    async def get_detail(self, user: AuthenticatedUser, payment_id: UUID) -> Payment:
        result = await self.db.execute(
            select(Payment).where(Payment.id == payment_id, payment_scope(user))
        )
        payment = result.scalar_one_or_none()
        if not payment:
            raise NotFound("Payment not found", code="PAYMENT_NOT_FOUND")
        return payment

    async def list_for_user(
        self,
        user: AuthenticatedUser,
        params: PaymentListParams,
    ) -> tuple[list[Payment], PaginationMeta, PaymentStats]:
        """Payments visible to the caller, with counts and the completed total."""
        clauses = [payment_scope(user)]
        if params.status:
            clauses.append(Payment.status == params.status)
        if params.payment_type:
            clauses.append(Payment.payment_type == params.payment_type)
        if params.lease_id:
            clauses.append(Payment.lease_id == params.lease_id)
        if params.property_id:
            clauses.append(Payment.property_id == params.property_id)

        total = await count_rows(self.db, Payment, *clauses)

        result = await self.db.execute(
            select(Payment)
            .where(*clauses)
            .order_by(order_clause(Payment, params.sort), Payment.id)
            .offset(params.offset)
            .limit(params.limit)
        )
        payments = list(result.scalars().all())

        stats_result = await self.db.execute(
            select(
                Payment.status,
                func.count(),
                func.coalesce(
                    func.sum(case((Payment.status == PaymentStatus.COMPLETED, Payment.amount), else_=0)),
                    0,
                ),
            )
            .where(*clauses)
            .group_by(Payment.status)
        )
        stats = PaymentStats(total=total)
        for payment_status, count, completed_amount in stats_result.all():
            setattr(stats, payment_status.value.lower(), count)
            stats.total_completed_amount += int(completed_amount)

        return payments, PaginationMeta.build(params.page, params.limit, total), stats
