"""Audit logging service."""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from rehaish.models.audit import AuditLog
from rehaish.models.enums import AuditAction


class AuditService:
    """Service for creating audit log entries.

    Entries are added to the caller's session and committed with the change
    they describe.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def log(
        self,
        action: AuditAction,
        resource_type: str,
        resource_id: UUID,
        actor_id: Optional[UUID] = None,
        actor_role: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        """Create an audit log entry."""
        entry = AuditLog(
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            actor_id=actor_id,
            actor_role=actor_role,
            details=details or {},
            ip_address=ip_address,
        )
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def log_application_decided(
        self,
        application_id: UUID,
        manager_id: UUID,
        previous_status: str,
        new_status: str,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        """Log manager decision on an application."""
        return await self.log(
            action=AuditAction.APPLICATION_DECIDED,
            resource_type="application",
            resource_id=application_id,
            actor_id=manager_id,
            actor_role="manager",
            details={"from": previous_status, "to": new_status},
            ip_address=ip_address,
        )

    async def log_lease_status_changed(
        self,
        lease_id: UUID,
        manager_id: UUID,
        previous_status: str,
        new_status: str,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        """Log lease status transition."""
        return await self.log(
            action=AuditAction.LEASE_STATUS_CHANGED,
            resource_type="lease",
            resource_id=lease_id,
            actor_id=manager_id,
            actor_role="manager",
            details={"from": previous_status, "to": new_status},
            ip_address=ip_address,
        )

    async def log_payment_recorded(
        self,
        payment_id: UUID,
        manager_id: UUID,
        amount: int,
        currency: str,
        lease_id: Optional[UUID] = None,
        property_id: Optional[UUID] = None,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        """Log payment recorded by a manager."""
        return await self.log(
            action=AuditAction.PAYMENT_RECORDED,
            resource_type="payment",
            resource_id=payment_id,
            actor_id=manager_id,
            actor_role="manager",
            details={
                "amount": amount,
                "currency": currency,
                "lease_id": str(lease_id) if lease_id else None,
                "property_id": str(property_id) if property_id else None,
            },
            ip_address=ip_address,
        )
