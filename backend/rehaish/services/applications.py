"""Application lifecycle: submit, withdraw, decide, list."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rehaish.core.errors import Conflict, NotFound
from rehaish.core.security import AuthenticatedUser
from rehaish.models.application import Application
from rehaish.models.enums import ApplicationStatus, AuditAction
from rehaish.models.property import Property
from rehaish.models.user import Tenant
from rehaish.schemas.application import (
    ApplicationCreate,
    ApplicationListParams,
    ApplicationResponse,
)
from rehaish.schemas.base import PaginationMeta
from rehaish.services.access import application_scope, owned_property_ids
from rehaish.services.audit import AuditService
from rehaish.services.lifecycle import ensure_application_transition
from rehaish.services.pagination import count_rows, order_clause

logger = logging.getLogger(__name__)


class ApplicationService:
    """Tenant applications and manager decisions."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def submit(
        self,
        tenant_id: UUID,
        data: ApplicationCreate,
        ip_address: Optional[str] = None,
    ) -> Application:
        """Create a PENDING application.

        The property row is locked so two concurrent submissions for the same
        (tenant, property) pair serialize on the existence check.
        """
        result = await self.db.execute(
            select(Property).where(Property.id == data.property_id).with_for_update()
        )
        prop = result.scalar_one_or_none()
        if not prop:
            raise NotFound("Property not found", code="PROPERTY_NOT_FOUND")

        # Any prior application blocks a new one, whatever its status
        result = await self.db.execute(
            select(Application)
            .where(
                Application.tenant_id == tenant_id,
                Application.property_id == prop.id,
            )
            .limit(1)
        )
        existing = result.scalar_one_or_none()
        if existing:
            raise Conflict(
                "You have already applied for this property",
                code="APPLICATION_EXISTS",
                data={
                    "existing_application": {
                        "id": str(existing.id),
                        "status": existing.status.value,
                        "created_at": existing.created_at.isoformat(),
                    }
                },
            )

        tenant = await self.db.get(Tenant, tenant_id)
        if not tenant:
            raise NotFound("Tenant profile not found", code="TENANT_NOT_FOUND")

        application = Application(
            property_id=prop.id,
            tenant_id=tenant.id,
            full_name=data.full_name or tenant.name,
            email=data.email or tenant.email,
            phone_number=data.phone_number or tenant.phone_number,
            message=data.message,
            status=ApplicationStatus.PENDING,
        )
        self.db.add(application)
        await self.db.flush()

        await self.audit.log(
            action=AuditAction.APPLICATION_SUBMITTED,
            resource_type="application",
            resource_id=application.id,
            actor_id=tenant.id,
            actor_role="tenant",
            details={"property_id": str(prop.id)},
            ip_address=ip_address,
        )
        await self.db.commit()

        logger.info(f"[APPLICATION] Tenant {tenant.id} applied to property {prop.id} ({application.id})")
        return application

    async def withdraw(
        self,
        tenant_id: UUID,
        application_id: UUID,
        ip_address: Optional[str] = None,
    ) -> Application:
        """Tenant withdraws a PENDING application."""
        result = await self.db.execute(
            select(Application)
            .where(
                Application.id == application_id,
                Application.tenant_id == tenant_id,
            )
            .with_for_update()
        )
        application = result.scalar_one_or_none()
        if not application:
            raise NotFound("Application not found", code="APPLICATION_NOT_FOUND")

        ensure_application_transition(
            application.status,
            ApplicationStatus.WITHDRAWN,
            code="INVALID_STATUS_FOR_WITHDRAWAL",
        )
        application.status = ApplicationStatus.WITHDRAWN

        await self.audit.log(
            action=AuditAction.APPLICATION_WITHDRAWN,
            resource_type="application",
            resource_id=application.id,
            actor_id=tenant_id,
            actor_role="tenant",
            ip_address=ip_address,
        )
        await self.db.commit()

        logger.info(f"[APPLICATION] {application.id} withdrawn by tenant {tenant_id}")
        return application

    async def decide(
        self,
        manager_id: UUID,
        application_id: UUID,
        decision: ApplicationStatus,
        ip_address: Optional[str] = None,
    ) -> Application:
        """Manager approves or rejects a PENDING application on an owned property."""
        result = await self.db.execute(
            select(Application)
            .where(
                Application.id == application_id,
                Application.property_id.in_(owned_property_ids(manager_id)),
            )
            .with_for_update()
        )
        application = result.scalar_one_or_none()
        if not application:
            raise NotFound("Application not found", code="APPLICATION_NOT_FOUND")

        previous = application.status
        ensure_application_transition(previous, decision, code="INVALID_STATUS_FOR_UPDATE")
        application.status = decision

        await self.audit.log_application_decided(
            application_id=application.id,
            manager_id=manager_id,
            previous_status=previous.value,
            new_status=decision.value,
            ip_address=ip_address,
        )
        await self.db.commit()

        logger.info(f"[APPLICATION] {application.id} {previous.value} -> {decision.value} by manager {manager_id}")
        return application

    async def list_for_user(
        self,
        user: AuthenticatedUser,
        params: ApplicationListParams,
    ) -> tuple[list[ApplicationResponse], PaginationMeta]:
        """Applications visible to the caller, newest first by default."""
        clauses = [application_scope(user)]
        if params.status:
            clauses.append(Application.status == params.status)
        if params.property_id:
            clauses.append(Application.property_id == params.property_id)

        total = await count_rows(self.db, Application, *clauses)

        result = await self.db.execute(
            select(Application, Property.title, Property.slug)
            .join(Property, Application.property_id == Property.id)
            .where(*clauses)
            .order_by(order_clause(Application, params.sort), Application.id)
            .offset(params.offset)
            .limit(params.limit)
        )

        items = []
        for application, title, slug in result.all():
            item = ApplicationResponse.model_validate(application)
            item.property_title = title
            item.property_slug = slug
            items.append(item)

        return items, PaginationMeta.build(params.page, params.limit, total)
