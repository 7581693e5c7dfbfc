"""Tenant/manager profile sync from identity-provider claims."""

import logging
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rehaish.core.errors import NotFound, ValidationFailed
from rehaish.core.security import AuthenticatedUser
from rehaish.models.enums import AuditAction, UserRole
from rehaish.models.user import Manager, Tenant
from rehaish.schemas.auth import ProfileUpdate
from rehaish.services.audit import AuditService

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = "Rehaish User"

Profile = Union[Tenant, Manager]


def profile_model(role: UserRole) -> type[Profile]:
    """Managers get a Manager row; everyone else a Tenant row."""
    return Manager if role == UserRole.MANAGER else Tenant


class ProfileService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def exchange(
        self,
        auth_user: AuthenticatedUser,
        ip_address: Optional[str] = None,
    ) -> Profile:
        """Create or refresh the caller's local profile from token claims."""
        model = profile_model(auth_user.role)

        result = await self.db.execute(select(model).where(model.firebase_uid == auth_user.uid))
        profile = result.scalar_one_or_none()

        if profile is None:
            if not auth_user.email:
                raise ValidationFailed("Token carries no email address", code="EMAIL_REQUIRED")
            profile = model(
                firebase_uid=auth_user.uid,
                name=auth_user.name or DEFAULT_DISPLAY_NAME,
                email=auth_user.email,
                phone_number=auth_user.phone_number or "",
            )
            self.db.add(profile)
            created = True
        else:
            if auth_user.email:
                profile.email = auth_user.email
            if auth_user.name:
                profile.name = auth_user.name
            created = False

        await self.db.flush()
        await self.audit.log(
            action=AuditAction.PROFILE_SYNCED,
            resource_type=model.__tablename__.rstrip("s"),
            resource_id=profile.id,
            actor_id=profile.id,
            actor_role=auth_user.role.value,
            details={"created": created},
            ip_address=ip_address,
        )
        await self.db.commit()

        logger.info(f"[AUTH] {'Created' if created else 'Synced'} {model.__name__.lower()} profile for {auth_user.uid}")
        return profile

    async def get(self, user: AuthenticatedUser) -> Profile:
        model = profile_model(user.role)
        profile = await self.db.get(model, user.db_user_id) if user.db_user_id else None
        if not profile:
            raise NotFound("Profile not found", code="PROFILE_NOT_FOUND")
        return profile

    async def update(self, user: AuthenticatedUser, data: ProfileUpdate) -> Profile:
        profile = await self.get(user)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(profile, field, value)
        await self.db.commit()
        await self.db.refresh(profile)
        return profile
