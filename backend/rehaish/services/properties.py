"""Property listings: slugging, public search and manager CRUD."""

import logging
import re
from typing import Optional
from uuid import UUID

from sqlalchemy import String, cast, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from rehaish.core.errors import Conflict, NotFound
from rehaish.models.application import Application
from rehaish.models.enums import AuditAction
from rehaish.models.favorite import Favorite
from rehaish.models.lease import Lease
from rehaish.models.payment import Payment
from rehaish.models.property import Property
from rehaish.schemas.base import PageParams, PaginationMeta
from rehaish.schemas.property import PropertyCreate, PropertySearchParams, PropertyUpdate
from rehaish.services.audit import AuditService
from rehaish.services.pagination import count_rows, order_clause

logger = logging.getLogger(__name__)


def slugify(title: str) -> str:
    """Lowercase, keep [a-z0-9 -], spaces to hyphens, collapse repeats."""
    slug = re.sub(r"[^a-z0-9\s-]", "", title.lower().strip())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")
    return slug or "property"


def _json_has(column, value: str):
    # Enum tokens appear quoted in the serialized JSON array on every backend
    return cast(column, String).like(f'%"{value}"%')


class PropertyService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def unique_slug(self, title: str) -> str:
        """Slug from the title, suffixed -1, -2, ... until unused."""
        base = slugify(title)
        result = await self.db.execute(
            select(Property.slug).where(
                or_(Property.slug == base, Property.slug.like(f"{base}-%"))
            )
        )
        taken = set(result.scalars().all())
        if base not in taken:
            return base
        counter = 1
        while f"{base}-{counter}" in taken:
            counter += 1
        return f"{base}-{counter}"

    async def search(self, params: PropertySearchParams) -> tuple[list[Property], PaginationMeta]:
        """Public listing search."""
        clauses = []
        if params.city:
            clauses.append(Property.city.ilike(f"%{params.city}%"))
        if params.locality:
            clauses.append(Property.address.ilike(f"%{params.locality}%"))
        if params.property_type:
            clauses.append(Property.property_type == params.property_type)
        if params.min_price is not None:
            clauses.append(Property.price_per_month >= params.min_price)
        if params.max_price is not None:
            clauses.append(Property.price_per_month <= params.max_price)
        if params.bedrooms is not None:
            clauses.append(Property.bedrooms >= params.bedrooms)
        if params.bathrooms is not None:
            clauses.append(Property.bathrooms >= params.bathrooms)
        if params.min_area is not None:
            clauses.append(Property.area >= params.min_area)
        if params.max_area is not None:
            clauses.append(Property.area <= params.max_area)
        for flag in ("is_pets_allowed", "is_parking_included", "is_furnished"):
            value = getattr(params, flag)
            if value is not None:
                clauses.append(getattr(Property, flag) == value)
        for amenity in params.amenities:
            clauses.append(_json_has(Property.amenities, amenity.value))
        for highlight in params.highlights:
            clauses.append(_json_has(Property.highlights, highlight.value))

        total = await count_rows(self.db, Property, *clauses)
        result = await self.db.execute(
            select(Property)
            .where(*clauses)
            .order_by(order_clause(Property, params.sort), Property.id)
            .offset(params.offset)
            .limit(params.limit)
        )
        return list(result.scalars().all()), PaginationMeta.build(params.page, params.limit, total)

    async def get_public(self, id_or_slug: str) -> Property:
        """Look up by UUID, falling back to slug."""
        try:
            clause = Property.id == UUID(id_or_slug)
        except ValueError:
            clause = Property.slug == id_or_slug.lower()
        result = await self.db.execute(select(Property).where(clause))
        prop = result.scalar_one_or_none()
        if not prop:
            raise NotFound("Property not found", code="PROPERTY_NOT_FOUND")
        return prop

    async def get_owned(self, manager_id: UUID, property_id: UUID) -> Property:
        result = await self.db.execute(
            select(Property).where(
                Property.id == property_id,
                Property.manager_id == manager_id,
            )
        )
        prop = result.scalar_one_or_none()
        if not prop:
            raise NotFound("Property not found", code="PROPERTY_NOT_FOUND")
        return prop

    async def list_owned(
        self,
        manager_id: UUID,
        params: PageParams,
    ) -> tuple[list[Property], PaginationMeta]:
        clause = Property.manager_id == manager_id
        total = await count_rows(self.db, Property, clause)
        result = await self.db.execute(
            select(Property)
            .where(clause)
            .order_by(Property.posted_date.desc(), Property.id)
            .offset(params.offset)
            .limit(params.limit)
        )
        return list(result.scalars().all()), PaginationMeta.build(params.page, params.limit, total)

    async def create(
        self,
        manager_id: UUID,
        data: PropertyCreate,
        ip_address: Optional[str] = None,
    ) -> Property:
        values = data.model_dump(mode="json")
        prop = Property(
            **values,
            manager_id=manager_id,
            slug=await self.unique_slug(data.title),
        )
        self.db.add(prop)
        await self.db.flush()

        await self.audit.log(
            action=AuditAction.PROPERTY_CREATED,
            resource_type="property",
            resource_id=prop.id,
            actor_id=manager_id,
            actor_role="manager",
            details={"slug": prop.slug},
            ip_address=ip_address,
        )
        await self.db.commit()

        logger.info(f"[PROPERTY] Manager {manager_id} listed {prop.slug} ({prop.id})")
        return prop

    async def update(self, manager_id: UUID, property_id: UUID, data: PropertyUpdate) -> Property:
        prop = await self.get_owned(manager_id, property_id)
        for field, value in data.model_dump(mode="json", exclude_unset=True).items():
            if value is not None:
                setattr(prop, field, value)
        await self.db.commit()
        await self.db.refresh(prop)
        return prop

    async def delete(
        self,
        manager_id: UUID,
        property_id: UUID,
        ip_address: Optional[str] = None,
    ) -> None:
        """Delete a listing. Refused once leases or payments reference it."""
        prop = await self.get_owned(manager_id, property_id)

        lease_count = await count_rows(self.db, Lease, Lease.property_id == prop.id)
        payment_count = await count_rows(
            self.db,
            Payment,
            or_(
                Payment.property_id == prop.id,
                Payment.lease_id.in_(select(Lease.id).where(Lease.property_id == prop.id)),
            ),
        )
        if lease_count or payment_count:
            raise Conflict(
                "Property has leases or payments and cannot be deleted",
                code="PROPERTY_HAS_RECORDS",
                data={"lease_count": lease_count, "payment_count": payment_count},
            )

        await self.db.execute(delete(Application).where(Application.property_id == prop.id))
        await self.db.execute(delete(Favorite).where(Favorite.property_id == prop.id))
        await self.db.delete(prop)

        await self.audit.log(
            action=AuditAction.PROPERTY_DELETED,
            resource_type="property",
            resource_id=property_id,
            actor_id=manager_id,
            actor_role="manager",
            details={"slug": prop.slug},
            ip_address=ip_address,
        )
        await self.db.commit()

        logger.info(f"[PROPERTY] Manager {manager_id} deleted {property_id}")
