"""Tenant favourites: save, unsave and list properties."""

import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rehaish.core.errors import Conflict, NotFound
from rehaish.models.favorite import Favorite
from rehaish.models.property import Property
from rehaish.schemas.base import PageParams, PaginationMeta
from rehaish.services.pagination import count_rows

logger = logging.getLogger(__name__)


def _already_favorited() -> Conflict:
    return Conflict("Property is already in favorites", code="ALREADY_FAVORITED")


class FavoriteService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_tenant(self, tenant_id: UUID, params: PageParams) -> tuple[list[Property], PaginationMeta]:
        """Saved properties, most recently posted first."""
        clause = Favorite.tenant_id == tenant_id
        total = await count_rows(self.db, Favorite, clause)
        result = await self.db.execute(
            select(Property)
            .join(Favorite, Favorite.property_id == Property.id)
            .where(clause)
            .order_by(Property.posted_date.desc(), Property.id)
            .offset(params.offset)
            .limit(params.limit)
        )
        return list(result.scalars().all()), PaginationMeta.build(params.page, params.limit, total)

    async def add(self, tenant_id: UUID, property_id: UUID) -> tuple[Favorite, Property]:
        prop = await self.db.get(Property, property_id)
        if not prop:
            raise NotFound("Property not found", code="PROPERTY_NOT_FOUND")

        if await self.db.get(Favorite, (tenant_id, property_id)):
            raise _already_favorited()

        favorite = Favorite(tenant_id=tenant_id, property_id=property_id)
        self.db.add(favorite)
        try:
            await self.db.commit()
        except IntegrityError:
            # Concurrent add of the same pair
            await self.db.rollback()
            raise _already_favorited()

        logger.info(f"[FAVORITE] Tenant {tenant_id} saved {property_id}")
        return favorite, prop

    async def remove(self, tenant_id: UUID, property_id: UUID) -> None:
        result = await self.db.execute(
            delete(Favorite).where(
                Favorite.tenant_id == tenant_id,
                Favorite.property_id == property_id,
            )
        )
        if result.rowcount == 0:
            raise NotFound("Property not found in favorites", code="FAVORITE_NOT_FOUND")
        await self.db.commit()

        logger.info(f"[FAVORITE] Tenant {tenant_id} removed {property_id}")
