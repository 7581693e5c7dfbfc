"""Tenant favourites router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from rehaish.core.database import get_db
from rehaish.core.security import AuthenticatedUser
from rehaish.schemas.base import ApiResponse, Page, PageParams
from rehaish.schemas.favorite import FavoriteAdded
from rehaish.schemas.property import PropertyResponse
from rehaish.services.access import TENANT_ONLY, Capability, require_capability
from rehaish.services.favorites import FavoriteService

router = APIRouter(prefix="/tenants/favorites", tags=["favorites"])


@router.get("", response_model=ApiResponse[Page[PropertyResponse]])
async def list_favorites(
    params: Annotated[PageParams, Query()],
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.READ_FAVORITES, roles=TENANT_ONLY)),
):
    properties, pagination = await FavoriteService(db).list_for_tenant(current_user.db_user_id, params)
    return ApiResponse(
        message="Favorites retrieved successfully",
        data=Page(
            items=[PropertyResponse.model_validate(p) for p in properties],
            pagination=pagination,
        ),
    )


@router.post("/{property_id}", response_model=ApiResponse[FavoriteAdded])
async def add_favorite(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.UPDATE_FAVORITES, roles=TENANT_ONLY)),
):
    """Save a property. 404 if it does not exist, 409 if already saved."""
    favorite, prop = await FavoriteService(db).add(current_user.db_user_id, property_id)
    return ApiResponse(
        message="Property added to favorites",
        data=FavoriteAdded(property_id=prop.id, property_title=prop.title, added_at=favorite.created_at),
    )


@router.delete("/{property_id}", response_model=ApiResponse[None])
async def remove_favorite(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.UPDATE_FAVORITES, roles=TENANT_ONLY)),
):
    await FavoriteService(db).remove(current_user.db_user_id, property_id)
    return ApiResponse(message="Property removed from favorites")
