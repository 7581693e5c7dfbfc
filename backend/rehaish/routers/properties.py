"""Properties router - public search and manager listings."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from rehaish.core.database import get_db
from rehaish.core.security import AuthenticatedUser, client_ip
from rehaish.schemas.base import ApiResponse, Page, PageParams
from rehaish.schemas.property import (
    PropertyCreate,
    PropertyResponse,
    PropertySearchParams,
    PropertyUpdate,
)
from rehaish.services.access import MANAGER_ONLY, Capability, require_capability
from rehaish.services.properties import PropertyService

router = APIRouter(tags=["properties"])


@router.get("/properties", response_model=ApiResponse[Page[PropertyResponse]])
async def search_properties(
    params: Annotated[PropertySearchParams, Query()],
    db: AsyncSession = Depends(get_db),
):
    """Public property search with filters, sorting and pagination."""
    properties, pagination = await PropertyService(db).search(params)
    return ApiResponse(
        message="Properties retrieved successfully",
        data=Page(
            items=[PropertyResponse.model_validate(p) for p in properties],
            pagination=pagination,
        ),
    )


@router.get("/properties/{id_or_slug}", response_model=ApiResponse[PropertyResponse])
async def get_property(
    id_or_slug: str,
    db: AsyncSession = Depends(get_db),
):
    """Public property detail, addressed by id or slug."""
    prop = await PropertyService(db).get_public(id_or_slug)
    return ApiResponse(
        message="Property retrieved successfully",
        data=PropertyResponse.model_validate(prop),
    )


@router.post(
    "/managers/properties",
    response_model=ApiResponse[PropertyResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_property(
    request: Request,
    data: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.CREATE_PROPERTIES, roles=MANAGER_ONLY)),
):
    """Create a new listing owned by the calling manager."""
    prop = await PropertyService(db).create(current_user.db_user_id, data, ip_address=client_ip(request))
    return ApiResponse(
        message="Property created successfully",
        data=PropertyResponse.model_validate(prop),
    )


@router.get("/managers/properties", response_model=ApiResponse[Page[PropertyResponse]])
async def list_manager_properties(
    params: Annotated[PageParams, Query()],
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.READ_PROPERTIES, roles=MANAGER_ONLY)),
):
    """List the calling manager's properties, newest first."""
    properties, pagination = await PropertyService(db).list_owned(current_user.db_user_id, params)
    return ApiResponse(
        message="Properties retrieved successfully",
        data=Page(
            items=[PropertyResponse.model_validate(p) for p in properties],
            pagination=pagination,
        ),
    )


@router.get("/managers/properties/{property_id}", response_model=ApiResponse[PropertyResponse])
async def get_manager_property(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.READ_PROPERTIES, roles=MANAGER_ONLY)),
):
    prop = await PropertyService(db).get_owned(current_user.db_user_id, property_id)
    return ApiResponse(
        message="Property retrieved successfully",
        data=PropertyResponse.model_validate(prop),
    )


@router.patch("/managers/properties/{property_id}", response_model=ApiResponse[PropertyResponse])
async def update_property(
    property_id: UUID,
    data: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.UPDATE_PROPERTIES, roles=MANAGER_ONLY)),
):
    prop = await PropertyService(db).update(current_user.db_user_id, property_id, data)
    return ApiResponse(
        message="Property updated successfully",
        data=PropertyResponse.model_validate(prop),
    )


@router.delete("/managers/properties/{property_id}", response_model=ApiResponse[None])
async def delete_property(
    request: Request,
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.DELETE_PROPERTIES, roles=MANAGER_ONLY)),
):
    """Delete a listing. Refused while leases or payments reference it."""
    await PropertyService(db).delete(current_user.db_user_id, property_id, ip_address=client_ip(request))
    return ApiResponse(message="Property deleted successfully")
