"""Tenant and manager profile endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rehaish.core.database import get_db
from rehaish.core.security import AuthenticatedUser
from rehaish.schemas.auth import ProfileResponse, ProfileUpdate
from rehaish.schemas.base import ApiResponse
from rehaish.services.access import MANAGER_ONLY, TENANT_ONLY, Capability, require_capability
from rehaish.services.profiles import ProfileService

router = APIRouter(tags=["profiles"])


@router.get("/tenants/me", response_model=ApiResponse[ProfileResponse])
async def get_tenant_profile(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.READ_PROFILE, roles=TENANT_ONLY)),
):
    profile = await ProfileService(db).get(current_user)
    return ApiResponse(message="Tenant profile retrieved successfully", data=ProfileResponse.model_validate(profile))


@router.patch("/tenants/me", response_model=ApiResponse[ProfileResponse])
async def update_tenant_profile(
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.UPDATE_PROFILE, roles=TENANT_ONLY)),
):
    profile = await ProfileService(db).update(current_user, data)
    return ApiResponse(message="Tenant profile updated successfully", data=ProfileResponse.model_validate(profile))


@router.get("/managers/me", response_model=ApiResponse[ProfileResponse])
async def get_manager_profile(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.READ_PROFILE, roles=MANAGER_ONLY)),
):
    profile = await ProfileService(db).get(current_user)
    return ApiResponse(message="Manager profile retrieved successfully", data=ProfileResponse.model_validate(profile))


@router.patch("/managers/me", response_model=ApiResponse[ProfileResponse])
async def update_manager_profile(
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.UPDATE_PROFILE, roles=MANAGER_ONLY)),
):
    profile = await ProfileService(db).update(current_user, data)
    return ApiResponse(message="Manager profile updated successfully", data=ProfileResponse.model_validate(profile))
