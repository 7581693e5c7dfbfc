"""Leases router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from rehaish.core.database import get_db
from rehaish.core.security import AuthenticatedUser, client_ip
from rehaish.schemas.base import ApiResponse
from rehaish.schemas.lease import (
    LeaseCreate,
    LeaseDetailResponse,
    LeaseListParams,
    LeasePage,
    LeaseResponse,
    LeaseStatusUpdate,
)
from rehaish.services.access import MANAGER_ROUTE, TENANT_ROUTE, Capability, require_capability
from rehaish.services.leases import LeaseService

router = APIRouter(tags=["leases"])


@router.post("/managers/leases", response_model=ApiResponse[LeaseResponse], status_code=status.HTTP_201_CREATED)
async def create_lease(
    request: Request,
    data: LeaseCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.CREATE_LEASES, roles=MANAGER_ROUTE)),
):
    """Create a lease (PENDING_SIGNATURE) from an approved application.

    - 404 unless the application is APPROVED and on a property you own
    - 409 if the application already has a lease
    - 409 if an ACTIVE lease on the property overlaps the requested dates
    """
    lease = await LeaseService(db).create(current_user.db_user_id, data, ip_address=client_ip(request))
    return ApiResponse(
        message="Lease created successfully",
        data=LeaseResponse.model_validate(lease),
    )


@router.get("/managers/leases", response_model=ApiResponse[LeasePage])
async def list_manager_leases(
    params: Annotated[LeaseListParams, Query()],
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.READ_LEASES, roles=MANAGER_ROUTE)),
):
    """List leases on the calling manager's properties with status counts."""
    items, pagination, stats = await LeaseService(db).list_for_user(current_user, params)
    return ApiResponse(
        message="Leases retrieved successfully",
        data=LeasePage(items=items, pagination=pagination, stats=stats),
    )


@router.patch("/managers/leases/{lease_id}/status", response_model=ApiResponse[LeaseResponse])
async def update_lease_status(
    request: Request,
    lease_id: UUID,
    data: LeaseStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.UPDATE_LEASES, roles=MANAGER_ROUTE)),
):
    """Transition a lease: PENDING_SIGNATURE -> ACTIVE|TERMINATED, ACTIVE -> TERMINATED|COMPLETED."""
    lease = await LeaseService(db).transition(
        current_user.db_user_id, lease_id, data.status, ip_address=client_ip(request)
    )
    return ApiResponse(
        message=f"Lease status updated to {lease.status.value}",
        data=LeaseResponse.model_validate(lease),
    )


@router.get("/tenants/leases", response_model=ApiResponse[LeasePage])
async def list_tenant_leases(
    params: Annotated[LeaseListParams, Query()],
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.READ_LEASES, roles=TENANT_ROUTE)),
):
    """List the calling tenant's leases."""
    items, pagination, stats = await LeaseService(db).list_for_user(current_user, params)
    return ApiResponse(
        message="Leases retrieved successfully",
        data=LeasePage(items=items, pagination=pagination, stats=stats),
    )


@router.get("/leases/{lease_id}", response_model=ApiResponse[LeaseDetailResponse])
async def get_lease(
    lease_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.READ_LEASES)),
):
    """Lease detail with payment metrics (tenant, owning manager or admin)."""
    detail = await LeaseService(db).get_detail(current_user, lease_id)
    return ApiResponse(message="Lease details retrieved successfully", data=detail)
