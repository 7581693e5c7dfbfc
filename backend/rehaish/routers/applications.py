"""Applications router - tenant submissions and manager decisions."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from rehaish.core.database import get_db
from rehaish.core.security import AuthenticatedUser, client_ip
from rehaish.schemas.application import (
    ApplicationCreate,
    ApplicationDecision,
    ApplicationListParams,
    ApplicationResponse,
)
from rehaish.schemas.base import ApiResponse, Page
from rehaish.services.access import MANAGER_ROUTE, TENANT_ROUTE, Capability, require_capability
from rehaish.services.applications import ApplicationService

router = APIRouter(prefix="/applications", tags=["applications"])


@router.post("", response_model=ApiResponse[ApplicationResponse], status_code=status.HTTP_201_CREATED)
async def submit_application(
    request: Request,
    data: ApplicationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.CREATE_APPLICATIONS, roles=TENANT_ROUTE)),
):
    """Apply for a property (one application per tenant and property)."""
    application = await ApplicationService(db).submit(
        current_user.db_user_id, data, ip_address=client_ip(request)
    )
    return ApiResponse(
        message="Application submitted successfully",
        data=ApplicationResponse.model_validate(application),
    )


@router.get("", response_model=ApiResponse[Page[ApplicationResponse]])
async def list_my_applications(
    params: Annotated[ApplicationListParams, Query()],
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.READ_APPLICATIONS, roles=TENANT_ROUTE)),
):
    """List the calling tenant's applications."""
    items, pagination = await ApplicationService(db).list_for_user(current_user, params)
    return ApiResponse(
        message="Applications retrieved successfully",
        data=Page(items=items, pagination=pagination),
    )


@router.post("/{application_id}/withdraw", response_model=ApiResponse[ApplicationResponse])
async def withdraw_application(
    request: Request,
    application_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.WITHDRAW_APPLICATIONS, roles=TENANT_ROUTE)),
):
    """Withdraw a PENDING application."""
    application = await ApplicationService(db).withdraw(
        current_user.db_user_id, application_id, ip_address=client_ip(request)
    )
    return ApiResponse(
        message="Application withdrawn successfully",
        data=ApplicationResponse.model_validate(application),
    )


@router.get("/managers", response_model=ApiResponse[Page[ApplicationResponse]])
async def list_manager_applications(
    params: Annotated[ApplicationListParams, Query()],
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.READ_APPLICATIONS, roles=MANAGER_ROUTE)),
):
    """List applications on the calling manager's properties."""
    items, pagination = await ApplicationService(db).list_for_user(current_user, params)
    return ApiResponse(
        message="Applications retrieved successfully",
        data=Page(items=items, pagination=pagination),
    )


@router.patch("/managers/{application_id}/status", response_model=ApiResponse[ApplicationResponse])
async def decide_application(
    request: Request,
    application_id: UUID,
    data: ApplicationDecision,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.DECIDE_APPLICATIONS, roles=MANAGER_ROUTE)),
):
    """Approve or reject a PENDING application."""
    application = await ApplicationService(db).decide(
        current_user.db_user_id, application_id, data.status, ip_address=client_ip(request)
    )
    return ApiResponse(
        message=f"Application {data.status.value.lower()} successfully",
        data=ApplicationResponse.model_validate(application),
    )
