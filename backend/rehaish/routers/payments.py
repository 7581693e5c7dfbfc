"""Payments router - ledger records only, no gateway processing."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from rehaish.core.database import get_db
from rehaish.core.security import AuthenticatedUser, client_ip
from rehaish.schemas.base import ApiResponse
from rehaish.schemas.payment import (
    PaymentCreate,
    PaymentListParams,
    PaymentPage,
    PaymentResponse,
    PaymentUpdate,
)
from rehaish.services.access import MANAGER_ROUTE, TENANT_ROUTE, Capability, require_capability
from rehaish.services.payments import PaymentService

router = APIRouter(tags=["payments"])


async def _page(db: AsyncSession, user: AuthenticatedUser, params: PaymentListParams) -> PaymentPage:
    payments, pagination, stats = await PaymentService(db).list_for_user(user, params)
    return PaymentPage(
        items=[PaymentResponse.model_validate(p) for p in payments],
        pagination=pagination,
        stats=stats,
    )


@router.post("/managers/payments", response_model=ApiResponse[PaymentResponse], status_code=status.HTTP_201_CREATED)
async def record_payment(
    request: Request,
    data: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.CREATE_PAYMENTS, roles=MANAGER_ROUTE)),
):
    """Record a PENDING payment against a lease, or a property plus tenant_id."""
    payment = await PaymentService(db).record(current_user.db_user_id, data, ip_address=client_ip(request))
    return ApiResponse(
        message="Payment recorded successfully",
        data=PaymentResponse.model_validate(payment),
    )


@router.get("/managers/payments", response_model=ApiResponse[PaymentPage])
async def list_manager_payments(
    params: Annotated[PaymentListParams, Query()],
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.READ_PAYMENTS, roles=MANAGER_ROUTE)),
):
    return ApiResponse(
        message="Payments retrieved successfully",
        data=await _page(db, current_user, params),
    )


@router.patch("/managers/payments/{payment_id}", response_model=ApiResponse[PaymentResponse])
async def update_payment(
    request: Request,
    payment_id: UUID,
    data: PaymentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.UPDATE_PAYMENTS, roles=MANAGER_ROUTE)),
):
    """Update payment status and reference fields."""
    payment = await PaymentService(db).update_status(
        current_user, payment_id, data, ip_address=client_ip(request)
    )
    return ApiResponse(
        message="Payment updated successfully",
        data=PaymentResponse.model_validate(payment),
    )


@router.get("/tenants/payments", response_model=ApiResponse[PaymentPage])
async def list_tenant_payments(
    params: Annotated[PaymentListParams, Query()],
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.READ_PAYMENTS, roles=TENANT_ROUTE)),
):
    return ApiResponse(
        message="Payments retrieved successfully",
        data=await _page(db, current_user, params),
    )


@router.get("/payments/{payment_id}", response_model=ApiResponse[PaymentResponse])
async def get_payment(
    payment_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_capability(Capability.READ_PAYMENTS)),
):
    """Payment detail for its tenant, the owning manager or an admin."""
    payment = await PaymentService(db).get_detail(current_user, payment_id)
    return ApiResponse(
        message="Payment retrieved successfully",
        data=PaymentResponse.model_validate(payment),
    )
