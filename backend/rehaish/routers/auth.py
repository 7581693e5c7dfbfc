"""Auth router - profile sync for Firebase-authenticated callers."""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from rehaish.core.database import get_db
from rehaish.core.security import (
    AuthenticatedUser,
    client_ip,
    get_current_user,
    optional_firebase_user,
    verify_firebase_token,
)
from rehaish.schemas.auth import (
    AuthStatusResponse,
    CurrentUserResponse,
    ExchangeResponse,
    ProfileResponse,
    SessionInfo,
    StatusUser,
)
from rehaish.schemas.base import ApiResponse
from rehaish.services.access import permissions_for
from rehaish.services.profiles import ProfileService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/exchange", response_model=ApiResponse[ExchangeResponse])
async def exchange_token(
    request: Request,
    db: AsyncSession = Depends(get_db),
    auth_user: AuthenticatedUser = Depends(verify_firebase_token),
):
    """Create or refresh the caller's profile from a verified Firebase ID token.

    Managers get a manager profile; tenants, admins and unknown roles get a
    tenant profile. The token itself is never re-issued.
    """
    profile = await ProfileService(db).exchange(auth_user, ip_address=client_ip(request))
    return ApiResponse(
        message="Authentication successful",
        data=ExchangeResponse(
            user=ProfileResponse.model_validate(profile),
            session=SessionInfo(role=auth_user.role, permissions=permissions_for(auth_user.role)),
        ),
    )


@router.get("/me", response_model=ApiResponse[CurrentUserResponse])
async def get_me(
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Get current authenticated user info."""
    return ApiResponse(
        message="User retrieved successfully",
        data=CurrentUserResponse(
            uid=current_user.uid,
            role=current_user.role,
            email=current_user.email,
            email_verified=current_user.email_verified,
            db_user_id=str(current_user.db_user_id) if current_user.db_user_id else None,
            permissions=permissions_for(current_user.role),
        ),
    )


@router.get("/status", response_model=ApiResponse[AuthStatusResponse])
async def get_status(
    auth_user: Optional[AuthenticatedUser] = Depends(optional_firebase_user),
):
    """Report whether the request carries a valid token. Never fails on a bad token."""
    if auth_user is None:
        return ApiResponse(
            message="User is not authenticated",
            data=AuthStatusResponse(authenticated=False),
        )

    return ApiResponse(
        message="User is authenticated",
        data=AuthStatusResponse(
            authenticated=True,
            user=StatusUser(
                id=auth_user.uid,
                email=auth_user.email,
                name=auth_user.name,
                role=auth_user.role,
                email_verified=auth_user.email_verified,
            ),
            session=SessionInfo(role=auth_user.role, permissions=permissions_for(auth_user.role)),
        ),
    )
