"""Firebase JWT verification and current-user resolution."""

import logging
from typing import Optional
from uuid import UUID

import firebase_admin
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth, credentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rehaish.core.config import get_settings
from rehaish.core.database import get_db
from rehaish.core.errors import AccessDenied, AuthRequired
from rehaish.models.enums import UserRole

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _ensure_firebase_app() -> None:
    """Initialize the Firebase Admin SDK once, on first verification."""
    if firebase_admin._apps:
        return
    settings = get_settings()
    options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
    if settings.google_application_credentials:
        cred = credentials.Certificate(settings.google_application_credentials)
        firebase_admin.initialize_app(cred, options)
    else:
        firebase_admin.initialize_app(options=options)


def parse_role(raw: Optional[str]) -> UserRole:
    """Map the custom `role` claim to a UserRole. Unknown values become tenant."""
    if not raw:
        return UserRole.TENANT
    try:
        return UserRole(str(raw).lower())
    except ValueError:
        logger.warning(f"[AUTH] Unknown role claim '{raw}', defaulting to tenant")
        return UserRole.TENANT


class AuthenticatedUser:
    """Represents an authenticated user from Firebase JWT."""

    def __init__(
        self,
        uid: str,
        role: UserRole = UserRole.TENANT,
        email: Optional[str] = None,
        email_verified: bool = False,
        name: Optional[str] = None,
        phone_number: Optional[str] = None,
    ):
        self.uid = uid
        self.role = role
        self.email = email
        self.email_verified = email_verified
        self.name = name
        self.phone_number = phone_number
        self.db_user_id: Optional[UUID] = None


async def verify_firebase_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthenticatedUser:
    """Verify Firebase JWT and return authenticated user.

    This dependency NEVER mints JWTs - it only verifies tokens issued by Firebase.
    """
    if credentials is None or not credentials.credentials:
        raise AuthRequired("Authentication required")

    _ensure_firebase_app()
    token = credentials.credentials

    try:
        decoded_token = auth.verify_id_token(token)
    except auth.ExpiredIdTokenError:
        raise AuthRequired("Token has expired", code="AUTH_TOKEN_EXPIRED")
    except auth.InvalidIdTokenError:
        raise AuthRequired("Invalid authentication token", code="AUTH_TOKEN_INVALID")
    except Exception as e:
        logger.warning(f"[AUTH] Token verification failed: {e}")
        raise AuthRequired("Token verification failed", code="AUTH_TOKEN_INVALID")

    return AuthenticatedUser(
        uid=decoded_token["uid"],
        role=parse_role(decoded_token.get("role")),
        email=decoded_token.get("email"),
        email_verified=decoded_token.get("email_verified", False),
        name=decoded_token.get("name"),
        phone_number=decoded_token.get("phone_number"),
    )


async def get_current_user(
    auth_user: AuthenticatedUser = Depends(verify_firebase_token),
    db: AsyncSession = Depends(get_db),
) -> AuthenticatedUser:
    """Get current user with its tenant or manager profile id attached."""
    from rehaish.models.user import Manager, Tenant

    if auth_user.role == UserRole.MANAGER:
        model = Manager
    elif auth_user.role == UserRole.TENANT:
        model = Tenant
    else:
        # Admins act without a profile row
        return auth_user

    result = await db.execute(select(model.id).where(model.firebase_uid == auth_user.uid))
    profile_id = result.scalar_one_or_none()
    if profile_id is not None:
        auth_user.db_user_id = profile_id

    return auth_user


async def optional_firebase_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[AuthenticatedUser]:
    """Verified caller, or None when the token is missing or fails verification."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return await verify_firebase_token(credentials)
    except AuthRequired as e:
        logger.warning(f"[AUTH] Ignoring unverifiable token on optional route: {e.code}")
        return None


def require_profile(
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    """Require a synced tenant or manager profile (see POST /auth/exchange)."""
    if current_user.role != UserRole.ADMIN and current_user.db_user_id is None:
        raise AccessDenied(
            "Profile not found. Call /auth/exchange first.",
            code="PROFILE_NOT_FOUND",
        )
    return current_user


def client_ip(request: Request) -> Optional[str]:
    """Best-effort caller address for audit entries."""
    return request.client.host if request.client else None
