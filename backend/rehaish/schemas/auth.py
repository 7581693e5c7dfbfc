"""Auth and profile schemas."""

from typing import Optional

from pydantic import Field

from rehaish.models.enums import UserRole
from rehaish.schemas.base import BaseSchema, IDMixin, TimestampMixin


class ProfileResponse(BaseSchema, IDMixin, TimestampMixin):
    """Tenant or manager profile."""

    firebase_uid: str
    name: str
    email: str
    phone_number: str


class ProfileUpdate(BaseSchema):
    """Editable profile fields."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=50)


class SessionInfo(BaseSchema):
    authenticated: bool = True
    role: UserRole
    permissions: list[str]


class ExchangeResponse(BaseSchema):
    """Result of POST /auth/exchange."""

    user: ProfileResponse
    session: SessionInfo


class CurrentUserResponse(BaseSchema):
    """Current authenticated user info."""

    uid: str
    role: UserRole
    email: str | None = None
    email_verified: bool = False
    db_user_id: str | None = None
    permissions: list[str] = []


class StatusUser(BaseSchema):
    """Token claims echoed by GET /auth/status."""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: UserRole
    email_verified: bool = False


class AuthStatusResponse(BaseSchema):
    authenticated: bool
    user: Optional[StatusUser] = None
    session: Optional[SessionInfo] = None
