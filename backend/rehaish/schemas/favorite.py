"""Tenant favourite schemas."""

from datetime import datetime
from uuid import UUID

from rehaish.schemas.base import BaseSchema


class FavoriteAdded(BaseSchema):
    property_id: UUID
    property_title: str
    added_at: datetime
