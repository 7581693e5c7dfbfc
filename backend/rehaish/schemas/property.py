"""Property schemas."""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import Field, model_validator

from rehaish.models.enums import Amenity, PropertyHighlight, PropertyType
from rehaish.schemas.base import BaseSchema, IDMixin, PageParams


class PropertyCreate(BaseSchema):
    """Create a new property listing."""

    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=10)
    photo_urls: list[str] = Field(default_factory=list)

    # Money in currency units (integers only)
    price_per_month: int = Field(..., ge=0)
    security_deposit: int = Field(..., ge=0)
    application_fee: Optional[int] = Field(None, ge=0)

    property_type: PropertyType
    bedrooms: int = Field(..., ge=0)
    bathrooms: int = Field(..., ge=0)
    area: int = Field(..., gt=0)

    is_pets_allowed: bool = False
    is_parking_included: bool = False
    is_furnished: bool = False
    highlights: list[PropertyHighlight] = Field(default_factory=list)
    amenities: list[Amenity] = Field(default_factory=list)

    address: str = Field(..., min_length=3, max_length=255)
    city: str = Field(..., min_length=2, max_length=100)
    state: str = Field(..., min_length=2, max_length=100)
    postal_code: str = Field(..., min_length=3, max_length=20)
    country: str = "Pakistan"
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class PropertyUpdate(BaseSchema):
    """Update property. Slug is fixed at creation."""

    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = Field(None, min_length=10)
    photo_urls: Optional[list[str]] = None
    price_per_month: Optional[int] = Field(None, ge=0)
    security_deposit: Optional[int] = Field(None, ge=0)
    application_fee: Optional[int] = Field(None, ge=0)
    property_type: Optional[PropertyType] = None
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    area: Optional[int] = Field(None, gt=0)
    is_pets_allowed: Optional[bool] = None
    is_parking_included: Optional[bool] = None
    is_furnished: Optional[bool] = None
    highlights: Optional[list[PropertyHighlight]] = None
    amenities: Optional[list[Amenity]] = None
    address: Optional[str] = Field(None, min_length=3, max_length=255)
    city: Optional[str] = Field(None, min_length=2, max_length=100)
    state: Optional[str] = Field(None, min_length=2, max_length=100)
    postal_code: Optional[str] = Field(None, min_length=3, max_length=20)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class PropertyResponse(BaseSchema, IDMixin):
    """Property response."""

    manager_id: UUID
    slug: str
    title: str
    description: str
    photo_urls: list[str]
    price_per_month: int
    security_deposit: int
    application_fee: Optional[int] = None
    property_type: PropertyType
    bedrooms: int
    bathrooms: int
    area: int
    is_pets_allowed: bool
    is_parking_included: bool
    is_furnished: bool
    highlights: list[str]
    amenities: list[str]
    address: str
    city: str
    state: str
    postal_code: str
    country: str
    latitude: float
    longitude: float
    posted_date: datetime
    updated_at: Optional[datetime] = None


PropertySort = Literal[
    "price_per_month",
    "-price_per_month",
    "area",
    "-area",
    "posted_date",
    "-posted_date",
]


class PropertySearchParams(PageParams):
    """Public property search filters."""

    city: Optional[str] = None
    locality: Optional[str] = Field(None, description="Matched against the street address")
    property_type: Optional[PropertyType] = None
    min_price: Optional[int] = Field(None, ge=0)
    max_price: Optional[int] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    min_area: Optional[int] = Field(None, ge=0)
    max_area: Optional[int] = Field(None, ge=0)
    is_pets_allowed: Optional[bool] = None
    is_parking_included: Optional[bool] = None
    is_furnished: Optional[bool] = None
    amenities: list[Amenity] = Field(default_factory=list)
    highlights: list[PropertyHighlight] = Field(default_factory=list)
    sort: PropertySort = "-posted_date"

    @model_validator(mode="after")
    def validate_ranges(self):
        """Lower bounds must not exceed upper bounds."""
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("min_price must not exceed max_price")
        if self.min_area is not None and self.max_area is not None and self.min_area > self.max_area:
            raise ValueError("min_area must not exceed max_area")
        return self
