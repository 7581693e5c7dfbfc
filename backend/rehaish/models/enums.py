"""Enumeration types for the Rehaish domain model."""

from enum import Enum


class UserRole(str, Enum):
    """Role claim carried by identity provider tokens."""
    TENANT = "tenant"
    MANAGER = "manager"
    ADMIN = "admin"


class PropertyType(str, Enum):
    """Type of property."""
    HOUSE = "HOUSE"
    UPPER_PORTION = "UPPER_PORTION"
    LOWER_PORTION = "LOWER_PORTION"
    APARTMENT = "APARTMENT"
    ROOM = "ROOM"
    STUDIO = "STUDIO"
    PENTHOUSE = "PENTHOUSE"
    FARM_HOUSE = "FARM_HOUSE"
    COMMERCIAL_UNIT = "COMMERCIAL_UNIT"


class PropertyHighlight(str, Enum):
    NEAR_MARKET = "NEAR_MARKET"
    NEAR_MOSQUE = "NEAR_MOSQUE"
    NEAR_SCHOOL = "NEAR_SCHOOL"
    NEAR_PARK = "NEAR_PARK"
    CORNER_PLOT = "CORNER_PLOT"
    WIDE_ROAD_FRONT = "WIDE_ROAD_FRONT"
    SEPARATE_ENTRANCE = "SEPARATE_ENTRANCE"
    ROOFTOP_ACCESS = "ROOFTOP_ACCESS"
    RECENTLY_RENOVATED = "RECENTLY_RENOVATED"
    SOLAR_PANEL_READY = "SOLAR_PANEL_READY"
    WATER_AVAILABILITY_24_7 = "WATER_AVAILABILITY_24_7"
    NEAR_BUS_STOP = "NEAR_BUS_STOP"


class Amenity(str, Enum):
    AC = "AC"
    UPS = "UPS"
    GENERATOR = "GENERATOR"
    SOLAR_PANEL = "SOLAR_PANEL"
    WATER_TANK = "WATER_TANK"
    BOREWELL_WATER = "BOREWELL_WATER"
    GEYSER = "GEYSER"
    INTERNET_INSTALLED = "INTERNET_INSTALLED"
    CCTV_SECURITY = "CCTV_SECURITY"
    GUARD = "GUARD"
    GATED_COMMUNITY = "GATED_COMMUNITY"
    GARAGE = "GARAGE"
    BALCONY = "BALCONY"
    SERVANT_QUARTER = "SERVANT_QUARTER"
    LIFT = "LIFT"
    LAWN_OR_GARDEN = "LAWN_OR_GARDEN"
    TILED_FLOORING = "TILED_FLOORING"
    MARBLE_FLOORING = "MARBLE_FLOORING"


class ApplicationStatus(str, Enum):
    """Status of a rental application. PENDING is the only open state."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"


class LeaseStatus(str, Enum):
    """Status of a lease."""
    PENDING_SIGNATURE = "PENDING_SIGNATURE"
    ACTIVE = "ACTIVE"
    TERMINATED = "TERMINATED"
    COMPLETED = "COMPLETED"


class PaymentStatus(str, Enum):
    """Status of a recorded payment."""
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class PaymentType(str, Enum):
    RENT = "RENT"
    SECURITY_DEPOSIT = "SECURITY_DEPOSIT"
    APPLICATION_FEE = "APPLICATION_FEE"
    LATE_FEE = "LATE_FEE"
    MAINTENANCE_CHARGE = "MAINTENANCE_CHARGE"
    REFUND = "REFUND"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "BANK_TRANSFER"
    EASYPAY = "EASYPAY"
    JAZZCASH = "JAZZCASH"
    CARD = "CARD"
    WALLET = "WALLET"
    CASH = "CASH"


class AuditAction(str, Enum):
    """Actions tracked in audit log."""
    PROFILE_SYNCED = "profile_synced"
    PROPERTY_CREATED = "property_created"
    PROPERTY_DELETED = "property_deleted"
    APPLICATION_SUBMITTED = "application_submitted"
    APPLICATION_WITHDRAWN = "application_withdrawn"
    APPLICATION_DECIDED = "application_decided"
    LEASE_CREATED = "lease_created"
    LEASE_STATUS_CHANGED = "lease_status_changed"
    PAYMENT_RECORDED = "payment_recorded"
    PAYMENT_UPDATED = "payment_updated"
