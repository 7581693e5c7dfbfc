"""SQLAlchemy models for Rehaish."""

from rehaish.models.user import Tenant, Manager
from rehaish.models.property import Property
from rehaish.models.application import Application
from rehaish.models.lease import Lease
from rehaish.models.payment import Payment
from rehaish.models.favorite import Favorite
from rehaish.models.audit import AuditLog

__all__ = [
    "Tenant",
    "Manager",
    "Property",
    "Application",
    "Lease",
    "Payment",
    "Favorite",
    "AuditLog",
]
