"""Services for the Rehaish API."""

from rehaish.services.audit import AuditService
from rehaish.services.applications import ApplicationService
from rehaish.services.favorites import FavoriteService
from rehaish.services.leases import LeaseService
from rehaish.services.payments import PaymentService
from rehaish.services.properties import PropertyService
from rehaish.services.profiles import ProfileService

__all__ = [
    "AuditService",
    "ApplicationService",
    "FavoriteService",
    "LeaseService",
    "PaymentService",
    "PropertyService",
    "ProfileService",
]
