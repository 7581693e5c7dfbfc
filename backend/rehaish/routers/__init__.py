"""API Routers for Rehaish."""

from rehaish.routers.auth import router as auth_router
from rehaish.routers.profiles import router as profiles_router
from rehaish.routers.properties import router as properties_router
from rehaish.routers.applications import router as applications_router
from rehaish.routers.leases import router as leases_router
from rehaish.routers.payments import router as payments_router
from rehaish.routers.favorites import router as favorites_router

__all__ = [
    "auth_router",
    "profiles_router",
    "properties_router",
    "applications_router",
    "leases_router",
    "payments_router",
    "favorites_router",
]
