"""Capability-based authorization and ownership scopes.

Roles map to capability sets; endpoints declare the capability they need with
``require_capability``. Row ownership is expressed as SQL clauses so that a
row the caller may not see is indistinguishable from a missing row.
"""

import logging
from enum import Enum
from typing import Callable, Collection, Optional
from uuid import UUID

from fastapi import Depends
from sqlalchemy import ColumnElement, or_, select, true

from rehaish.core.errors import AccessDenied
from rehaish.core.security import AuthenticatedUser, require_profile
from rehaish.models.application import Application
from rehaish.models.enums import UserRole
from rehaish.models.lease import Lease
from rehaish.models.payment import Payment
from rehaish.models.property import Property

logger = logging.getLogger(__name__)


class Capability(str, Enum):
    READ_PROFILE = "read:profile"
    UPDATE_PROFILE = "update:profile"
    READ_PROPERTIES = "read:properties"
    CREATE_PROPERTIES = "create:properties"
    UPDATE_PROPERTIES = "update:properties"
    DELETE_PROPERTIES = "delete:properties"
    CREATE_APPLICATIONS = "create:applications"
    READ_APPLICATIONS = "read:applications"
    WITHDRAW_APPLICATIONS = "withdraw:applications"
    DECIDE_APPLICATIONS = "update:applications"
    CREATE_LEASES = "create:leases"
    READ_LEASES = "read:leases"
    UPDATE_LEASES = "update:leases"
    CREATE_PAYMENTS = "create:payments"
    READ_PAYMENTS = "read:payments"
    UPDATE_PAYMENTS = "update:payments"
    READ_FAVORITES = "read:favorites"
    UPDATE_FAVORITES = "update:favorites"
    READ_ALL = "read:all"


_BASE = frozenset({Capability.READ_PROFILE, Capability.UPDATE_PROFILE, Capability.READ_PROPERTIES})

ROLE_CAPABILITIES: dict[UserRole, frozenset[Capability]] = {
    UserRole.TENANT: _BASE
    | {
        Capability.CREATE_APPLICATIONS,
        Capability.READ_APPLICATIONS,
        Capability.WITHDRAW_APPLICATIONS,
        Capability.READ_LEASES,
        Capability.READ_PAYMENTS,
        Capability.READ_FAVORITES,
        Capability.UPDATE_FAVORITES,
    },
    UserRole.MANAGER: _BASE
    | {
        Capability.CREATE_PROPERTIES,
        Capability.UPDATE_PROPERTIES,
        Capability.DELETE_PROPERTIES,
        Capability.READ_APPLICATIONS,
        Capability.DECIDE_APPLICATIONS,
        Capability.CREATE_LEASES,
        Capability.READ_LEASES,
        Capability.UPDATE_LEASES,
        Capability.CREATE_PAYMENTS,
        Capability.READ_PAYMENTS,
        Capability.UPDATE_PAYMENTS,
    },
    UserRole.ADMIN: _BASE
    | {
        Capability.READ_APPLICATIONS,
        Capability.READ_LEASES,
        Capability.READ_PAYMENTS,
        Capability.READ_ALL,
    },
}


def permissions_for(role: UserRole) -> list[str]:
    """Sorted capability strings for a role, as reported to clients."""
    return sorted(c.value for c in ROLE_CAPABILITIES.get(role, frozenset()))


def has_capability(user: AuthenticatedUser, capability: Capability) -> bool:
    return capability in ROLE_CAPABILITIES.get(user.role, frozenset())


# Audiences for role-scoped routes. Admins may read through either surface
# but hold no profile, so profile-bound routes take a single role.
TENANT_ROUTE = frozenset({UserRole.TENANT, UserRole.ADMIN})
MANAGER_ROUTE = frozenset({UserRole.MANAGER, UserRole.ADMIN})
TENANT_ONLY = frozenset({UserRole.TENANT})
MANAGER_ONLY = frozenset({UserRole.MANAGER})


def require_capability(
    *capabilities: Capability,
    roles: Optional[Collection[UserRole]] = None,
) -> Callable[..., AuthenticatedUser]:
    """Dependency factory: the caller's role must grant every capability.

    ``roles`` additionally restricts the route to the listed roles, for
    endpoints that belong to one side of the marketplace (``/tenants/...``,
    ``/managers/...``).
    """

    def dependency(current_user: AuthenticatedUser = Depends(require_profile)) -> AuthenticatedUser:
        if roles is not None and current_user.role not in roles:
            allowed = sorted(r.value for r in roles)
            logger.info(f"[ACCESS] {current_user.role.value} {current_user.uid} outside {allowed}")
            raise AccessDenied(
                "This endpoint is not available for your role",
                data={"allowed_roles": allowed, "role": current_user.role.value},
            )
        missing = [c.value for c in capabilities if not has_capability(current_user, c)]
        if missing:
            logger.info(f"[ACCESS] {current_user.role.value} {current_user.uid} denied {missing}")
            raise AccessDenied(
                "Insufficient permissions",
                data={"required": missing, "role": current_user.role.value},
            )
        return current_user

    return dependency


# Ownership scopes


def owned_property_ids(manager_id: UUID):
    """Subquery of property ids owned by a manager."""
    return select(Property.id).where(Property.manager_id == manager_id)


def application_scope(user: AuthenticatedUser) -> ColumnElement[bool]:
    if user.role == UserRole.ADMIN:
        return true()
    if user.role == UserRole.MANAGER:
        return Application.property_id.in_(owned_property_ids(user.db_user_id))
    return Application.tenant_id == user.db_user_id


def lease_scope(user: AuthenticatedUser) -> ColumnElement[bool]:
    if user.role == UserRole.ADMIN:
        return true()
    if user.role == UserRole.MANAGER:
        return Lease.property_id.in_(owned_property_ids(user.db_user_id))
    return Lease.tenant_id == user.db_user_id


def payment_scope(user: AuthenticatedUser) -> ColumnElement[bool]:
    """Managers see payments on their properties, directly or through a lease."""
    if user.role == UserRole.ADMIN:
        return true()
    if user.role == UserRole.MANAGER:
        owned = owned_property_ids(user.db_user_id)
        return or_(
            Payment.property_id.in_(owned),
            Payment.lease_id.in_(select(Lease.id).where(Lease.property_id.in_(owned))),
        )
    return Payment.tenant_id == user.db_user_id
