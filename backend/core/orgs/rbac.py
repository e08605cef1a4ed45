from types import MappingProxyType
from typing import Iterable

from rest_framework.exceptions import PermissionDenied

ROLE_TENANT = "tenant"
ROLE_LANDLORD = "landlord"
ROLE_ADMIN = "admin"

VALID_ROLES = frozenset((ROLE_TENANT, ROLE_LANDLORD, ROLE_ADMIN))
MANAGEMENT_ROLES = frozenset((ROLE_LANDLORD, ROLE_ADMIN))

CAP_GET_OWN_PROFILE = "getOwnProfile"
CAP_REDEEM_CREDITS = "redeemCredits"
CAP_VIEW_OWN_CREDITS = "viewOwnCredits"
CAP_GET_USERS = "getUsers"
CAP_MANAGE_USERS = "manageUsers"
CAP_MANAGE_PROPERTIES = "manageProperties"
CAP_MANAGE_UNITS = "manageUnits"
CAP_MANAGE_TENANTS = "manageTenants"
CAP_MANAGE_CREDITS = "manageCredits"
CAP_VIEW_LEDGER = "viewLedger"

_MANAGEMENT_CAPABILITIES = (
    CAP_MANAGE_PROPERTIES,
    CAP_MANAGE_UNITS,
    CAP_MANAGE_TENANTS,
    CAP_MANAGE_CREDITS,
    CAP_VIEW_LEDGER,
)

# Closed table: there is deliberately no API to register roles or capabilities.
ROLE_CAPABILITIES = MappingProxyType(
    {
        ROLE_TENANT: frozenset((CAP_GET_OWN_PROFILE, CAP_REDEEM_CREDITS, CAP_VIEW_OWN_CREDITS)),
        ROLE_LANDLORD: frozenset(_MANAGEMENT_CAPABILITIES),
        ROLE_ADMIN: frozenset((CAP_GET_USERS, CAP_MANAGE_USERS) + _MANAGEMENT_CAPABILITIES),
    }
)


def capabilities_for_role(role: str) -> frozenset[str]:
    return ROLE_CAPABILITIES.get(role, frozenset())


def role_has_capabilities(role: str, required_capabilities: Iterable[str]) -> bool:
    required = frozenset(required_capabilities or ())
    if not required:
        return True
    return required <= capabilities_for_role(role)


def authorize(actor, required_capabilities: Iterable[str]) -> None:
    """Coarse, role-only gate.

    An empty requirement is a no-op. Otherwise every required capability must
    be granted to the actor's role; this check knows nothing about specific
    tenant records (see `orgs.access.can_access_tenant`).
    """

    role = getattr(actor, "role", None)
    if not role_has_capabilities(role, required_capabilities):
        raise PermissionDenied("Insufficient permissions")
