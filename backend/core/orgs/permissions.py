import logging

from rest_framework import status
from rest_framework.exceptions import APIException, PermissionDenied
from rest_framework.permissions import BasePermission

from orgs.access import can_access_tenant
from orgs.rbac import authorize

logger = logging.getLogger(__name__)


class IdentityRequired(APIException):
    # DRF downgrades `NotAuthenticated` to 403 when no authenticator is configured.
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "User not authenticated"
    default_code = "not_authenticated"


def _request_actor(request):
    return getattr(request, "actor", None)


class IsIdentified(BasePermission):
    """Requires the identity bound by `orgs.middleware.IdentityContextMiddleware`."""

    def has_permission(self, request, view):
        if _request_actor(request) is None or not getattr(request, "org_id", None):
            raise IdentityRequired()
        return True


class HasCapabilities(BasePermission):
    """Role capability gate driven by `view.required_capabilities`."""

    message = "Insufficient permissions"

    def has_permission(self, request, view):
        actor = _request_actor(request)
        if actor is None:
            return False

        required = getattr(view, "required_capabilities", ())
        try:
            authorize(actor, required)
        except PermissionDenied:
            logger.warning(
                "capability check denied",
                extra={
                    "correlation_id": getattr(request, "correlation_id", None),
                    "actor_id": actor.id,
                    "role": actor.role,
                    "required": sorted(required),
                },
            )
            return False
        return True


class CanAccessTenant(BasePermission):
    """Self-or-management gate on the tenant id taken from the URL."""

    message = "Forbidden"

    def has_permission(self, request, view):
        actor = _request_actor(request)
        lookup_kwarg = getattr(view, "tenant_lookup_kwarg", "tenant_id")
        tenant_id = view.kwargs.get(lookup_kwarg)

        allowed = can_access_tenant(actor, tenant_id)
        if not allowed:
            logger.warning(
                "tenant access denied",
                extra={
                    "correlation_id": getattr(request, "correlation_id", None),
                    "actor_id": getattr(actor, "id", None),
                    "role": getattr(actor, "role", None),
                    "tenant_id": tenant_id,
                },
            )
        return allowed
