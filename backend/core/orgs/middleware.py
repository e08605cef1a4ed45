import logging
import uuid

from django.conf import settings
from django.http import JsonResponse

from orgs.context import (
    reset_current_actor,
    reset_current_org_id,
    set_current_actor,
    set_current_org_id,
)
from orgs.identity import Unauthenticated, resolve_identity


class IdentityContextMiddleware:
    """Resolves the caller identity triple and binds the org scope.

    Rules:
    - Paths under `IDENTITY_REQUIRED_PATH_PREFIXES` must carry actor id, org id
      and role headers; anything missing or an unknown role yields 401.
    - The resolved actor and org id are exposed as `request.actor` /
      `request.org_id` and through `orgs.context` for the lifetime of the request.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.logger = logging.getLogger(__name__)
        self.user_header = getattr(settings, "IDENTITY_USER_HEADER", "X-User-ID")
        self.org_header = getattr(settings, "IDENTITY_ORG_HEADER", "X-Org-ID")
        self.role_header = getattr(settings, "IDENTITY_ROLE_HEADER", "X-Role")
        self.required_path_prefixes = tuple(
            getattr(settings, "IDENTITY_REQUIRED_PATH_PREFIXES", ["/v1/"])
        )

    def __call__(self, request):
        request.correlation_id = self._resolve_correlation_id(request)
        request.actor = None
        request.org_id = None

        if not request.path.startswith(self.required_path_prefixes):
            return self._with_correlation(request, self.get_response(request))

        try:
            actor, org_id = resolve_identity(
                request.headers.get(self.user_header),
                request.headers.get(self.org_header),
                request.headers.get(self.role_header),
            )
        except Unauthenticated as exc:
            self.logger.warning(
                "identity rejected",
                extra={
                    "correlation_id": request.correlation_id,
                    "path": request.path,
                    "reason": str(exc),
                },
            )
            return self._with_correlation(request, JsonResponse({"message": str(exc)}, status=401))

        request.actor = actor
        request.org_id = org_id
        org_token = set_current_org_id(org_id)
        actor_token = set_current_actor(actor)
        try:
            return self._with_correlation(request, self.get_response(request))
        finally:
            reset_current_actor(actor_token)
            reset_current_org_id(org_token)

    @staticmethod
    def _with_correlation(request, response):
        response["X-Correlation-ID"] = request.correlation_id
        return response

    @staticmethod
    def _resolve_correlation_id(request) -> str:
        header_value = (request.headers.get("X-Correlation-ID", "") or "").strip()
        return header_value or str(uuid.uuid4())
