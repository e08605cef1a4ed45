from rest_framework.response import Response
from rest_framework.views import APIView

from orgs.permissions import HasCapabilities, IsIdentified
from orgs.rbac import CAP_GET_OWN_PROFILE
from tenants.serializers import TenantSerializer
from tenants.services import get_tenant_by_user_id


class TenantMeAPIView(APIView):
    """Caller's own tenant profile, looked up by user id inside the caller's org."""

    permission_classes = [IsIdentified, HasCapabilities]
    required_capabilities = (CAP_GET_OWN_PROFILE,)

    def get(self, request):
        tenant = get_tenant_by_user_id(request.actor.id, request.org_id)
        return Response(TenantSerializer(tenant).data)
