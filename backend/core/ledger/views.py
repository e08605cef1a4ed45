from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from ledger.serializers import (
    AdjustCreditSerializer,
    CreditAmountSerializer,
    CreditTransactionSerializer,
    LedgerQuerySerializer,
)
from ledger.services import (
    adjust_credit,
    earn_credit,
    get_tenant_balance,
    get_tenant_ledger,
    redeem_credit,
)
from orgs.permissions import CanAccessTenant, HasCapabilities, IsIdentified
from orgs.rbac import CAP_MANAGE_CREDITS


class _CreditWriteAPIView(APIView):
    input_serializer_class = CreditAmountSerializer
    operation = None

    def post(self, request, tenant_id):
        serializer = self.input_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = type(self).operation(
            request.org_id,
            tenant_id,
            serializer.validated_data["amount"],
            serializer.validated_data.get("memo"),
        )
        return Response(CreditTransactionSerializer(entry).data, status=status.HTTP_201_CREATED)


class EarnCreditAPIView(_CreditWriteAPIView):
    permission_classes = [IsIdentified, HasCapabilities]
    required_capabilities = (CAP_MANAGE_CREDITS,)
    operation = earn_credit


class AdjustCreditAPIView(_CreditWriteAPIView):
    permission_classes = [IsIdentified, HasCapabilities]
    required_capabilities = (CAP_MANAGE_CREDITS,)
    input_serializer_class = AdjustCreditSerializer
    operation = adjust_credit


class RedeemCreditAPIView(_CreditWriteAPIView):
    # Tenants redeem for themselves; management may redeem on their behalf.
    permission_classes = [IsIdentified, CanAccessTenant]
    operation = redeem_credit


class TenantBalanceAPIView(APIView):
    permission_classes = [IsIdentified, CanAccessTenant]

    def get(self, request, tenant_id):
        return Response({"balance": get_tenant_balance(request.org_id, tenant_id)})


class TenantLedgerAPIView(APIView):
    permission_classes = [IsIdentified, CanAccessTenant]

    def get(self, request, tenant_id):
        query = LedgerQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        page = get_tenant_ledger(
            request.org_id,
            tenant_id,
            sort_by=query.validated_data.get("sortBy"),
            limit=query.validated_data.get("limit"),
            page=query.validated_data.get("page"),
        )
        return Response(
            {
                "results": CreditTransactionSerializer(page.results, many=True).data,
                "page": page.page,
                "limit": page.limit,
                "totalPages": page.total_pages,
                "totalResults": page.total_results,
            }
        )
