from rest_framework import serializers

from ledger.models import MAX_CREDIT_AMOUNT, CreditTransaction
from ledger.services import (
    ADJUST_TOO_LARGE_MESSAGE,
    AMOUNT_TOO_LARGE_MESSAGE,
    MAX_LEDGER_PAGE,
)


class CreditTransactionSerializer(serializers.ModelSerializer):
    orgId = serializers.CharField(source="org_id", read_only=True)
    tenantId = serializers.CharField(source="tenant_id", read_only=True)
    unitId = serializers.CharField(source="unit_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = CreditTransaction
        fields = (
            "id",
            "orgId",
            "tenantId",
            "unitId",
            "type",
            "amount",
            "memo",
            "createdAt",
        )
        read_only_fields = fields


class CreditAmountSerializer(serializers.Serializer):
    """Body of earn / redeem requests."""

    amount = serializers.IntegerField(
        min_value=1,
        max_value=MAX_CREDIT_AMOUNT,
        error_messages={
            "min_value": "Amount must be positive",
            "max_value": AMOUNT_TOO_LARGE_MESSAGE,
            "required": "Amount is required",
            "invalid": "Amount must be an integer",
        },
    )
    memo = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=500)


class AdjustCreditSerializer(serializers.Serializer):
    amount = serializers.IntegerField(
        min_value=-MAX_CREDIT_AMOUNT,
        max_value=MAX_CREDIT_AMOUNT,
        error_messages={
            "min_value": ADJUST_TOO_LARGE_MESSAGE,
            "max_value": ADJUST_TOO_LARGE_MESSAGE,
            "required": "Amount is required",
            "invalid": "Amount must be an integer",
        },
    )
    memo = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=500)

    def validate_amount(self, value):
        if value == 0:
            raise serializers.ValidationError("Amount must be a nonzero integer")
        return value


class LedgerQuerySerializer(serializers.Serializer):
    sortBy = serializers.CharField(required=False, allow_blank=True)
    limit = serializers.IntegerField(required=False, min_value=1)
    page = serializers.IntegerField(required=False, min_value=1, max_value=MAX_LEDGER_PAGE)
