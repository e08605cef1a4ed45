from rest_framework import serializers

from tenants.models import Tenant


class TenantSerializer(serializers.ModelSerializer):
    orgId = serializers.CharField(source="org_id", read_only=True)
    unitId = serializers.CharField(source="unit_id", read_only=True)
    userId = serializers.CharField(source="user_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Tenant
        fields = (
            "id",
            "orgId",
            "unitId",
            "userId",
            "name",
            "email",
            "createdAt",
        )
        read_only_fields = fields


class TenantProvisionSerializer(serializers.Serializer):
    orgId = serializers.CharField(max_length=64)
    unitId = serializers.CharField(max_length=64)
    userId = serializers.CharField(max_length=128)
    name = serializers.CharField(max_length=200)
    email = serializers.EmailField()
