from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError
from rest_framework.exceptions import ValidationError

from orgs.exceptions import flatten_error_detail
from tenants.serializers import TenantProvisionSerializer
from tenants.services import create_tenant


class Command(BaseCommand):
    help = "Provision a tenant profile inside an org (operator tool)."

    def add_arguments(self, parser):
        parser.add_argument("--org", required=True, dest="org_id")
        parser.add_argument("--unit", required=True, dest="unit_id")
        parser.add_argument("--user", required=True, dest="user_id")
        parser.add_argument("--name", required=True)
        parser.add_argument("--email", required=True)

    def handle(self, *args, **options):
        serializer = TenantProvisionSerializer(
            data={
                "orgId": options["org_id"],
                "unitId": options["unit_id"],
                "userId": options["user_id"],
                "name": options["name"],
                "email": options["email"],
            }
        )
        if not serializer.is_valid():
            raise CommandError(flatten_error_detail(serializer.errors))

        data = serializer.validated_data
        try:
            tenant = create_tenant(
                data["orgId"],
                data["unitId"],
                user_id=data["userId"],
                name=data["name"],
                email=data["email"],
            )
        except ValidationError as exc:
            raise CommandError(flatten_error_detail(exc.detail)) from exc

        self.stdout.write(
            self.style.SUCCESS(f"provision_tenant: id={tenant.pk} org={tenant.org_id}")
        )
