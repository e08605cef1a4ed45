from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, ValidationError

from tenants.models import Tenant

logger = logging.getLogger(__name__)


def get_tenant_by_id(tenant_id: str, org_id: str) -> Tenant:
    """Resolve a tenant inside the caller's org.

    Absence and org mismatch produce the same `NotFound` so a cross-org caller
    cannot probe for records that live in other orgs.
    """

    try:
        return Tenant.all_objects.get_in_org(org_id, pk=str(tenant_id))
    except Tenant.DoesNotExist:
        logger.info(
            "tenant not found in org",
            extra={"tenant_id": str(tenant_id), "org_id": org_id},
        )
        raise NotFound("Tenant not found")


def get_tenant_by_user_id(user_id: str, org_id: str) -> Tenant:
    try:
        return Tenant.all_objects.get_in_org(org_id, user_id=user_id)
    except Tenant.DoesNotExist:
        raise NotFound("Tenant profile not found")


def create_tenant(
    org_id: str,
    unit_id: str,
    *,
    user_id: str,
    name: str,
    email: str,
) -> Tenant:
    """Provision a tenant profile stamped with `org_id`."""

    if Tenant.all_objects.filter(user_id=user_id).exists():
        raise ValidationError("User already has a tenant profile")

    normalized_email = (email or "").strip().lower()
    if Tenant.all_objects.filter(org_id=org_id, email=normalized_email).exists():
        raise ValidationError({"email": ["Email already belongs to a tenant in this org"]})

    try:
        with transaction.atomic():
            tenant = Tenant.all_objects.create(
                org_id=org_id,
                unit_id=unit_id,
                user_id=user_id,
                name=name,
                email=normalized_email,
            )
    except IntegrityError as exc:
        # Lost a race against a concurrent provisioning of the same user or e-mail.
        raise ValidationError("User already has a tenant profile") from exc

    logger.info(
        "tenant provisioned",
        extra={"tenant_id": tenant.pk, "org_id": org_id, "unit_id": unit_id},
    )
    return tenant
