import uuid

from django.db import models

from orgs.models import BaseOrgModel


def _new_tenant_id() -> str:
    return uuid.uuid4().hex


class Tenant(BaseOrgModel):
    """Renter profile bound to one unit and one org.

    One profile per external user id across the whole system.
    """

    id = models.CharField(primary_key=True, max_length=64, default=_new_tenant_id, editable=False)
    unit_id = models.CharField(max_length=64, db_index=True)
    user_id = models.CharField(max_length=128, unique=True)
    name = models.CharField(max_length=200)
    email = models.EmailField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("name",)
        constraints = [
            models.UniqueConstraint(
                fields=("org_id", "email"),
                name="uq_tenant_org_email",
            ),
        ]
        indexes = [
            models.Index(fields=("org_id", "unit_id"), name="idx_tenant_org_unit"),
        ]
        verbose_name = "Tenant"
        verbose_name_plural = "Tenants"

    def __str__(self):
        return f"{self.name} [{self.org_id}/{self.unit_id}]"

    def save(self, *args, **kwargs):
        self.name = (self.name or "").strip()
        self.email = (self.email or "").strip().lower()
        return super().save(*args, **kwargs)
