from django.core.exceptions import ValidationError
from django.db import models

from orgs.context import get_current_org_id
from orgs.managers import OrgScopedManager, OrgScopedQuerySet


class BaseOrgModel(models.Model):
    """Row stamped with the org it belongs to.

    The stamp is set once at creation and can never change afterwards.
    """

    org_id = models.CharField(max_length=64, db_index=True)

    objects = OrgScopedManager()
    all_objects = OrgScopedQuerySet.as_manager()

    class Meta:
        abstract = True

    def _enforce_org_scope(self):
        current_org_id = get_current_org_id()

        if not self.org_id and current_org_id is not None:
            self.org_id = current_org_id

        if not self.org_id:
            raise ValidationError("org_id is required.")

        if current_org_id is not None and self.org_id != current_org_id:
            raise ValidationError(
                "Cross-org write blocked: resource org does not match request org."
            )

        if not self._state.adding:
            stored_org_id = (
                type(self).all_objects.filter(pk=self.pk).values_list("org_id", flat=True).first()
            )
            if stored_org_id is not None and stored_org_id != self.org_id:
                raise ValidationError("org_id is immutable once stamped.")

    def save(self, *args, **kwargs):
        self._enforce_org_scope()
        return super().save(*args, **kwargs)
