from django.db import models

from orgs.context import get_current_org_id


class OrgScopedQuerySet(models.QuerySet):
    def get_in_org(self, org_id, **lookup):
        """Fetch one row by `lookup` inside `org_id`.

        A row that exists in another org raises `DoesNotExist` exactly like a
        row that does not exist at all.
        """

        if not org_id:
            raise self.model.DoesNotExist(f"{self.model._meta.object_name} matching query does not exist.")
        return self.get(org_id=org_id, **lookup)


class OrgScopedManager(models.Manager.from_queryset(OrgScopedQuerySet)):
    def get_queryset(self):
        queryset = super().get_queryset()
        org_id = get_current_org_id()
        if org_id is None:
            return queryset.none()
        return queryset.filter(org_id=org_id)
