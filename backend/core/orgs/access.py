from orgs.rbac import ROLE_TENANT


def can_access_tenant(actor, target_tenant_id) -> bool:
    """Fine-grained gate for self-service tenant endpoints.

    Management roles pass here; org-boundary enforcement happens in the
    tenant lookup, not in this check. A tenant-role actor may only act on
    their own tenant id.
    """

    if actor is None:
        return False

    if actor.is_management:
        return True

    return actor.role == ROLE_TENANT and actor.id == str(target_tenant_id)
