from dataclasses import dataclass
from typing import Optional

from orgs.rbac import MANAGEMENT_ROLES, VALID_ROLES


class Unauthenticated(Exception):
    """The inbound identity triple is incomplete or carries an unknown role."""


@dataclass(frozen=True)
class Actor:
    """Caller identity asserted by the upstream identity system.

    Not persisted; built per request from a pre-verified triple.
    """

    id: str
    role: str

    @property
    def is_management(self) -> bool:
        return self.role in MANAGEMENT_ROLES


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def resolve_identity(
    actor_id: Optional[str],
    org_id: Optional[str],
    role: Optional[str],
) -> tuple[Actor, str]:
    """Validate the raw identity triple and return `(actor, org_id)`.

    Fails closed: there is no default role.
    """

    actor_id = _clean(actor_id)
    org_id = _clean(org_id)
    role = _clean(role)

    if not actor_id or not org_id or not role:
        raise Unauthenticated("Missing required auth headers: x-user-id, x-org-id, x-role")

    if role not in VALID_ROLES:
        raise Unauthenticated("Invalid role. Must be: tenant, landlord, or admin")

    return Actor(id=actor_id, role=role), org_id
