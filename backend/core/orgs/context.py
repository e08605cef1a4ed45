from contextvars import ContextVar, Token
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from orgs.identity import Actor


_current_org_id: ContextVar[Optional[str]] = ContextVar("current_org_id", default=None)
_current_actor: ContextVar[Optional["Actor"]] = ContextVar("current_actor", default=None)


def get_current_org_id() -> Optional[str]:
    return _current_org_id.get()


def set_current_org_id(org_id: Optional[str]) -> Token:
    return _current_org_id.set(org_id)


def reset_current_org_id(token: Token) -> None:
    _current_org_id.reset(token)


def get_current_actor() -> Optional["Actor"]:
    return _current_actor.get()


def set_current_actor(actor: Optional["Actor"]) -> Token:
    return _current_actor.set(actor)


def reset_current_actor(token: Token) -> None:
    _current_actor.reset(token)
