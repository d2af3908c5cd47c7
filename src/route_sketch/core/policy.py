"""Who may do what to a route.

One pure function per capability taking (principal id, route). The owner may
do everything; anyone may view a public route; any authenticated principal may
create. There are no shared or admin roles.
"""

from typing import Callable, Literal, Optional

from route_sketch.errors import AuthorizationError
from route_sketch.models import Route

Capability = Literal["view", "create", "update", "delete", "restore"]


def _is_owner(principal: str, route: Route) -> bool:
    return route.owner == principal


def can_view(principal: str, route: Route) -> bool:
    return _is_owner(principal, route) or not route.is_private


def can_create(principal: str, route: Optional[Route] = None) -> bool:
    return bool(principal)


def can_update(principal: str, route: Route) -> bool:
    return _is_owner(principal, route)


def can_delete(principal: str, route: Route) -> bool:
    return _is_owner(principal, route)


def can_restore(principal: str, route: Route) -> bool:
    return _is_owner(principal, route)


RULES: dict[str, Callable[[str, Optional[Route]], bool]] = {
    "view": can_view,
    "create": can_create,
    "update": can_update,
    "delete": can_delete,
    "restore": can_restore,
}


def can(capability: Capability, principal: str, route: Optional[Route] = None) -> bool:
    try:
        rule = RULES[capability]
    except KeyError:
        raise ValueError(f"Unknown capability '{capability}'") from None
    return rule(principal, route)


def authorize(capability: Capability, principal: str, route: Route) -> None:
    """Raise AuthorizationError unless the principal holds the capability."""
    if not can(capability, principal, route):
        raise AuthorizationError(capability, route.id)
