"""Route persistence backed by a JSON file.

The store is the authority on the visibility policy: every read and write is
checked here, whatever the caller already decided.
"""

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Mapping, Optional

import pydantic

from .core.policy import authorize, can_create
from .core.query import visible_routes
from .core.routes import apply_patch, build_route, validate_draft, validate_patch
from .errors import AuthorizationError, NotFoundError, TransientIOError
from .models import Route, RouteDraft, RoutePatch

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RouteStore:
    def __init__(self, path: Optional[Path] = None, clock: Callable[[], datetime] = utcnow):
        self.path = Path(path) if path else None
        self.clock = clock
        self._routes: dict[str, Route] = {}
        if self.path is not None:
            self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            with open(self.path) as f:
                data = json.load(f)
            routes = [Route.model_validate(record) for record in data.get("routes", [])]
        except (json.JSONDecodeError, pydantic.ValidationError) as e:
            raise TransientIOError(f"Invalid route store at {self.path}: {e}") from e
        self._routes = {r.id: r for r in routes}
        logger.info("Loaded %d route(s) from %s", len(self._routes), self.path)

    def _save(self, routes: dict[str, Route]) -> None:
        if self.path is None:
            return
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        data = {"routes": [r.to_record() for r in routes.values()]}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise TransientIOError(f"Could not write route store {self.path}: {e}") from e

    def _commit(self, route: Route) -> None:
        """Persist ``route``; memory only changes once the write succeeded."""
        routes = {**self._routes, route.id: route}
        self._save(routes)
        self._routes = routes

    def _find(self, route_id: str, include_deleted: bool = False) -> Route:
        route = self._routes.get(route_id)
        if route is None or (route.is_deleted and not include_deleted):
            raise NotFoundError(route_id)
        return route

    def get(self, route_id: str, principal: str) -> Route:
        route = self._find(route_id)
        authorize("view", principal, route)
        return route

    def create(self, draft: Mapping | RouteDraft, principal: str) -> Route:
        if not can_create(principal):
            raise AuthorizationError("create", "(new)")
        route = build_route(validate_draft(draft), owner=principal, now=self.clock())
        self._commit(route)
        logger.info("Route %s created by %s", route.id, principal)
        return route

    def update(self, route_id: str, patch: Mapping | RoutePatch, principal: str) -> Route:
        route = self._find(route_id)
        authorize("update", principal, route)
        updated = apply_patch(route, validate_patch(patch), now=self.clock())
        self._commit(updated)
        logger.info("Route %s updated by %s", route_id, principal)
        return updated

    def soft_delete(self, route_id: str, principal: str) -> None:
        route = self._find(route_id)
        authorize("delete", principal, route)
        self._commit(route.model_copy(update={"deleted_at": self.clock()}))
        logger.info("Route %s deleted by %s", route_id, principal)

    def restore(self, route_id: str, principal: str) -> Route:
        route = self._find(route_id, include_deleted=True)
        if not route.is_deleted:
            raise NotFoundError(route_id)
        authorize("restore", principal, route)
        restored = route.model_copy(update={"deleted_at": None, "updated_at": self.clock()})
        self._commit(restored)
        logger.info("Route %s restored by %s", route_id, principal)
        return restored

    def list(self, principal: str) -> list[Route]:
        """Routes the principal may see, in insertion order."""
        return visible_routes(principal, self._routes.values())
