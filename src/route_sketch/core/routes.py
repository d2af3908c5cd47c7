"""Validation and construction of routes from create/update payloads."""

import uuid
from datetime import datetime
from typing import Any, Mapping, Type, TypeVar

import pydantic

from route_sketch.core.geometry import route_distance
from route_sketch.errors import RouteValidationError
from route_sketch.models import LatLng, Route, RouteDraft, RoutePatch, Waypoint

M = TypeVar("M", bound=pydantic.BaseModel)


def _validate(model: Type[M], data: Any) -> M:
    if isinstance(data, model):
        return data
    if isinstance(data, pydantic.BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise RouteValidationError(first["msg"], field=field) from exc


def validate_draft(data: Mapping | RouteDraft) -> RouteDraft:
    """Validate a create payload. Rejects the whole write on any bad field."""
    return _validate(RouteDraft, data)


def validate_patch(data: Mapping | RoutePatch) -> RoutePatch:
    return _validate(RoutePatch, data)


def _waypoints_from(points: list[LatLng]) -> list[Waypoint]:
    return [
        Waypoint(id=i + 1, lat=p.lat, lng=p.lng, order=i)
        for i, p in enumerate(points)
    ]


def build_route(draft: RouteDraft, owner: str, now: datetime) -> Route:
    waypoints = _waypoints_from(draft.waypoints)
    total = draft.total_distance
    if total is None:
        total = route_distance(waypoints)
    return Route(
        id=uuid.uuid4().hex,
        owner=owner,
        name=draft.name,
        is_private=draft.is_private,
        total_distance=total,
        waypoints=waypoints,
        created_at=now,
        updated_at=now,
    )


def apply_patch(route: Route, patch: RoutePatch, now: datetime) -> Route:
    """Return a copy of ``route`` with the patch applied.

    A new waypoint set replaces the old one entirely. Distance is recomputed
    from it unless the patch carries its own.
    """
    update: dict[str, Any] = {"updated_at": now}
    if patch.name is not None:
        update["name"] = patch.name
    if patch.is_private is not None:
        update["is_private"] = patch.is_private
    if patch.waypoints is not None:
        update["waypoints"] = _waypoints_from(patch.waypoints)
        update["total_distance"] = route_distance(update["waypoints"])
    if patch.total_distance is not None:
        update["total_distance"] = patch.total_distance
    return route.model_copy(update=update)
