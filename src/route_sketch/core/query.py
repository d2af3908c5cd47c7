"""Listing routes: visibility filter, two-tier sort, name/proximity search."""

import logging
from typing import Iterable, Literal, Optional

from pydantic import BaseModel, model_validator

from route_sketch.core.geometry import within_km
from route_sketch.core.policy import can_view
from route_sketch.models import LatLng, Route

logger = logging.getLogger(__name__)

SortKey = Literal["created_at", "total_distance", ""]
SortOrder = Literal["asc", "desc"]

DEFAULT_SEARCH_RADIUS_KM = 5.0


class ListQuery(BaseModel):
    primary_sort_key: SortKey = "created_at"
    primary_order: SortOrder = "asc"
    secondary_sort_key: SortKey = ""
    secondary_order: SortOrder = "asc"
    search: Optional[str] = None

    @model_validator(mode="after")
    def clear_duplicate_tier(self) -> "ListQuery":
        # The same key can't drive both tiers; the secondary one gives way.
        if self.primary_sort_key and self.primary_sort_key == self.secondary_sort_key:
            logger.info(
                "Secondary sort key %r duplicates the primary key; clearing it",
                self.secondary_sort_key,
            )
            self.secondary_sort_key = ""
        if self.search is not None:
            self.search = self.search.strip() or None
        return self

    @property
    def tiers(self) -> list[tuple[str, str]]:
        return [
            (key, order)
            for key, order in (
                (self.primary_sort_key, self.primary_order),
                (self.secondary_sort_key, self.secondary_order),
            )
            if key
        ]


def _sort_value(route: Route, key: str):
    value = getattr(route, key)
    # Missing distances sort as the smallest value.
    if value is None:
        return (0, 0.0)
    return (1, value)


def visible_routes(principal: str, routes: Iterable[Route]) -> list[Route]:
    """Routes the principal may view, soft-deleted ones excluded."""
    return [r for r in routes if not r.is_deleted and can_view(principal, r)]


def sort_routes(routes: Iterable[Route], query: ListQuery) -> list[Route]:
    """Stable two-tier sort; retrieval order breaks remaining ties."""
    ordered = list(routes)
    # Least significant tier first; stability keeps its order within equal
    # primary values.
    for key, order in reversed(query.tiers):
        ordered.sort(key=lambda r: _sort_value(r, key), reverse=(order == "desc"))
    return ordered


def matches_name(route: Route, term: str) -> bool:
    return term.casefold() in route.name.casefold()


def search_routes(
    routes: Iterable[Route],
    term: Optional[str],
    location: Optional[LatLng] = None,
    radius_km: float = DEFAULT_SEARCH_RADIUS_KM,
) -> list[Route]:
    """Name matches OR routes passing within ``radius_km`` of ``location``.

    Input order is kept and each route appears once.
    """
    results = []
    seen = set()
    for route in routes:
        if route.id in seen:
            continue
        hit = bool(term) and matches_name(route, term)
        if not hit and location is not None:
            hit = within_km(location, route.waypoints, radius_km)
        if hit:
            seen.add(route.id)
            results.append(route)
    return results


def list_routes(
    principal: str,
    routes: Iterable[Route],
    query: Optional[ListQuery] = None,
    location: Optional[LatLng] = None,
    radius_km: float = DEFAULT_SEARCH_RADIUS_KM,
) -> list[Route]:
    query = query or ListQuery()
    ordered = sort_routes(visible_routes(principal, routes), query)
    if query.search or location is not None:
        ordered = search_routes(ordered, query.search, location, radius_km)
    return ordered
