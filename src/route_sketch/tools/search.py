"""Place lookup tools: geocode_place, search_routes.

Both may have several lookups in flight; only the newest response is applied.
"""

import json
import logging

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..core.geocode import geocode
from ..core.query import ListQuery, list_routes
from ..errors import TransientIOError
from ..models import RouteSummary
from ..state import SessionState
from ._prereqs import require_state

logger = logging.getLogger(__name__)


def register_search_tools(mcp: FastMCP, state: SessionState):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True))
    async def geocode_place(query: str) -> str:
        """Find a place by name and center the map on it.

        **Next:** add_waypoint near the returned coordinates, or search_routes.

        Args:
            query: Place name (e.g., "Rizal Park, Manila").
        """
        if not query.strip():
            return "Error: Give a place name to look up."

        seq = state.map_center.begin()
        try:
            location = await geocode(query, state.settings)
        except TransientIOError as e:
            location, error = None, e
        else:
            error = None

        if state.map_center.superseded(seq):
            return f"Ignored result for '{query}': a newer lookup already applied."
        if error is not None:
            return f"Error: {error}. Try again."
        if location is None:
            return f"Location not found: '{query}'."
        if not state.map_center.offer(seq, location):
            return f"Ignored result for '{query}': a newer lookup already applied."
        return f"Map centered on '{query}' at {location.lat:.5f}, {location.lng:.5f}."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True, openWorldHint=True))
    async def search_routes(
        query: str,
        sort_key: str = "created_at",
        sort_order: str = "asc",
        secondary_sort_key: str = "",
        secondary_sort_order: str = "asc",
    ) -> str:
        """Search visible routes by name or by place.

        A route matches if its name contains the query (case-insensitive) OR any
        of its waypoints lies within the search radius (default 5 km) of the
        place the query geocodes to.

        Args:
            query: Text to match against names and to geocode.
            sort_key: "created_at", "total_distance", or "".
            sort_order: "asc" or "desc".
            secondary_sort_key: Tie-breaking key, or "".
            secondary_sort_order: "asc" or "desc".
        """
        try:
            require_state(state, principal=True)
            list_query = ListQuery(
                primary_sort_key=sort_key,
                primary_order=sort_order,
                secondary_sort_key=secondary_sort_key,
                secondary_order=secondary_sort_order,
                search=query,
            )
        except ValueError as e:
            return f"Error: {e}"
        if not list_query.search:
            return "Error: Give a search term."

        seq = state.route_search.begin()
        warning = None
        try:
            location = await geocode(list_query.search, state.settings)
        except TransientIOError as e:
            logger.warning("Proximity search skipped: %s", e)
            location = None
            warning = f"Place lookup failed ({e}); showing name matches only."

        principal = state.principal_id
        routes = list_routes(
            principal,
            state.store.list(principal),
            list_query,
            location=location,
            radius_km=state.settings.search_radius_km,
        )
        if not state.route_search.offer(seq, routes):
            return f"Ignored results for '{query}': a newer search already applied."

        result = {
            "query": list_query.search,
            "location": location.model_dump() if location else None,
            "routes": [RouteSummary.from_route(r).model_dump(mode="json") for r in routes],
        }
        if warning:
            result["warning"] = warning
        return json.dumps(result, indent=2)
