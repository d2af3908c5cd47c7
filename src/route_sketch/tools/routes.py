"""Saved-route tools: list, get, update, delete, restore, export."""

import json
import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..core.gpx import route_to_gpx
from ..core.query import ListQuery, list_routes as query_routes
from ..errors import RouteError
from ..models import RouteSummary
from ..state import SessionState
from ._prereqs import require_state

logger = logging.getLogger(__name__)


def summaries_json(routes) -> str:
    return json.dumps(
        [RouteSummary.from_route(r).model_dump(mode="json") for r in routes],
        indent=2,
    )


def register_route_tools(mcp: FastMCP, state: SessionState):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def list_routes(
        sort_key: str = "created_at",
        sort_order: str = "asc",
        secondary_sort_key: str = "",
        secondary_sort_order: str = "asc",
        name_contains: str | None = None,
    ) -> str:
        """List your routes and everyone's public routes.

        Sort keys: "created_at", "total_distance", or "" for none. The secondary
        key breaks ties in the primary one and is ignored if it repeats it.
        For place-based search use search_routes.

        Args:
            sort_key: Primary sort key (default "created_at").
            sort_order: "asc" or "desc".
            secondary_sort_key: Tie-breaking key, or "" for none.
            secondary_sort_order: "asc" or "desc".
            name_contains: Only routes whose name contains this (case-insensitive).
        """
        try:
            require_state(state, principal=True)
            query = ListQuery(
                primary_sort_key=sort_key,
                primary_order=sort_order,
                secondary_sort_key=secondary_sort_key,
                secondary_order=secondary_sort_order,
                search=name_contains,
            )
        except ValueError as e:
            return f"Error: {e}"

        routes = query_routes(state.principal_id, state.store.list(state.principal_id), query)
        return summaries_json(routes)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def get_route(route_id: str) -> str:
        """Return a route with all of its waypoints as JSON.

        Errors if the route does not exist, was deleted, or is someone else's
        private route.

        Args:
            route_id: Id of the route.
        """
        try:
            require_state(state, principal=True)
            route = state.store.get(route_id, state.principal_id)
        except (RouteError, ValueError) as e:
            return f"Error: {e}"
        return json.dumps(route.to_record(), indent=2)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def update_route(route_id: str, name: str | None = None, is_private: bool | None = None) -> str:
        """Rename a route or change its privacy. Owner only.

        To change waypoints use edit_route, then save_route.

        Args:
            route_id: Id of the route.
            name: New name (1-255 characters).
            is_private: True to hide from other users, False to share.
        """
        patch = {k: v for k, v in {"name": name, "is_private": is_private}.items() if v is not None}
        if not patch:
            return "Error: Give a name or is_private to change."
        try:
            require_state(state, principal=True)
            route = state.store.update(route_id, patch, state.principal_id)
        except (RouteError, ValueError) as e:
            return f"Error: {e}"
        return (
            f"Route {route.id} updated: '{route.name}', "
            f"{'private' if route.is_private else 'public'}."
        )

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def delete_route(route_id: str) -> str:
        """Delete one of your routes. It can be brought back with restore_route.

        Args:
            route_id: Id of the route.
        """
        try:
            require_state(state, principal=True)
            state.store.soft_delete(route_id, state.principal_id)
        except (RouteError, ValueError) as e:
            return f"Error: {e}"
        if state.editor and state.editor.route_id == route_id:
            state.editor = None
        return f"Route {route_id} deleted. Use restore_route to undo."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def restore_route(route_id: str) -> str:
        """Bring back a route you deleted.

        Args:
            route_id: Id of the deleted route.
        """
        try:
            require_state(state, principal=True)
            route = state.store.restore(route_id, state.principal_id)
        except (RouteError, ValueError) as e:
            return f"Error: {e}"
        return f"Route '{route.name}' restored."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def export_gpx(route_id: str, path: str | None = None) -> str:
        """Export a route as GPX.

        Args:
            route_id: Id of a route you can view.
            path: File to write. If omitted the GPX XML is returned.
        """
        try:
            require_state(state, principal=True)
            route = state.store.get(route_id, state.principal_id)
        except (RouteError, ValueError) as e:
            return f"Error: {e}"

        xml = route_to_gpx(route)
        if path is None:
            return xml
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(xml)
        logger.info("Route %s exported to %s", route_id, out)
        return f"Exported '{route.name}' to {out}"
