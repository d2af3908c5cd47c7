"""Waypoint editing tools with undo/redo, and saving the result."""

import logging

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..core.geometry import round_km
from ..core.gpx import parse_gpx_points
from ..core.policy import authorize
from ..errors import RouteError
from ..models import LatLng
from ..state import EditSession, SessionState
from ._prereqs import require_state

logger = logging.getLogger(__name__)


def _describe(session: EditSession) -> str:
    history = session.history
    return (
        f"{len(history)} waypoint(s), {round_km(session.distance_km):.2f} km. "
        f"Undo: {'yes' if history.can_undo else 'no'}, "
        f"redo: {'yes' if history.can_redo else 'no'}."
    )


def register_editor_tools(mcp: FastMCP, state: SessionState):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def new_route(name: str = "", is_private: bool = True) -> str:
        """Start sketching a new route with no waypoints.

        Discards any edit in progress.
        **Requires:** sign_in first.
        **Next:** add_waypoint (at least twice), then save_route.

        Args:
            name: Route name (can also be given to save_route).
            is_private: Keep the route visible only to you (default True).
        """
        try:
            require_state(state, principal=True)
        except ValueError as e:
            return f"Error: {e}"

        state.editor = EditSession(name=name.strip(), is_private=is_private)
        return "New route started. " + _describe(state.editor)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def edit_route(route_id: str) -> str:
        """Load one of your saved routes for editing.

        Starts a fresh undo history; any edit in progress is discarded.
        **Requires:** sign_in first. Only the owner may edit a route.
        **Next:** add_waypoint / remove_waypoint / move_waypoint, then save_route.

        Args:
            route_id: Id of the route (see list_routes).
        """
        try:
            require_state(state, principal=True)
            route = state.store.get(route_id, state.principal_id)
            authorize("update", state.principal_id, route)
        except (RouteError, ValueError) as e:
            return f"Error: {e}"

        state.editor = EditSession.for_route(route)
        return f"Editing '{route.name}'. " + _describe(state.editor)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def add_waypoint(lat: float, lng: float) -> str:
        """Append a waypoint to the end of the route being edited.

        **Requires:** new_route or edit_route first.

        Args:
            lat: Latitude in degrees, -90 to 90.
            lng: Longitude in degrees, -180 to 180.
        """
        try:
            require_state(state, editor=True)
            point = LatLng(lat=lat, lng=lng)
        except ValueError as e:
            return f"Error: {e}"

        wp = state.editor.history.add(point)
        return f"Waypoint {wp.id} added at position {wp.order}. " + _describe(state.editor)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def remove_waypoint(waypoint_id: int) -> str:
        """Remove a waypoint; the remaining ones are renumbered in order.

        Args:
            waypoint_id: Id shown by add_waypoint or get_status.
        """
        try:
            require_state(state, editor=True)
        except ValueError as e:
            return f"Error: {e}"

        if not state.editor.history.remove(waypoint_id):
            return f"Error: No waypoint with id {waypoint_id}."
        return f"Waypoint {waypoint_id} removed. " + _describe(state.editor)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def move_waypoint(waypoint_id: int, lat: float, lng: float) -> str:
        """Move an existing waypoint to new coordinates, keeping its position in the route.

        Args:
            waypoint_id: Id of the waypoint to move.
            lat: New latitude in degrees.
            lng: New longitude in degrees.
        """
        try:
            require_state(state, editor=True)
            point = LatLng(lat=lat, lng=lng)
        except ValueError as e:
            return f"Error: {e}"

        if not state.editor.history.move(waypoint_id, point):
            return f"Error: No waypoint with id {waypoint_id}."
        return f"Waypoint {waypoint_id} moved. " + _describe(state.editor)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def clear_waypoints() -> str:
        """Remove every waypoint. Can be undone."""
        try:
            require_state(state, editor=True)
        except ValueError as e:
            return f"Error: {e}"

        state.editor.history.clear()
        return "Waypoints cleared. " + _describe(state.editor)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def undo() -> str:
        """Revert the last waypoint edit."""
        try:
            require_state(state, editor=True)
        except ValueError as e:
            return f"Error: {e}"

        if not state.editor.history.undo():
            return "Nothing to undo. " + _describe(state.editor)
        return "Undone. " + _describe(state.editor)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def redo() -> str:
        """Re-apply the last undone edit. Unavailable once a new edit is made."""
        try:
            require_state(state, editor=True)
        except ValueError as e:
            return f"Error: {e}"

        if not state.editor.history.redo():
            return "Nothing to redo. " + _describe(state.editor)
        return "Redone. " + _describe(state.editor)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def import_gpx(file_path: str) -> str:
        """Replace the edited waypoints with the points of a GPX file.

        Uses track points, else route points, else waypoints. Can be undone.
        **Requires:** new_route or edit_route first.

        Args:
            file_path: Absolute path to a .gpx file.
        """
        try:
            require_state(state, editor=True)
            points = parse_gpx_points(file_path)
        except (RouteError, ValueError, OSError) as e:
            return f"Error: {e}"

        if not points:
            return "Error: GPX file has no track, route or waypoint data."
        state.editor.history.replace(points)
        return f"Imported {len(points)} point(s) from {file_path}. " + _describe(state.editor)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def save_route(name: str | None = None, is_private: bool | None = None) -> str:
        """Save the route being edited (creates it if it is new).

        Needs at least 2 waypoints. The distance is computed from the waypoints.
        Editing continues on the saved route with a fresh undo history.

        Args:
            name: Route name; defaults to the name given to new_route/edit_route.
            is_private: Override the privacy setting.
        """
        try:
            require_state(state, principal=True, editor=True)
        except ValueError as e:
            return f"Error: {e}"

        session = state.editor
        payload = {
            "name": name if name is not None else session.name,
            "is_private": is_private if is_private is not None else session.is_private,
            "waypoints": [p.model_dump() for p in session.history.positions()],
            "total_distance": session.distance_km,
        }
        try:
            if session.route_id is None:
                route = state.store.create(payload, state.principal_id)
                verb = "created"
            else:
                route = state.store.update(session.route_id, payload, state.principal_id)
                verb = "updated"
        except (RouteError, ValueError) as e:
            return f"Error: {e}"

        state.editor = EditSession.for_route(route)
        return (
            f"Route '{route.name}' {verb} (id {route.id}, "
            f"{'private' if route.is_private else 'public'}, "
            f"{round_km(route.total_distance or 0.0):.2f} km)."
        )

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def discard_edits() -> str:
        """Throw away the edit in progress, including its undo history."""
        if state.editor is None:
            return "No edit in progress."
        state.editor = None
        return "Edits discarded."
