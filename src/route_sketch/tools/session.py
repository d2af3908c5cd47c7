"""Identity and status tools: sign_in, sign_out, get_status."""

import json
import logging

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..state import Principal, SessionState

logger = logging.getLogger(__name__)


def register_session_tools(mcp: FastMCP, state: SessionState):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def sign_in(user_id: str, token: str | None = None) -> str:
        """Act as the given user for all following route operations.

        Any edit in progress is discarded, since it belonged to the previous user.
        **Next:** list_routes, or new_route to start sketching.

        Args:
            user_id: Principal id issued by the identity provider.
            token: Optional bearer credential, passed through untouched.
        """
        try:
            state.principal = Principal(id=user_id.strip(), credential=token)
        except ValidationError:
            return "Error: user_id must not be empty."
        state.editor = None
        logger.info("Signed in as %s", state.principal.id)
        return f"Signed in as {state.principal.id}."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def sign_out() -> str:
        """Forget the current user and discard any edit in progress."""
        if state.principal is None:
            return "Not signed in."
        previous = state.principal.id
        state.principal = None
        state.editor = None
        return f"Signed out {previous}."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def get_status() -> str:
        """Return a summary of the current session.

        Shows the signed-in user, the route being edited (distance, undo/redo
        availability), and the current map center.
        """
        return json.dumps(state.summary(), indent=2)
