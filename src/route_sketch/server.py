"""MCP server for route-sketch.

Registers all tools and runs via stdio transport.
"""

import json
import logging
import sys
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .config import Settings
from .state import SessionState
from .tools.editor import register_editor_tools
from .tools.routes import register_route_tools
from .tools.search import register_search_tools
from .tools.session import register_session_tools


def create_server(state: SessionState) -> FastMCP:
    server = FastMCP(
        "route-sketch",
        instructions="Sketch routes as ordered waypoints, measure them, and share or keep them private",
    )

    register_session_tools(server, state)
    register_editor_tools(server, state)
    register_route_tools(server, state)
    register_search_tools(server, state)

    @server.resource("state://session")
    def session_state() -> str:
        """Current session summary as JSON."""
        return json.dumps(state.summary(), indent=2)

    return server


settings = Settings.from_env()
state = SessionState.from_settings(settings)
mcp = create_server(state)


def configure_logging(level: Optional[str] = None) -> None:
    # stdout carries the MCP stdio transport; logs go to stderr.
    logging.basicConfig(
        stream=sys.stderr,
        level=level or settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    configure_logging()
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
