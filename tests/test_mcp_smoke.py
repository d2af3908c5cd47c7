"""MCP server smoke test: verifies the server starts and responds to initialize."""

import os
import sys
import pytest
from mcp.client.stdio import stdio_client, StdioServerParameters
from mcp import ClientSession


def _params():
    return StdioServerParameters(
        command=sys.executable,
        args=["-m", "route_sketch"],
        env={**os.environ, "ROUTE_SKETCH_STORE_PATH": "memory"},
    )


@pytest.mark.anyio
async def test_mcp_server_initializes():
    """Server starts and responds to MCP initialize with correct name."""
    async with stdio_client(_params()) as (read, write):
        async with ClientSession(read, write) as session:
            result = await session.initialize()

            assert result.serverInfo.name == "route-sketch"


@pytest.mark.anyio
async def test_mcp_server_exposes_expected_tools():
    """Server exposes the expected MCP tools."""
    async with stdio_client(_params()) as (read, write):
        async with ClientSession(read, write) as session:
            await session.initialize()
            tools = await session.list_tools()

        tool_names = {t.name for t in tools.tools}
        assert {
            "sign_in", "new_route", "add_waypoint", "remove_waypoint", "undo", "redo",
            "save_route", "list_routes", "get_route", "delete_route", "restore_route",
            "geocode_place", "search_routes",
        } <= tool_names
