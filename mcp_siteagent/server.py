"""MCP server exposing SiteAgent orchestration to MCP clients."""

import os

from mcp.server.fastmcp import FastMCP
import httpx

mcp = FastMCP("siteagent")
SERVER = os.environ.get("SITEAGENT_URL", "http://localhost:8000")


@mcp.tool()
async def run_command(command: str) -> dict:
    """Run a free-text command across the configured sites.

    Returns the ordered trace ("log") and one result per executed intent.
    """
    async with httpx.AsyncClient(timeout=60.0) as client:
        r = await client.post(f"{SERVER}/run-agent", json={"command": command})
        return r.json()


@mcp.tool()
async def list_intents() -> dict:
    """List the intents currently published by all configured sites."""
    async with httpx.AsyncClient(timeout=30.0) as client:
        r = await client.get(f"{SERVER}/intents")
        return r.json()


if __name__ == "__main__":
    mcp.run()
