#!/usr/bin/env python3

"""
MCP Example Script

This script connects to the MCP servers listed in examples/servers.json,
prints the merged tool list, runs one search as a given user, and simulates
the request being cancelled so the sessions are released automatically.
"""

import asyncio
import logging
import sys
from pathlib import Path

from mcpmux import MCPAggregator, load_endpoints

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")


async def main(user_id: str) -> None:
    """Run a simple example of tool aggregation."""
    endpoints = load_endpoints(Path(__file__).parent / "servers.json")
    disconnected = asyncio.Event()

    tool_set = await MCPAggregator().aggregate(endpoints, identity=user_id, cancel_event=disconnected)
    print(f"Tools: {', '.join(tool_set.tools) or 'none'}")
    print("------------------------------------------------------------")

    if "cloudflare_rag_search" in tool_set.tools:
        result = await tool_set.call_tool("cloudflare_rag_search", {"query": "onboarding checklist"})
        print("Response:")
        print(result.to_dict()["content"])
        print("------------------------------------------------------------")

    # The client went away: teardown runs without an explicit call
    disconnected.set()
    while not tool_set.closed:
        await asyncio.sleep(0.05)
    print(f"Closed {len(tool_set.sessions)} session(s)")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "demo-user"))
