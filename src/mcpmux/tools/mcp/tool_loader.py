"""Load tool definitions from MCP sessions."""

from __future__ import annotations

import asyncio
import logging
import os

from mcp.types import ListToolsResult

from .constants import (
    MCP_DEFAULT_TOOL_FETCH_TIMEOUT,
    MCP_ENV_TOOL_FETCH_TIMEOUT,
    MCP_ERROR_TOOL_FETCH_TIMEOUT,
)
from .descriptor import MCPToolDescriptor
from .exceptions import MCPToolsLoadingError
from .persistent import PersistentSession

logger = logging.getLogger(__name__)


class ToolLoader:
    """Responsible for listing the tools exposed by a live session."""

    def __init__(self, fetch_timeout: float | None = None) -> None:
        self.fetch_timeout = fetch_timeout

    def _fetch_timeout(self) -> float:
        if self.fetch_timeout is not None:
            return self.fetch_timeout
        return float(os.environ.get(MCP_ENV_TOOL_FETCH_TIMEOUT, MCP_DEFAULT_TOOL_FETCH_TIMEOUT))

    async def discover(self, client: PersistentSession) -> dict[str, MCPToolDescriptor]:
        """Return the tools of ``client`` keyed by name.

        Raises:
            MCPToolsLoadingError: If listing fails or times out. The session
                itself is left open.
        """
        session = client.session
        if session is None:
            raise MCPToolsLoadingError(client.url, f"session is {client.state.value}")

        timeout = self._fetch_timeout()
        try:
            async with asyncio.timeout(timeout):
                result: ListToolsResult = await session.list_tools()
        except TimeoutError as exc:
            raise MCPToolsLoadingError(client.url, MCP_ERROR_TOOL_FETCH_TIMEOUT.format(timeout=timeout)) from exc
        except Exception as exc:  # noqa: BLE001
            raise MCPToolsLoadingError(client.url, exc) from exc

        tools = result.tools or []
        logger.debug("Loaded %s tools from %s", len(tools), client.url)
        return {tool.name: MCPToolDescriptor(name=tool.name, tool=tool, client=client) for tool in tools}
