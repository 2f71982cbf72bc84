"""Tool descriptors for MCP tools."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from mcp.types import Tool as MCPTool

from mcpmux.common.results import ToolResult

from .constants import (
    MCP_DEFAULT_TOOL_CALL_TIMEOUT,
    MCP_ENV_TOOL_CALL_TIMEOUT,
    MCP_ERROR_TOOL_CALL_TIMEOUT,
)
from .persistent import PersistentSession

logger = logging.getLogger(__name__)


@runtime_checkable
class ToolDescriptor(Protocol):
    """A named, invocable tool in a merged tool set."""

    name: str

    @property
    def metadata(self) -> MCPTool: ...

    async def invoke(self, arguments: dict[str, Any] | None = None) -> ToolResult: ...

    def to_schema(self) -> dict[str, Any]: ...


def _schema_for(tool: MCPTool) -> dict[str, Any]:
    return {
        "name": tool.name,
        "description": tool.description or "",
        "input_schema": tool.inputSchema or {"type": "object", "properties": {}},
    }


@dataclass
class MCPToolDescriptor:
    """A tool discovered on one MCP session."""

    name: str
    tool: MCPTool
    client: PersistentSession

    @property
    def metadata(self) -> MCPTool:
        return self.tool

    @property
    def server_url(self) -> str:
        return self.client.url

    async def invoke(self, arguments: dict[str, Any] | None = None) -> ToolResult:
        """Call the tool on its session.

        Server-side errors come back as a :class:`ToolResult` with
        ``is_error`` set; transport failures and timeouts propagate.
        """
        session = self.client.session
        if session is None:
            raise RuntimeError(f"MCP session to '{self.server_url}' is {self.client.state.value}")

        timeout = float(os.environ.get(MCP_ENV_TOOL_CALL_TIMEOUT, MCP_DEFAULT_TOOL_CALL_TIMEOUT))
        try:
            async with asyncio.timeout(timeout):
                result = await session.call_tool(self.name, arguments)
        except TimeoutError:
            logger.error(MCP_ERROR_TOOL_CALL_TIMEOUT.format(tool=self.name, server=self.server_url, timeout=timeout))
            raise

        if getattr(result, "isError", False):
            logger.warning("MCP server %s returned error for tool '%s'", self.server_url, self.name)
        return ToolResult.from_call_result(result)

    def to_schema(self) -> dict[str, Any]:
        return _schema_for(self.tool)


class InjectedToolDescriptor:
    """Wrap a descriptor so one argument is always forced to a fixed value.

    Only :meth:`invoke` differs from the wrapped descriptor. The injected
    value replaces any caller-supplied value under the same key, and the
    wrapped descriptor's result or exception is passed through untouched.
    """

    def __init__(self, wrapped: ToolDescriptor, param_name: str, value: Any) -> None:
        self.wrapped = wrapped
        self.param_name = param_name
        self._value = value

    @property
    def name(self) -> str:
        return self.wrapped.name

    @property
    def metadata(self) -> MCPTool:
        return self.wrapped.metadata

    async def invoke(self, arguments: dict[str, Any] | None = None) -> ToolResult:
        enhanced = dict(arguments or {})
        enhanced[self.param_name] = self._value
        logger.debug("Injecting '%s' for tool '%s'", self.param_name, self.name)
        return await self.wrapped.invoke(enhanced)

    def to_schema(self) -> dict[str, Any]:
        return self.wrapped.to_schema()

    def __repr__(self) -> str:
        return f"InjectedToolDescriptor({self.wrapped!r}, param_name={self.param_name!r})"
