"""MCP Aggregator module.

:class:`MCPAggregator` connects to a list of MCP endpoints, merges their tools
into one namespace and hands back an :class:`MCPToolSet` that owns every
session it opened. A failing endpoint is logged and skipped; it never affects
the others.

Example::

    async with mcp_tools(endpoints, identity=user_id, cancel_event=disconnected) as tool_set:
        result = await tool_set.tools["search"].invoke({"query": "x"})
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import asynccontextmanager
from types import MappingProxyType
from typing import Any

from mcpmux.common.results import ToolResult
from mcpmux.config.mcp import MCPEndpointConfig

from .connection_manager import ConnectionManager
from .constants import (
    MCP_DEFAULT_CLOSE_TIMEOUT,
    MCP_ENV_CLOSE_TIMEOUT,
    MCP_LOG_CANCELLED,
    MCP_LOG_ENDPOINT_SKIPPED,
    MCP_LOG_TOOLS_FOUND,
)
from .descriptor import ToolDescriptor
from .exceptions import MCPTeardownError
from .injection import BUILTIN_INJECTION_RULES, InjectionRule, apply_injection_rules
from .persistent import PersistentSession
from .tool_loader import ToolLoader

logger = logging.getLogger(__name__)

# Extra time allowed on top of a session's own close timeout
_CLOSE_GRACE = 1.0


class MCPToolSet:
    """Merged tools from several MCP sessions plus their teardown.

    ``tools`` is read-only. ``teardown`` disconnects every owned session
    concurrently; it runs at most once, later calls return immediately. When a
    ``cancel_event`` is given, teardown starts automatically once it is set.

    Call ``teardown`` (or use :func:`mcp_tools`) even when an event is given:
    it also cancels the task watching the event, which otherwise stays pending
    for as long as the event is never set.
    """

    def __init__(
        self,
        tools: Mapping[str, ToolDescriptor],
        sessions: Sequence[PersistentSession],
        close_timeout: float = MCP_DEFAULT_CLOSE_TIMEOUT,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        self.tools: Mapping[str, ToolDescriptor] = MappingProxyType(dict(tools))
        self.sessions: tuple[PersistentSession, ...] = tuple(sessions)
        self.close_timeout = close_timeout
        self._teardown_task: asyncio.Task | None = None
        self._watcher: asyncio.Task | None = None
        if cancel_event is not None:
            self._watcher = asyncio.create_task(self._teardown_on_cancel(cancel_event))

    @property
    def closed(self) -> bool:
        return self._teardown_task is not None and self._teardown_task.done()

    async def _teardown_on_cancel(self, cancel_event: asyncio.Event) -> None:
        await cancel_event.wait()
        logger.info(MCP_LOG_CANCELLED, len(self.sessions))
        await self.teardown()

    async def teardown(self) -> None:
        """Disconnect all sessions. Never raises for individual failures."""
        if self._teardown_task is None:
            self._teardown_task = asyncio.create_task(self._close_all())
            if self._watcher is not None and self._watcher is not asyncio.current_task():
                self._watcher.cancel()
        await asyncio.shield(self._teardown_task)

    async def _close_all(self) -> None:
        if self.sessions:
            await asyncio.gather(*(self._close_session(client) for client in self.sessions))

    async def _close_session(self, client: PersistentSession) -> None:
        try:
            await asyncio.wait_for(client.close(timeout=self.close_timeout), timeout=self.close_timeout + _CLOSE_GRACE)
        except MCPTeardownError as exc:
            logger.warning("%s", exc)
        except TimeoutError:
            logger.warning("Timeout closing MCP server '%s' after %s seconds", client.url, self.close_timeout)
        except Exception as exc:  # noqa: BLE001
            logger.warning("%s", MCPTeardownError(client.url, exc))

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """Invoke ``name`` and return its result, reporting failures as error results."""
        tool = self.tools.get(name)
        if tool is None:
            available = ", ".join(self.tools) or "none"
            return ToolResult.from_error(f"Tool '{name}' not found. Available tools: {available}")
        try:
            return await tool.invoke(arguments or {})
        except Exception as exc:  # noqa: BLE001
            error_message = f"Error calling MCP tool {name}: {exc}"
            logger.error(error_message)
            return ToolResult.from_error(error_message)

    def to_schemas(self) -> list[dict[str, Any]]:
        return [tool.to_schema() for tool in self.tools.values()]

    async def __aenter__(self) -> MCPToolSet:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.teardown()

    def __repr__(self) -> str:
        return f"MCPToolSet(tools={list(self.tools)}, sessions={len(self.sessions)}, closed={self.closed})"


class MCPAggregator:
    """Aggregate multiple MCP servers into a single tool namespace."""

    def __init__(
        self,
        connection_manager: ConnectionManager | None = None,
        loader: ToolLoader | None = None,
        injection_rules: Sequence[InjectionRule] = BUILTIN_INJECTION_RULES,
        close_timeout: float | None = None,
        concurrent: bool = True,
    ) -> None:
        self.connection_manager = connection_manager or ConnectionManager()
        self.loader = loader or ToolLoader()
        self.injection_rules = tuple(injection_rules)
        if close_timeout is None:
            close_timeout = float(os.environ.get(MCP_ENV_CLOSE_TIMEOUT, MCP_DEFAULT_CLOSE_TIMEOUT))
        self.close_timeout = close_timeout
        self.concurrent = concurrent

    async def _load_endpoint(
        self,
        endpoint: MCPEndpointConfig,
        cancel_event: asyncio.Event,
        sessions: list[PersistentSession],
    ) -> dict[str, ToolDescriptor]:
        """Connect to and list the tools of one endpoint; failures yield no tools."""
        if cancel_event.is_set():
            return {}

        try:
            client = await self.connection_manager.connect(endpoint)
        except Exception as exc:  # noqa: BLE001
            logger.error(MCP_LOG_ENDPOINT_SKIPPED, endpoint.url, exc)
            return {}
        sessions.append(client)

        if cancel_event.is_set():
            return {}

        try:
            tools = await self.loader.discover(client)
        except Exception as exc:  # noqa: BLE001
            logger.error(MCP_LOG_ENDPOINT_SKIPPED, endpoint.url, exc)
            return {}

        logger.info(MCP_LOG_TOOLS_FOUND, endpoint.url, list(tools))
        return tools

    async def _load_all(
        self,
        endpoints: Sequence[MCPEndpointConfig],
        cancel_event: asyncio.Event,
        sessions: list[PersistentSession],
    ) -> list[dict[str, ToolDescriptor]]:
        if self.concurrent:
            return list(await asyncio.gather(*(self._load_endpoint(ep, cancel_event, sessions) for ep in endpoints)))

        results = []
        for endpoint in endpoints:
            if cancel_event.is_set():
                break
            results.append(await self._load_endpoint(endpoint, cancel_event, sessions))
        return results

    async def aggregate(
        self,
        endpoints: Sequence[MCPEndpointConfig],
        identity: str | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> MCPToolSet:
        """Connect to ``endpoints`` and return their merged tools.

        Args:
            endpoints: Endpoint configurations, in priority order. On a name
                collision the later endpoint's tool wins.
            identity: Caller identity injected into identity-scoped tools.
            cancel_event: Set by the owner when the request is cancelled;
                sessions are then torn down automatically.

        Returns:
            An :class:`MCPToolSet` owning every session that was opened.
        """
        watch_event = cancel_event if cancel_event is not None else asyncio.Event()
        sessions: list[PersistentSession] = []

        try:
            results = await self._load_all(endpoints, watch_event, sessions)
        except BaseException:
            await MCPToolSet({}, sessions, self.close_timeout).teardown()
            raise

        if watch_event.is_set():
            tool_set = MCPToolSet({}, sessions, self.close_timeout)
            logger.info(MCP_LOG_CANCELLED, len(sessions))
            await tool_set.teardown()
            return tool_set

        merged: dict[str, ToolDescriptor] = {}
        for tools in results:
            merged.update(tools)

        if identity:
            merged = apply_injection_rules(merged, identity, self.injection_rules)

        logger.debug("Aggregated %d MCP tools from %d session(s)", len(merged), len(sessions))
        return MCPToolSet(merged, sessions, self.close_timeout, cancel_event)


async def aggregate(
    endpoints: Sequence[MCPEndpointConfig],
    identity: str | None = None,
    cancel_event: asyncio.Event | None = None,
) -> MCPToolSet:
    """Aggregate ``endpoints`` with the default aggregator."""
    return await MCPAggregator().aggregate(endpoints, identity=identity, cancel_event=cancel_event)


@asynccontextmanager
async def mcp_tools(
    endpoints: Sequence[MCPEndpointConfig],
    identity: str | None = None,
    cancel_event: asyncio.Event | None = None,
    aggregator: MCPAggregator | None = None,
) -> AsyncGenerator[MCPToolSet, None]:
    """Yield merged tools for the lifetime of the block, then tear down."""
    aggregator = aggregator or MCPAggregator()
    tool_set = await aggregator.aggregate(endpoints, identity=identity, cancel_event=cancel_event)
    try:
        yield tool_set
    finally:
        await tool_set.teardown()
