"""Manage connections to MCP servers."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from mcp.client.session import ClientSession
from mcp.client.sse import sse_client
from mcp.client.streamable_http import streamablehttp_client

from mcpmux.config.mcp import MCPEndpointConfig

from .constants import (
    MCP_DEFAULT_CONNECT_TIMEOUT,
    MCP_ENV_CONNECT_TIMEOUT,
    MCP_ERROR_CONNECT_TIMEOUT,
    MCP_ERROR_UNSUPPORTED_TRANSPORT,
    MCP_TRANSPORT_HTTP,
    MCP_TRANSPORT_SSE,
    MCP_TRANSPORTS,
)
from .exceptions import MCPServerConnectionError
from .persistent import PersistentSession

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Open sessions to MCP endpoints over SSE or streamable HTTP."""

    def __init__(self, connect_timeout: float | None = None) -> None:
        self.connect_timeout = connect_timeout

    def _connect_timeout(self) -> float:
        if self.connect_timeout is not None:
            return self.connect_timeout
        return float(os.environ.get(MCP_ENV_CONNECT_TIMEOUT, MCP_DEFAULT_CONNECT_TIMEOUT))

    @asynccontextmanager
    async def get_client(self, endpoint: MCPEndpointConfig) -> AsyncGenerator[ClientSession, None]:
        """Yield an initialized client session for ``endpoint``."""
        headers = endpoint.header_dict()
        if endpoint.type == MCP_TRANSPORT_SSE:
            async with sse_client(endpoint.url, headers=headers) as (read_stream, write_stream):
                session = ClientSession(read_stream, write_stream)
                async with session:
                    await session.initialize()
                    yield session
        elif endpoint.type == MCP_TRANSPORT_HTTP:
            async with streamablehttp_client(endpoint.url, headers=headers) as (read_stream, write_stream, _):
                session = ClientSession(read_stream, write_stream)
                async with session:
                    await session.initialize()
                    yield session
        else:
            raise ValueError(MCP_ERROR_UNSUPPORTED_TRANSPORT.format(type=endpoint.type, expected=MCP_TRANSPORTS))

    async def connect(self, endpoint: MCPEndpointConfig) -> PersistentSession:
        """Return a live persistent session to ``endpoint``.

        Raises:
            MCPServerConnectionError: If the transport type is unknown, the
                endpoint is unreachable, or the handshake fails or times out.
        """
        client = PersistentSession(endpoint.url, self.get_client(endpoint))
        timeout = self._connect_timeout()
        try:
            async with asyncio.timeout(timeout):
                await client.start()
        except TimeoutError as exc:
            await client.abort()
            raise MCPServerConnectionError(endpoint.url, MCP_ERROR_CONNECT_TIMEOUT.format(timeout=timeout)) from exc
        except asyncio.CancelledError:
            await client.abort()
            raise
        except Exception as exc:  # noqa: BLE001
            await client.abort()
            status = getattr(getattr(exc, "response", None), "status_code", None)
            cause = f"status {status}: {exc}" if status else exc
            raise MCPServerConnectionError(endpoint.url, cause) from exc

        logger.debug("Connected to MCP server %s over %s", endpoint.url, endpoint.type)
        return client
