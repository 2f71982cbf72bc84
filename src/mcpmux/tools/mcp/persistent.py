"""Persistent session helper for MCP."""

from __future__ import annotations

import asyncio
import enum
import logging
from contextlib import AbstractAsyncContextManager

from mcp.client.session import ClientSession

from .constants import MCP_DEFAULT_CLOSE_TIMEOUT, MCP_ERROR_CLOSE_TIMEOUT
from .exceptions import MCPTeardownError

logger = logging.getLogger(__name__)


class SessionState(str, enum.Enum):
    """Lifecycle of a :class:`PersistentSession`."""

    CONNECTING = "connecting"
    LIVE = "live"
    DISCONNECTING = "disconnecting"
    CLOSED = "closed"
    FAILED = "failed"


class PersistentSession:
    """Keep one client session alive in a background task.

    The transport context manager is entered and exited inside the same task,
    which the SDK's task groups require. ``close`` is idempotent: only the
    first call disconnects, later calls return immediately.
    """

    def __init__(self, url: str, cm: AbstractAsyncContextManager[ClientSession]):
        self.url = url
        self._cm = cm
        self._task: asyncio.Task | None = None
        self._start = asyncio.Event()
        self._stop = asyncio.Event()
        self.session: ClientSession | None = None
        self.state = SessionState.CONNECTING

    async def start(self) -> ClientSession:
        """Open the session and return it once initialized.

        Raises whatever the transport raised if the session never became live.
        """
        if self._task is None:
            self._task = asyncio.create_task(self._runner(), name=f"mcp-session:{self.url}")

        waiter = asyncio.create_task(self._start.wait())
        try:
            await asyncio.wait({waiter, self._task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()

        if not self._start.is_set():
            self.state = SessionState.FAILED
            # The runner exited before the session was ready
            if not self._task.cancelled():
                self._task.result()
            raise ConnectionError(f"MCP session to '{self.url}' closed during startup")
        assert self.session is not None
        return self.session

    async def _runner(self) -> None:
        async with self._cm as client:
            self.session = client
            self.state = SessionState.LIVE
            logger.debug("MCP session to %s is live", self.url)
            self._start.set()
            await self._stop.wait()
        self.session = None

    async def abort(self, timeout: float = MCP_DEFAULT_CLOSE_TIMEOUT) -> None:
        """Cancel a session that never became live, waiting at most ``timeout`` seconds."""
        if self._task is None or self._task.done():
            return
        self._task.cancel()
        _, pending = await asyncio.wait({self._task}, timeout=timeout)
        if pending:
            logger.warning("MCP session to %s still shutting down after %s seconds; abandoning it", self.url, timeout)
        self.state = SessionState.FAILED

    async def close(self, timeout: float = MCP_DEFAULT_CLOSE_TIMEOUT) -> None:
        """Disconnect the session, waiting at most ``timeout`` seconds.

        Raises :class:`MCPTeardownError` if the transport fails to exit cleanly
        or does not exit in time; the session is considered closed either way.
        """
        if self.state is not SessionState.LIVE or self._task is None:
            return

        self.state = SessionState.DISCONNECTING
        logger.debug("Closing MCP session to %s", self.url)
        self._stop.set()
        try:
            await asyncio.wait_for(asyncio.shield(self._task), timeout=timeout)
        except TimeoutError as exc:
            self._task.cancel()
            raise MCPTeardownError(self.url, MCP_ERROR_CLOSE_TIMEOUT.format(timeout=timeout)) from exc
        except asyncio.CancelledError:
            if not self._task.cancelled():
                raise
        except Exception as exc:
            raise MCPTeardownError(self.url, exc) from exc
        finally:
            self.session = None
            self.state = SessionState.CLOSED
