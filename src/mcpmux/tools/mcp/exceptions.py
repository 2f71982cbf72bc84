class MCPError(Exception):
    """Base class for MCP-related errors."""


class _EndpointError(MCPError):
    """An error tied to one endpoint URL."""

    _prefix = "MCP endpoint error"

    def __init__(self, url: str, cause: BaseException | str) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"{self._prefix} '{url}': {cause}")


class MCPServerConnectionError(_EndpointError):
    """Raised when a server cannot be reached or rejects the handshake."""

    _prefix = "Failed to connect to MCP server"


class MCPToolsLoadingError(_EndpointError):
    """Raised when a live session fails to list its tools."""

    _prefix = "Failed to load tools from MCP server"


class MCPTeardownError(_EndpointError):
    """Raised when a session fails to disconnect cleanly."""

    _prefix = "Failed to close MCP session"
