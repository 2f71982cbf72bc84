"""Constants for the MCP module.

This module defines timeouts, environment variable names and log messages used
by the connection manager, tool loader and aggregator.
"""

# Environment variables overriding the default timeouts
MCP_ENV_CONNECT_TIMEOUT = "MCPMUX_CONNECT_TIMEOUT"
MCP_ENV_TOOL_FETCH_TIMEOUT = "MCPMUX_TOOL_FETCH_TIMEOUT"
MCP_ENV_TOOL_CALL_TIMEOUT = "MCPMUX_TOOL_CALL_TIMEOUT"
MCP_ENV_CLOSE_TIMEOUT = "MCPMUX_CLOSE_TIMEOUT"

# Default timeout values
MCP_DEFAULT_CONNECT_TIMEOUT = 30.0
MCP_DEFAULT_TOOL_FETCH_TIMEOUT = 30.0
MCP_DEFAULT_TOOL_CALL_TIMEOUT = 30.0
MCP_DEFAULT_CLOSE_TIMEOUT = 1.0

# Transport kinds
MCP_TRANSPORT_SSE = "sse"
MCP_TRANSPORT_HTTP = "http"
MCP_TRANSPORTS = (MCP_TRANSPORT_SSE, MCP_TRANSPORT_HTTP)

# Log message constants
MCP_LOG_TOOLS_FOUND = "MCP tools from %s: %s"
MCP_LOG_ENDPOINT_SKIPPED = "Skipping MCP server %s: %s"
MCP_LOG_CANCELLED = "Aggregation cancelled; tearing down %d MCP session(s)"

# Error message constants
MCP_ERROR_UNSUPPORTED_TRANSPORT = "Unsupported transport type: {type!r} (expected one of {expected})"
MCP_ERROR_CONNECT_TIMEOUT = "Timeout connecting after {timeout:.1f} seconds. Consider increasing MCPMUX_CONNECT_TIMEOUT."
MCP_ERROR_TOOL_FETCH_TIMEOUT = (
    "Timeout fetching tools after {timeout:.1f} seconds. Consider increasing MCPMUX_TOOL_FETCH_TIMEOUT."
)
MCP_ERROR_TOOL_CALL_TIMEOUT = (
    "Timeout calling tool '{tool}' on server '{server}' after {timeout:.1f} seconds. "
    "Consider checking server connectivity or increasing MCPMUX_TOOL_CALL_TIMEOUT."
)
MCP_ERROR_CLOSE_TIMEOUT = "Timeout closing session after {timeout:.1f} seconds"
