"""mcpmux - Aggregate tools from several MCP servers into one namespace."""

from mcpmux.config.mcp import MCPEndpointConfig, load_endpoints
from mcpmux.tools.mcp import MCPAggregator, MCPToolSet, aggregate, mcp_tools

__all__ = ["MCPAggregator", "MCPEndpointConfig", "MCPToolSet", "aggregate", "load_endpoints", "mcp_tools"]
__version__ = "0.1.0"
