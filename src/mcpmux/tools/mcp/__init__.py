"""MCP tooling package."""

from mcpmux.config.mcp import KeyValuePair, MCPEndpointConfig

from .aggregator import MCPAggregator, MCPToolSet, aggregate, mcp_tools
from .connection_manager import ConnectionManager
from .descriptor import InjectedToolDescriptor, MCPToolDescriptor, ToolDescriptor
from .exceptions import (
    MCPError,
    MCPServerConnectionError,
    MCPTeardownError,
    MCPToolsLoadingError,
)
from .injection import BUILTIN_INJECTION_RULES, InjectionRule, apply_injection_rules
from .persistent import PersistentSession, SessionState
from .tool_loader import ToolLoader

__all__ = [
    "MCPAggregator",
    "MCPToolSet",
    "aggregate",
    "mcp_tools",
    "ConnectionManager",
    "ToolLoader",
    "PersistentSession",
    "SessionState",
    "ToolDescriptor",
    "MCPToolDescriptor",
    "InjectedToolDescriptor",
    "InjectionRule",
    "BUILTIN_INJECTION_RULES",
    "apply_injection_rules",
    "MCPError",
    "MCPServerConnectionError",
    "MCPToolsLoadingError",
    "MCPTeardownError",
    "MCPEndpointConfig",
    "KeyValuePair",
]
