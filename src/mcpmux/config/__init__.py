"""Configuration models for mcpmux."""

from mcpmux.config.mcp import KeyValuePair, MCPEndpointConfig, endpoints_from_dict, load_endpoints

__all__ = ["KeyValuePair", "MCPEndpointConfig", "endpoints_from_dict", "load_endpoints"]
