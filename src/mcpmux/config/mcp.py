"""MCP endpoint configuration models.

Endpoints are described by :class:`MCPEndpointConfig` objects, either built
directly or loaded from a JSON, YAML or TOML file with an ``mcpServers``
section.
"""

import json
import tomllib
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, field_validator


class KeyValuePair(BaseModel):
    """A single HTTP header entry."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str | None = ""


class MCPEndpointConfig(BaseModel):
    """Connection settings for one remote MCP server.

    Examples:
    --------
    >>> MCPEndpointConfig(url="http://localhost:8080/sse", type="sse")
    >>> MCPEndpointConfig(
    ...     url="http://localhost:8080/mcp",
    ...     type="http",
    ...     headers=[{"key": "Authorization", "value": "Bearer abc"}],
    ... )
    """

    model_config = ConfigDict(frozen=True)

    url: str
    type: Literal["sse", "http"] = "http"
    headers: tuple[KeyValuePair, ...] = ()

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate the URL is not empty."""
        if not v or not v.strip():
            raise ValueError("Endpoint URL cannot be empty")
        return v.strip()

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Any:
        """Accept ``stream`` as an alias of ``sse``."""
        if isinstance(v, str):
            v = v.lower()
            if v == "stream":
                return "sse"
        return v

    @field_validator("headers", mode="before")
    @classmethod
    def parse_headers(cls, value: Any) -> Any:
        """Accept a list of pairs, a list of dicts or a plain mapping."""
        if value is None:
            return ()
        if isinstance(value, dict):
            return tuple({"key": k, "value": v} for k, v in value.items())
        if isinstance(value, list | tuple):
            items = []
            for item in value:
                if isinstance(item, list | tuple) and len(item) == 2:
                    items.append({"key": item[0], "value": item[1]})
                else:
                    items.append(item)
            return tuple(items)
        return value

    def header_dict(self) -> dict[str, str]:
        """Return headers as a dict, last write wins.

        Entries with an empty key are dropped and a missing value becomes ``""``.
        """
        headers: dict[str, str] = {}
        for header in self.headers:
            if header.key:
                headers[header.key] = header.value or ""
        return headers


def endpoints_from_dict(config: dict[str, Any]) -> list[MCPEndpointConfig]:
    """Build endpoint configs from a dict with an ``mcpServers`` section.

    The section may be a list of endpoint settings or a mapping of server name
    to settings; mapping order is preserved.
    """
    if "mcpServers" not in config:
        raise KeyError("Config must have a 'mcpServers' section")
    servers = config["mcpServers"] or []
    entries: Iterable[Any] = servers.values() if isinstance(servers, dict) else servers
    return [MCPEndpointConfig(**settings) for settings in entries]


def load_endpoints(path: Path | str) -> list[MCPEndpointConfig]:
    """Load endpoint configs from a JSON, YAML or TOML file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        with path.open("r") as f:
            data = json.load(f)
    elif suffix in [".yaml", ".yml"]:
        with path.open("r") as f:
            data = yaml.safe_load(f)
    elif suffix == ".toml":
        with path.open("rb") as f:
            data = tomllib.load(f)
    else:
        raise ValueError(f"Unsupported file format: {suffix} (expected .json, .toml, .yaml, or .yml)")

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return endpoints_from_dict(data)
