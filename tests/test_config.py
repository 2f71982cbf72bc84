"""Tests for endpoint configuration models and loaders."""

import json

import pytest
from pydantic import ValidationError

from mcpmux.config.mcp import KeyValuePair, MCPEndpointConfig, endpoints_from_dict, load_endpoints


def test_header_dict_last_write_wins():
    config = MCPEndpointConfig(
        url="http://localhost:8080/mcp",
        headers=[
            {"key": "X-Token", "value": "first"},
            {"key": "Accept", "value": "application/json"},
            {"key": "X-Token", "value": "second"},
        ],
    )
    assert config.header_dict() == {"X-Token": "second", "Accept": "application/json"}


def test_header_dict_drops_empty_keys_and_defaults_values():
    config = MCPEndpointConfig(
        url="http://localhost:8080/mcp",
        headers=[KeyValuePair(key="", value="ignored"), KeyValuePair(key="X-Empty", value=None)],
    )
    assert config.header_dict() == {"X-Empty": ""}


def test_headers_accept_pairs_and_mapping():
    from_pairs = MCPEndpointConfig(url="http://a/mcp", headers=[("A", "1"), ("B", "2")])
    from_mapping = MCPEndpointConfig(url="http://a/mcp", headers={"A": "1", "B": "2"})
    assert from_pairs.header_dict() == from_mapping.header_dict() == {"A": "1", "B": "2"}


def test_stream_is_alias_for_sse():
    config = MCPEndpointConfig(url="http://a/sse", type="stream")
    assert config.type == "sse"


def test_default_type_is_http():
    assert MCPEndpointConfig(url="http://a/mcp").type == "http"


@pytest.mark.parametrize("url", ["", "   "])
def test_empty_url_rejected(url):
    with pytest.raises(ValidationError):
        MCPEndpointConfig(url=url)


def test_unknown_type_rejected():
    with pytest.raises(ValidationError):
        MCPEndpointConfig(url="http://a/mcp", type="stdio")


def test_config_is_immutable():
    config = MCPEndpointConfig(url="http://a/mcp")
    with pytest.raises(ValidationError):
        config.url = "http://b/mcp"


def test_endpoints_from_dict_list_and_mapping():
    as_list = endpoints_from_dict({"mcpServers": [{"url": "http://a/mcp"}, {"url": "http://b/sse", "type": "sse"}]})
    as_mapping = endpoints_from_dict(
        {"mcpServers": {"a": {"url": "http://a/mcp"}, "b": {"url": "http://b/sse", "type": "sse"}}}
    )
    assert [e.url for e in as_list] == ["http://a/mcp", "http://b/sse"]
    assert as_list == as_mapping


def test_endpoints_from_dict_requires_section():
    with pytest.raises(KeyError):
        endpoints_from_dict({"servers": []})


def test_load_endpoints_json(tmp_path):
    path = tmp_path / "servers.json"
    path.write_text(
        json.dumps(
            {
                "mcpServers": [
                    {"url": "http://a/mcp", "type": "http", "headers": [{"key": "Authorization", "value": "Bearer x"}]}
                ]
            }
        )
    )
    endpoints = load_endpoints(path)
    assert len(endpoints) == 1
    assert endpoints[0].header_dict() == {"Authorization": "Bearer x"}


def test_load_endpoints_yaml(tmp_path):
    path = tmp_path / "servers.yaml"
    path.write_text(
        """
mcpServers:
  - url: http://a/sse
    type: stream
  - url: http://b/mcp
"""
    )
    endpoints = load_endpoints(path)
    assert [(e.url, e.type) for e in endpoints] == [("http://a/sse", "sse"), ("http://b/mcp", "http")]


def test_load_endpoints_toml(tmp_path):
    path = tmp_path / "servers.toml"
    path.write_text(
        """
[[mcpServers]]
url = "http://a/mcp"

[[mcpServers]]
url = "http://b/sse"
type = "sse"
"""
    )
    assert [e.url for e in load_endpoints(path)] == ["http://a/mcp", "http://b/sse"]


def test_load_endpoints_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_endpoints(tmp_path / "missing.json")

    bad_suffix = tmp_path / "servers.ini"
    bad_suffix.write_text("")
    with pytest.raises(ValueError, match="Unsupported file format"):
        load_endpoints(bad_suffix)

    no_section = tmp_path / "servers.json"
    no_section.write_text("{}")
    with pytest.raises(KeyError):
        load_endpoints(no_section)
