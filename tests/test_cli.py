"""Tests for the mcpmux command-line interface."""

import json
from contextlib import asynccontextmanager
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from mcpmux.cli.run import main
from mcpmux.common.results import ToolResult
from mcpmux.tools.mcp import MCPToolSet
from tests.fakes import RecordingTool


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "servers.json"
    path.write_text(json.dumps({"mcpServers": [{"url": "http://a/mcp"}, {"url": "http://b/sse", "type": "sse"}]}))
    return str(path)


def _patched_mcp_tools(tools: dict, seen: dict):
    @asynccontextmanager
    async def fake_mcp_tools(endpoints, identity=None, cancel_event=None, aggregator=None):
        seen["endpoints"] = [e.url for e in endpoints]
        seen["identity"] = identity
        tool_set = MCPToolSet(tools, [])
        try:
            yield tool_set
        finally:
            await tool_set.teardown()

    return patch("mcpmux.cli.run.mcp_tools", fake_mcp_tools)


def test_tools_lists_names(config_file):
    seen: dict = {}
    tools = {"search": RecordingTool("search"), "info": RecordingTool("info")}
    with _patched_mcp_tools(tools, seen):
        result = CliRunner().invoke(main, ["tools", config_file, "--user-id", "u1"])

    assert result.exit_code == 0, result.output
    assert "search: search tool" in result.output
    assert "info: info tool" in result.output
    assert seen == {"endpoints": ["http://a/mcp", "http://b/sse"], "identity": "u1"}


def test_tools_json_output(config_file):
    with _patched_mcp_tools({"search": RecordingTool("search")}, {}):
        result = CliRunner().invoke(main, ["tools", config_file, "--json"])

    assert result.exit_code == 0, result.output
    assert [s["name"] for s in json.loads(result.output)] == ["search"]


def test_call_prints_result(config_file):
    search = RecordingTool("search", result=ToolResult.from_success("three hits"))
    with _patched_mcp_tools({"search": search}, {}):
        result = CliRunner().invoke(main, ["call", config_file, "search", "--args", '{"query": "x"}'])

    assert result.exit_code == 0, result.output
    assert "three hits" in result.output
    assert search.calls == [{"query": "x"}]


def test_call_error_result_exits_nonzero(config_file):
    with _patched_mcp_tools({}, {}):
        result = CliRunner().invoke(main, ["call", config_file, "missing"])
    assert result.exit_code == 1
    assert "Tool 'missing' not found" in result.output


@pytest.mark.parametrize("raw", ["not json", "[1, 2]"])
def test_call_rejects_bad_args(config_file, raw):
    with _patched_mcp_tools({}, {}):
        result = CliRunner().invoke(main, ["call", config_file, "search", "--args", raw])
    assert result.exit_code == 1
    assert "--args" in result.output
