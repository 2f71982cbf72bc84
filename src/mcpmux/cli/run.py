#!/usr/bin/env python3
"""Command-line interface for mcpmux.

Connects to the MCP servers listed in a JSON, YAML or TOML config file, then
either lists the merged tools or calls one of them.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import click
from dotenv import load_dotenv

from mcpmux.cli.log_utils import setup_logger
from mcpmux.common.results import ToolResult
from mcpmux.config.mcp import MCPEndpointConfig, load_endpoints
from mcpmux.tools.mcp import MCPToolSet, mcp_tools

log_level_option = click.option(
    "--log-level",
    "-l",
    default="WARNING",
    show_default=True,
    help="Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
)
user_id_option = click.option("--user-id", "-u", help="Caller identity injected into user-scoped tools")


def _load_endpoints(path: Path) -> list[MCPEndpointConfig]:
    """Return endpoints loaded from *path* or exit on error."""
    try:
        return load_endpoints(path)
    except Exception as exc:  # pragma: no cover - pass through to user
        click.echo(f"Error loading config file: {exc}", err=True)
        sys.exit(1)


def _parse_args(raw: str | None) -> dict[str, Any]:
    """Parse the ``--args`` JSON object or exit on error."""
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        click.echo(f"Error: --args is not valid JSON: {exc}", err=True)
        sys.exit(1)
    if not isinstance(parsed, dict):
        click.echo("Error: --args must be a JSON object", err=True)
        sys.exit(1)
    return parsed


async def _list_tools(endpoints: list[MCPEndpointConfig], user_id: str | None) -> MCPToolSet:
    async with mcp_tools(endpoints, identity=user_id) as tool_set:
        return tool_set


async def _call_tool(
    endpoints: list[MCPEndpointConfig],
    tool: str,
    arguments: dict[str, Any],
    user_id: str | None,
) -> ToolResult:
    async with mcp_tools(endpoints, identity=user_id) as tool_set:
        return await tool_set.call_tool(tool, arguments)


@click.group()
def main() -> None:
    """Aggregate tools from several MCP servers."""
    # Load environment variables from .env if present
    load_dotenv()


@main.command("tools")
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False))
@user_id_option
@click.option("--json", "json_output", is_flag=True, help="Print tool schemas as JSON")
@log_level_option
def tools_command(config_path: str, user_id: str | None, json_output: bool, log_level: str) -> None:
    """List the merged tools of the servers in CONFIG_PATH."""
    logger = setup_logger(log_level)
    endpoints = _load_endpoints(Path(config_path))
    logger.info("Loaded %d endpoint(s) from %s", len(endpoints), config_path)

    tool_set = asyncio.run(_list_tools(endpoints, user_id))

    if json_output:
        click.echo(json.dumps(tool_set.to_schemas(), ensure_ascii=False, indent=2))
        return
    if not tool_set.tools:
        click.echo("No tools available", err=True)
        return
    for schema in tool_set.to_schemas():
        description = schema["description"].strip().splitlines()
        click.echo(f"{schema['name']}: {description[0] if description else ''}")


@main.command("call")
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("tool")
@click.option("--args", "-a", "raw_args", help="Tool arguments as a JSON object")
@user_id_option
@log_level_option
def call_command(config_path: str, tool: str, raw_args: str | None, user_id: str | None, log_level: str) -> None:
    """Call TOOL on the servers in CONFIG_PATH and print its result."""
    logger = setup_logger(log_level)
    endpoints = _load_endpoints(Path(config_path))
    arguments = _parse_args(raw_args)
    logger.info("Calling %s with %d argument(s)", tool, len(arguments))

    result = asyncio.run(_call_tool(endpoints, tool, arguments, user_id))

    output = result.to_dict()
    if result.is_error:
        click.echo(output["content"], err=True)
        sys.exit(1)
    click.echo(output["content"])


if __name__ == "__main__":
    main()
