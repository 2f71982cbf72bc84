"""Pytest configuration."""

import os

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "live_mcp: mark test as requiring a running MCP server")


def pytest_addoption(parser):
    """Add pytest command line options."""
    parser.addoption(
        "--run-live-tests",
        action="store_true",
        default=False,
        help="Run tests that connect to a live MCP server (marked with live_mcp)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip live server tests unless explicitly requested."""
    if config.getoption("--run-live-tests"):
        return

    skip_live = pytest.mark.skip(reason="use --run-live-tests to run live MCP server tests")
    for item in items:
        if "live_mcp" in item.keywords:
            item.add_marker(skip_live)


@pytest.fixture
def clean_env():
    """Remove mcpmux timeout overrides for the duration of a test."""
    original_env = os.environ.copy()
    for key in list(os.environ):
        if key.startswith("MCPMUX_"):
            del os.environ[key]
    yield
    os.environ.clear()
    os.environ.update(original_env)
