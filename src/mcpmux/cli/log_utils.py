"""Logging helpers for the mcpmux CLI."""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def setup_logger(log_level: str = "INFO") -> logging.Logger:
    """Configure the ``mcpmux`` logger hierarchy and return the CLI logger."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)

    root = logging.getLogger("mcpmux")
    root.setLevel(level)

    # The SDK and HTTP client are chatty at INFO
    for name in ("mcp", "httpx"):
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return logging.getLogger("mcpmux.cli")
