"""Common result types for mcpmux.

These classes should have minimal dependencies to avoid circular imports.
"""

import json
from typing import Any


def _plain(value: Any) -> Any:
    """Convert pydantic models (MCP content blocks) to plain data."""
    if hasattr(value, "model_dump"):
        return value.model_dump(exclude_none=True)
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


class ToolResult:
    """A standardized result from tool execution.

    This class provides a consistent format for tool results returned by MCP
    servers, suitable for handing back to a text-generation provider.

    Attributes:
        content: The result content from the tool execution
        is_error: Boolean flag indicating if the tool execution resulted in an error
    """

    def __init__(
        self,
        content: str | dict[str, Any] | list[Any] | None = None,
        is_error: bool = False,
    ):
        self.content = content
        self.is_error = is_error

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary with string content.

        Returns:
            Dictionary representation with content and is_error fields
        """
        content_value = self.content

        if content_value is None:
            content_value = ""
        elif isinstance(content_value, list) and all(getattr(c, "type", None) == "text" for c in content_value):
            content_value = "\n".join(c.text for c in content_value)
        elif isinstance(content_value, dict | list):
            try:
                content_value = json.dumps(_plain(content_value))
            except (TypeError, ValueError):
                content_value = str(content_value)
        elif not isinstance(content_value, str):
            content_value = str(content_value)

        return {"content": content_value, "is_error": self.is_error}

    @classmethod
    def from_error(cls, error_message: str) -> "ToolResult":
        """Create a ToolResult instance from an error message."""
        return cls(content=error_message, is_error=True)

    @classmethod
    def from_success(cls, content: Any) -> "ToolResult":
        """Create a ToolResult instance from successful content."""
        return cls(content=content, is_error=False)

    @classmethod
    def from_call_result(cls, result: Any) -> "ToolResult":
        """Create a ToolResult from an MCP ``CallToolResult``.

        The content blocks are kept as returned by the server and ``is_error``
        mirrors the server's ``isError`` flag.
        """
        content = getattr(result, "content", None)
        if content is None and isinstance(result, dict):
            content = result.get("content")
        is_error = bool(getattr(result, "isError", False))
        return cls(content=content, is_error=is_error)

    def __str__(self) -> str:
        return f"ToolResult(content={self.content}, is_error={self.is_error})"
