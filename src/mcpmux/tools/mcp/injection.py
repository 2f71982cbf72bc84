"""Caller-identity injection for selected tools."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from pydantic import BaseModel, ConfigDict

from .descriptor import InjectedToolDescriptor, ToolDescriptor


class InjectionRule(BaseModel):
    """Force ``param_name`` to the caller identity when ``tool_name`` is invoked."""

    model_config = ConfigDict(frozen=True)

    tool_name: str
    param_name: str


# Tools scoped to the calling user
BUILTIN_INJECTION_RULES: tuple[InjectionRule, ...] = (
    InjectionRule(tool_name="cloudflare_rag_search", param_name="user_id"),
)


def apply_injection_rules(
    tools: Mapping[str, ToolDescriptor],
    identity: str,
    rules: Sequence[InjectionRule] = BUILTIN_INJECTION_RULES,
) -> dict[str, ToolDescriptor]:
    """Return a new tool mapping with identity-scoped tools wrapped.

    Tools whose name matches a rule exactly are wrapped in an
    :class:`InjectedToolDescriptor`; all others are passed through by
    reference. Several rules for one tool nest, the last rule outermost.
    """
    by_tool: dict[str, list[InjectionRule]] = {}
    for rule in rules:
        by_tool.setdefault(rule.tool_name, []).append(rule)

    wrapped: dict[str, ToolDescriptor] = {}
    for name, tool in tools.items():
        for rule in by_tool.get(name, ()):
            tool = InjectedToolDescriptor(tool, rule.param_name, identity)
        wrapped[name] = tool
    return wrapped
