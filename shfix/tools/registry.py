"""Tool registry — maps CLI tool selectors to configured Tool instances."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from shfix.core.errors import UnknownToolError
from shfix.tools.base import Tool
from shfix.tools.shellcheck import make_shellcheck
from shfix.tools.shfmt import make_shfmt

TOOL_FACTORIES: dict[str, Callable[..., Tool]] = {
    "shellcheck": make_shellcheck,
    "shfmt": make_shfmt,
}

SELECTORS: dict[str, tuple[str, ...]] = {
    "shellcheck": ("shellcheck",),
    "shfmt": ("shfmt",),
    "all": ("shellcheck", "shfmt"),
}


def selector_names() -> list[str]:
    return list(SELECTORS)


def resolve_tools(selector: str, config: dict[str, Any], **kwargs) -> list[Tool]:
    """Build the tools named by *selector*, style checkers before formatters."""
    names = SELECTORS.get(selector)
    if names is None:
        raise UnknownToolError(selector, selector_names())
    tools = [TOOL_FACTORIES[name](config, **kwargs) for name in names]
    return sorted(tools, key=lambda tool: tool.kind)


__all__ = ["SELECTORS", "TOOL_FACTORIES", "resolve_tools", "selector_names"]
