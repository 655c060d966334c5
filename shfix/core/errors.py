"""Exception hierarchy for fatal and per-file failures."""

from __future__ import annotations


class ShfixError(Exception):
    """Base class for shfix errors."""


class ToolNotFoundError(ShfixError):
    """A required external tool is not on PATH. Aborts the whole run."""

    def __init__(self, tool: str):
        super().__init__(f"{tool} not found")
        self.tool = tool


class UnknownToolError(ShfixError):
    def __init__(self, name: str, available: list[str] | None = None):
        super().__init__(f"Unknown tool: {name}")
        self.name = name
        self.available = list(available or [])


class PatchApplyError(ShfixError):
    """A diff could not be applied cleanly to the scratch copy."""

    def __init__(self, path: str, detail: str = ""):
        message = f"failed to apply patch for {path}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.path = path
        self.detail = detail


__all__ = [
    "PatchApplyError",
    "ShfixError",
    "ToolNotFoundError",
    "UnknownToolError",
]
