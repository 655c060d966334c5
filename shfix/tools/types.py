"""Tool invocation contracts."""

from __future__ import annotations

from dataclasses import dataclass

from shfix.enums import ToolKind


@dataclass(frozen=True)
class ToolSpec:
    """How to invoke one external tool.

    Each argument tuple is followed by the target path on the command line.
    ``diagnose_args`` must make the tool print a unified diff of its
    suggested corrections; ``check_args`` must make it exit non-zero while
    issues remain. ``write_args`` rewrites the file in place and is only
    used by tools that fix by rewriting instead of by patching.
    """

    name: str
    binary: str
    kind: ToolKind
    diagnose_args: tuple[str, ...]
    check_args: tuple[str, ...]
    write_args: tuple[str, ...] = ()

    def argv(self, args: tuple[str, ...], path: str) -> list[str]:
        return [self.binary, *args, path]


__all__ = ["ToolSpec"]
