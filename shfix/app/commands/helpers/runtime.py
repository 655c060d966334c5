"""Runtime context helpers for command handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from shfix.core.config import load_config


@dataclass(frozen=True)
class CommandRuntime:
    """Explicit runtime dependencies shared by command handlers."""

    config: dict[str, Any]


def command_runtime(args) -> CommandRuntime:
    """Return runtime context from explicit args.runtime or construct one."""
    runtime = getattr(args, "runtime", None)
    if isinstance(runtime, CommandRuntime):
        return runtime
    return CommandRuntime(config=load_config())


__all__ = ["CommandRuntime", "command_runtime"]
