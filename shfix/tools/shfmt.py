"""shfmt adapter: canonical formatting via write mode on a scratch copy."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from shfix.engine.patching import rewrite_via_scratch
from shfix.enums import ToolKind
from shfix.tools.base import SubprocessTool
from shfix.tools.types import ToolSpec


def shfmt_options(config: dict[str, Any]) -> tuple[str, ...]:
    opts = ["-i", str(config.get("shfmt_indent", 2))]
    if config.get("shfmt_case_indent", True):
        opts.append("-ci")
    if config.get("shfmt_binary_next_line", True):
        opts.append("-bn")
    return tuple(opts)


def shfmt_spec(config: dict[str, Any]) -> ToolSpec:
    opts = shfmt_options(config)
    return ToolSpec(
        name="shfmt",
        binary="shfmt",
        kind=ToolKind.FORMATTER,
        diagnose_args=("-d", *opts),
        check_args=("-d", *opts),
        write_args=(*opts, "-w"),
    )


class ShfmtTool(SubprocessTool):
    """Formatter: the diff is informational, the fix is a write-mode rerun."""

    def requirements(self) -> list[str]:
        return [self.spec.binary]

    def apply(self, path: Path, diff: str) -> bool:
        return rewrite_via_scratch(
            path,
            lambda scratch: self.spec.argv(self.spec.write_args, scratch),
            runner=self._runner,
        )


def make_shfmt(config: dict[str, Any], **kwargs) -> ShfmtTool:
    return ShfmtTool(shfmt_spec(config), **kwargs)


__all__ = ["ShfmtTool", "make_shfmt", "shfmt_options", "shfmt_spec"]
