"""shellcheck adapter: diff-mode suggestions applied as patches.

``shellcheck -f diff`` prints a unified diff for every warning that has a
mechanical fix (quoting, ``$(...)`` over backticks, and so on). Warnings
without a suggested fix stay in the plain check output and mark the file
unresolved.
"""

from __future__ import annotations

from typing import Any

from shfix.enums import ToolKind
from shfix.tools.base import SubprocessTool
from shfix.tools.types import ToolSpec


def shellcheck_spec(config: dict[str, Any]) -> ToolSpec:
    common: list[str] = []
    severity = config.get("shellcheck_severity") or ""
    if severity:
        common += ["-S", severity]
    exclude = config.get("shellcheck_exclude") or []
    if exclude:
        common += ["-e", ",".join(exclude)]
    return ToolSpec(
        name="shellcheck",
        binary="shellcheck",
        kind=ToolKind.STYLE_CHECKER,
        diagnose_args=(*common, "-f", "diff"),
        check_args=tuple(common),
    )


def make_shellcheck(config: dict[str, Any], **kwargs) -> SubprocessTool:
    return SubprocessTool(shellcheck_spec(config), **kwargs)


__all__ = ["make_shellcheck", "shellcheck_spec"]
