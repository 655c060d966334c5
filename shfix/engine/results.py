"""Per-file results and the run summary they fold into."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from shfix.enums import Outcome


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one tool on one file."""

    path: str
    tool: str
    diagnostics: str = ""
    diff: str = ""
    fixed: bool = False
    unresolved: bool = False
    patch_failed: bool = False
    would_fix: bool = False

    @property
    def outcome(self) -> Outcome:
        if self.patch_failed:
            return Outcome.PATCH_FAILED
        if self.would_fix:
            return Outcome.WOULD_FIX
        if self.unresolved:
            return Outcome.UNRESOLVED
        if self.fixed:
            return Outcome.FIXED
        return Outcome.CLEAN


@dataclass
class RunSummary:
    """Aggregate over one invocation. Determines the process exit status."""

    tools: list[str] = field(default_factory=list)
    results: list[CheckResult] = field(default_factory=list)
    fixed: dict[str, list[str]] = field(default_factory=dict)
    unresolved: dict[str, list[CheckResult]] = field(default_factory=dict)
    permission_errors: list[str] = field(default_factory=list)
    missing_tool: str | None = None
    unknown_tool: str | None = None
    dry_run: bool = False
    fail_on_fix: bool = False

    def record(self, result: CheckResult) -> None:
        self.results.append(result)
        if result.fixed:
            self.fixed.setdefault(result.path, []).append(result.tool)
        if result.unresolved:
            self.unresolved.setdefault(result.path, []).append(result)

    @property
    def checked(self) -> list[str]:
        return list(dict.fromkeys(r.path for r in self.results))

    @property
    def aborted(self) -> bool:
        return bool(self.missing_tool or self.unknown_tool or self.permission_errors)

    @property
    def success(self) -> bool:
        if self.aborted or self.unresolved:
            return False
        if self.fail_on_fix and self.fixed:
            return False
        return True

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "exit_code": self.exit_code,
            "dry_run": self.dry_run,
            "tools": list(self.tools),
            "checked": self.checked,
            "fixed": {path: list(tools) for path, tools in self.fixed.items()},
            "unresolved": {
                path: [
                    {
                        "tool": r.tool,
                        "outcome": str(r.outcome),
                        "diagnostics": r.diagnostics,
                    }
                    for r in results
                ]
                for path, results in self.unresolved.items()
            },
            "permission_errors": list(self.permission_errors),
            "missing_tool": self.missing_tool,
            "unknown_tool": self.unknown_tool,
        }


__all__ = ["CheckResult", "RunSummary"]
