"""Terminal rendering for per-file results and the final run summary."""

from __future__ import annotations

import shlex
import sys

from shfix.engine.results import CheckResult, RunSummary
from shfix.utils import colorize, displayable, rel

RULE = "-" * 40


def print_result(result: CheckResult) -> None:
    """One line per notable tool outcome, printed once the run completes."""
    tag = f"[{result.tool}]"
    path = rel(result.path)
    if result.would_fix:
        print(colorize(f"{tag} Would fix {path}:", "yellow"))
        print(displayable(result.diff.rstrip("\n")))
        return
    if result.patch_failed:
        print(
            colorize(f"{tag} ❌ Failed to apply patch for {path}, leaving file untouched", "red"),
            file=sys.stderr,
        )
    elif result.fixed:
        print(colorize(f"{tag} ✅ Auto-fixed {path}", "green"))
    if result.unresolved and result.diagnostics:
        print(colorize(f"{tag} Remaining issues in {path}:", "yellow"))
        print(displayable(result.diagnostics.rstrip("\n")))


def print_summary(summary: RunSummary) -> None:
    if summary.unknown_tool:
        print(colorize(f"Unknown tool: {summary.unknown_tool}", "red"), file=sys.stderr)
        return
    if summary.permission_errors:
        _print_permission_errors(summary.permission_errors)
        return
    if summary.missing_tool:
        print(colorize(f"{summary.missing_tool} not found", "red"), file=sys.stderr)
        return

    print(RULE)
    if not summary.results:
        print(colorize("No shell files to check.", "dim"))
        return
    if summary.fixed:
        print(colorize("✅ Auto-fixed files:", "green"))
        for path in sorted(summary.fixed):
            print(f"  {rel(path)}  ({', '.join(summary.fixed[path])})")
    if summary.unresolved:
        heading = (
            "❌ Files with pending fixes:" if summary.dry_run
            else "❌ Files with remaining issues:"
        )
        print(colorize(heading, "red"))
        for path in sorted(summary.unresolved):
            tools = ", ".join(r.tool for r in summary.unresolved[path])
            print(f"  {rel(path)}  ({tools})")
        return
    if summary.fail_on_fix and summary.fixed:
        print(
            colorize("ℹ️  Please stage the changes and try the commit again.", "yellow"),
            file=sys.stderr,
        )
        return
    print(colorize("🎉 All checked files are clean!", "green"))


def _print_permission_errors(paths: list[str]) -> None:
    print(
        colorize("❌ Files with a shebang but no executable bit:", "red"),
        file=sys.stderr,
    )
    for path in paths:
        print(f"  {rel(path)}", file=sys.stderr)
    print(colorize("  Fix with:", "dim"), file=sys.stderr)
    print(
        colorize(f"    {shlex.join(['chmod', '+x', *(rel(p) for p in paths)])}", "dim"),
        file=sys.stderr,
    )
    print(colorize("  then stage the change and retry.", "dim"), file=sys.stderr)


__all__ = ["RULE", "print_result", "print_summary"]
