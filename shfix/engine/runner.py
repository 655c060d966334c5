"""Auto-fix runner: diagnose, apply, re-check, fold into a RunSummary."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from shfix.core.config import load_config
from shfix.core.errors import ToolNotFoundError, UnknownToolError
from shfix.engine.permissions import find_permission_mismatches
from shfix.engine.results import CheckResult, RunSummary
from shfix.engine.targets import FileTarget
from shfix.tools.base import Tool, missing_requirement
from shfix.tools.registry import resolve_tools

logger = logging.getLogger(__name__)


def fix_file(tool: Tool, path: Path, *, dry_run: bool = False) -> CheckResult:
    """Run one tool over one file.

    A diff that cannot be applied leaves the file untouched and marks it
    unresolved. Diagnostics left after a successful fix also mark it
    unresolved, but the fix is kept.
    """
    key = str(path)
    diff = tool.diagnose(path)

    if dry_run:
        if diff:
            return CheckResult(key, tool.name, diagnostics=diff, diff=diff,
                               unresolved=True, would_fix=True)
        remaining = tool.check(path)
        return CheckResult(key, tool.name, diagnostics=remaining, unresolved=bool(remaining))

    fixed = False
    if diff:
        if not tool.apply(path, diff):
            logger.debug("%s: patch failed for %s, original kept", tool.name, path)
            return CheckResult(key, tool.name, diagnostics=tool.check(path), diff=diff,
                               unresolved=True, patch_failed=True)
        fixed = True
        logger.debug("%s: applied fix to %s", tool.name, path)

    remaining = tool.check(path)
    return CheckResult(key, tool.name, diagnostics=remaining, diff=diff,
                       fixed=fixed, unresolved=bool(remaining))


def run(
    selector: str,
    paths: Iterable[str | Path],
    *,
    config: dict[str, Any] | None = None,
    dry_run: bool = False,
    check_permissions: bool | None = None,
    fail_on_fix: bool | None = None,
    patch_backend: str | None = None,
    tools: list[Tool] | None = None,
    which: Callable[[str], str | None] = shutil.which,
    on_result: Callable[[CheckResult], None] | None = None,
) -> RunSummary:
    """Fix every shell file in *paths* with the tools named by *selector*.

    Keyword overrides take precedence over *config*. *tools* bypasses the
    registry (the selector is then only informational). *on_result* sees
    each result once the run completes; an aborted run reports none.
    """
    config = config if config is not None else load_config()
    if check_permissions is None:
        check_permissions = bool(config.get("check_permissions", True))
    if fail_on_fix is None:
        fail_on_fix = bool(config.get("fail_on_fix", False))
    backend = patch_backend or config.get("patch_backend", "patch")

    summary = RunSummary(dry_run=dry_run, fail_on_fix=fail_on_fix)

    if tools is None:
        try:
            tools = resolve_tools(selector, config, patch_backend=backend)
        except UnknownToolError as exc:
            summary.unknown_tool = exc.name
            return summary
    else:
        tools = sorted(tools, key=lambda tool: tool.kind)
    summary.tools = [tool.name for tool in tools]

    extensions = tuple(config.get("extensions") or ())
    targets = [FileTarget.from_path(p, extensions) for p in paths]

    if check_permissions:
        summary.permission_errors = find_permission_mismatches(targets)
        if summary.permission_errors:
            return summary

    eligible: list[FileTarget] = []
    for target in targets:
        if not target.is_file:
            logger.debug("skipping %s: not a regular file", target.path)
        elif not target.is_shell:
            logger.debug("skipping %s: not a shell script", target.path)
        else:
            eligible.append(target)
    if not eligible:
        return summary

    missing = missing_requirement(tools, which)
    if missing:
        summary.missing_tool = missing
        return summary

    results: list[CheckResult] = []
    try:
        for target in eligible:
            for tool in tools:
                results.append(fix_file(tool, target.path, dry_run=dry_run))
    except ToolNotFoundError as exc:
        # Disappeared from PATH between the availability check and the call.
        summary.missing_tool = exc.tool
        return summary

    for result in results:
        summary.record(result)
        if on_result is not None:
            on_result(result)
    return summary


__all__ = ["fix_file", "run"]
