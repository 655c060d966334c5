"""install-hook command: write a git pre-commit hook that runs shfix."""

from __future__ import annotations

import argparse
import logging
import os
import stat
import subprocess
import sys
from pathlib import Path

from shfix.core.fallbacks import print_error
from shfix.utils import colorize, rel, safe_write_text

logger = logging.getLogger(__name__)

HOOK_MARKER = "# installed by shfix install-hook"


def hook_script(tool: str) -> str:
    return f"#!/bin/sh\n{HOOK_MARKER}\nexec shfix run {tool}\n"


def resolve_hooks_dir(cwd: Path | None = None) -> Path:
    """Return the hooks directory git will use (honours core.hooksPath and worktrees)."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--git-path", "hooks"],
            capture_output=True,
            cwd=cwd,
        )
    except OSError as exc:
        raise RuntimeError(f"git is not available: {exc}") from exc
    if result.returncode != 0:
        raise RuntimeError("not inside a git repository")
    hooks = Path(os.fsdecode(result.stdout).strip())
    if not hooks.is_absolute():
        hooks = (cwd or Path.cwd()) / hooks
    return hooks


def make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def install_hook(hooks_dir: Path, tool: str = "all", *, force: bool = False) -> Path:
    """Write the pre-commit hook. Refuses to replace a foreign hook unless *force*."""
    dest = hooks_dir / "pre-commit"
    if dest.exists() and not force:
        existing = dest.read_text(errors="replace")
        if HOOK_MARKER not in existing:
            raise FileExistsError(f"{dest} exists; pass --force to replace it")
    safe_write_text(dest, hook_script(tool))
    make_executable(dest)
    logger.debug("wrote hook %s", dest)
    return dest


def cmd_install_hook(args: argparse.Namespace) -> None:
    try:
        hooks_dir = resolve_hooks_dir()
        dest = install_hook(
            hooks_dir,
            getattr(args, "tool", "all"),
            force=getattr(args, "force", False),
        )
    except (RuntimeError, FileExistsError, OSError) as exc:
        print_error(str(exc))
        sys.exit(1)
    print(colorize(f"  installed: {rel(dest)}", "green"))


__all__ = ["cmd_install_hook", "hook_script", "install_hook", "resolve_hooks_dir"]
