"""run command: auto-fix shell files with shellcheck and/or shfmt."""

from __future__ import annotations

import argparse
import json
import sys

from shfix.app.commands.helpers.runtime import command_runtime
from shfix.app.output.summary import print_result, print_summary
from shfix.engine.runner import run
from shfix.engine.targets import staged_files
from shfix.utils import colorize


def _resolve_paths(args: argparse.Namespace) -> list[str]:
    files = list(getattr(args, "files", None) or [])
    if files:
        return files
    staged = staged_files()
    if staged:
        print(
            colorize(f"  Using {len(staged)} staged file(s)", "dim"),
            file=sys.stderr,
        )
    return staged


def cmd_run(args: argparse.Namespace) -> None:
    """Fix the given files (or the staged ones) and exit with the run status."""
    config = command_runtime(args).config
    as_json = getattr(args, "json", False)

    summary = run(
        args.tool,
        _resolve_paths(args),
        config=config,
        dry_run=getattr(args, "dry_run", False),
        check_permissions=False if getattr(args, "skip_permissions", False) else None,
        fail_on_fix=True if getattr(args, "fail_on_fix", False) else None,
        patch_backend=getattr(args, "patch_backend", None),
        on_result=None if as_json else print_result,
    )

    if as_json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary(summary)
    sys.exit(summary.exit_code)


__all__ = ["cmd_run"]
