"""check-perms command: report shebang files that lack the executable bit."""

from __future__ import annotations

import argparse
import sys

from shfix.app.commands.helpers.runtime import command_runtime
from shfix.app.output.summary import print_summary
from shfix.engine.permissions import find_permission_mismatches
from shfix.engine.results import RunSummary
from shfix.engine.targets import FileTarget, staged_files
from shfix.utils import colorize


def cmd_check_perms(args: argparse.Namespace) -> None:
    config = command_runtime(args).config
    extensions = tuple(config.get("extensions") or ())
    paths = list(getattr(args, "files", None) or []) or staged_files()
    targets = [FileTarget.from_path(p, extensions) for p in paths]

    mismatches = find_permission_mismatches(targets)
    if mismatches:
        print_summary(RunSummary(permission_errors=mismatches))
        sys.exit(1)
    print(colorize("Permissions are consistent.", "green"))


__all__ = ["cmd_check_perms"]
