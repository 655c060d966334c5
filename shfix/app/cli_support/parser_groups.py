"""CLI parser subcommand group builders."""

from __future__ import annotations

from shfix.core.config import PATCH_BACKENDS


def _add_run_parser(sub, selectors: list[str]) -> None:
    p_run = sub.add_parser(
        "run",
        help="Auto-fix shell files, re-check, and report",
        epilog=f"tools: {', '.join(selectors)}",
    )
    # Not argparse choices: an unknown tool must exit 1 with our own message.
    p_run.add_argument("tool", type=str, help="Tool to run")
    p_run.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="Files to fix (default: staged files)",
    )
    p_run.add_argument(
        "--dry-run",
        action="store_true",
        help="Show suggested fixes without modifying files",
    )
    p_run.add_argument(
        "--skip-permissions",
        action="store_true",
        help="Skip the shebang/executable-bit pre-check",
    )
    p_run.add_argument(
        "--fail-on-fix",
        action="store_true",
        help="Exit 1 when files were auto-fixed so they get restaged",
    )
    p_run.add_argument(
        "--patch-backend",
        choices=list(PATCH_BACKENDS),
        default=None,
        help="How shellcheck diffs are applied (default: from config)",
    )
    p_run.add_argument("--json", action="store_true", help="Print the summary as JSON")


def _add_check_perms_parser(sub) -> None:
    p_perms = sub.add_parser(
        "check-perms", help="List files with a shebang but no executable bit"
    )
    p_perms.add_argument(
        "files", nargs="*", metavar="FILE", help="Files to check (default: staged files)"
    )


def _add_install_hook_parser(sub, selectors: list[str]) -> None:
    p_hook = sub.add_parser("install-hook", help="Install a git pre-commit hook")
    p_hook.add_argument(
        "--tool",
        choices=selectors,
        default="all",
        help="Tool the hook runs (default: all)",
    )
    p_hook.add_argument(
        "--force", action="store_true", help="Replace an existing pre-commit hook"
    )


def _add_config_parser(sub) -> None:
    p_config = sub.add_parser("config", help="Show/set/unset project configuration")
    config_sub = p_config.add_subparsers(dest="config_action")
    config_sub.add_parser("show", help="Show all config values")
    c_set = config_sub.add_parser("set", help="Set a config value")
    c_set.add_argument("config_key", type=str, help="Config key name")
    c_set.add_argument("config_value", type=str, help="Value to set")
    c_unset = config_sub.add_parser("unset", help="Reset a config key to default")
    c_unset.add_argument("config_key", type=str, help="Config key name")


__all__ = [
    "_add_check_perms_parser",
    "_add_config_parser",
    "_add_install_hook_parser",
    "_add_run_parser",
]
