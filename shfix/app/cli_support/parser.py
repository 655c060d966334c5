"""CLI parser construction helpers."""

from __future__ import annotations

import argparse

from shfix.app.cli_support.parser_groups import (
    _add_check_perms_parser,
    _add_config_parser,
    _add_install_hook_parser,
    _add_run_parser,
)

USAGE_EXAMPLES = """
workflow:
  run <tool> [FILE ...]         Fix, re-check, and summarize (tool: shellcheck, shfmt, all)
  check-perms [FILE ...]        List shebang files missing the executable bit
  install-hook                  Install a git pre-commit hook running `shfix run all`
  config show                   Show configuration

examples:
  shfix run all scripts/deploy.sh scripts/lib.sh
  shfix run shellcheck --dry-run build.sh
  shfix run shfmt --skip-permissions hooks/*.sh
  shfix run all --fail-on-fix
  shfix config set shfmt_indent 4
  shfix config set shellcheck_exclude SC1091
"""


class _NoAbbrevArgumentParser(argparse.ArgumentParser):
    """Argparse parser variant that disables long-option abbreviation."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("allow_abbrev", False)
        super().__init__(*args, **kwargs)


def create_parser(*, selectors: list[str]) -> argparse.ArgumentParser:
    """Build top-level CLI parser with all subcommands."""
    parser = _NoAbbrevArgumentParser(
        prog="shfix",
        description="shfix — auto-fix shell scripts with shellcheck and shfmt",
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--debug", action="store_true", help="Log debug detail to stderr"
    )
    sub = parser.add_subparsers(
        dest="command",
        required=True,
        parser_class=_NoAbbrevArgumentParser,
    )
    _add_run_parser(sub, selectors)
    _add_check_perms_parser(sub)
    _add_install_hook_parser(sub, selectors)
    _add_config_parser(sub)
    return parser


__all__ = ["USAGE_EXAMPLES", "create_parser"]
