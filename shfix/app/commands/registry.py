"""Central command registry for CLI command handler resolution."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from shfix.app.commands.check_perms_cmd import cmd_check_perms
from shfix.app.commands.config_cmd import cmd_config
from shfix.app.commands.install_hook_cmd import cmd_install_hook
from shfix.app.commands.run_cmd import cmd_run

CommandHandler = Callable[[Any], None]

COMMAND_HANDLERS: dict[str, CommandHandler] = {
    "run": cmd_run,
    "check-perms": cmd_check_perms,
    "install-hook": cmd_install_hook,
    "config": cmd_config,
}

__all__ = ["COMMAND_HANDLERS", "CommandHandler"]
