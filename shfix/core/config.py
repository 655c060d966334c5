"""Project config (.shfix/config.json)."""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from shfix.core.fallbacks import log_best_effort_failure
from shfix.utils import PROJECT_ROOT, safe_write_text

CONFIG_FILE = PROJECT_ROOT / ".shfix" / "config.json"
logger = logging.getLogger(__name__)

PATCH_BACKENDS = ("patch", "git")
SHELLCHECK_SEVERITIES = ("", "error", "warning", "info", "style")


@dataclass(frozen=True)
class ConfigKey:
    type: type
    default: object
    description: str


CONFIG_SCHEMA: dict[str, ConfigKey] = {
    "shfmt_indent": ConfigKey(int, 2, "shfmt indent width (0 = tabs)"),
    "shfmt_case_indent": ConfigKey(bool, True, "shfmt: indent switch cases (-ci)"),
    "shfmt_binary_next_line": ConfigKey(
        bool, True, "shfmt: binary operators may start a line (-bn)"
    ),
    "shellcheck_severity": ConfigKey(
        str, "", "shellcheck minimum severity: error, warning, info, style (empty = default)"
    ),
    "shellcheck_exclude": ConfigKey(list, [], "shellcheck codes to exclude (e.g. SC1091)"),
    "extensions": ConfigKey(list, [".sh", ".bash"], "File extensions treated as shell scripts"),
    "check_permissions": ConfigKey(
        bool, True, "Abort when a file has a shebang but no executable bit"
    ),
    "fail_on_fix": ConfigKey(
        bool, False, "Fail the run when files were auto-fixed (forces a restage)"
    ),
    "patch_backend": ConfigKey(str, "patch", "How shellcheck diffs are applied: patch or git"),
}


def default_config() -> dict[str, Any]:
    """Return a config dict with all keys set to their defaults."""
    return {k: copy.deepcopy(v.default) for k, v in CONFIG_SCHEMA.items()}


def _validate_choice(key: str, raw: str, choices: tuple[str, ...]) -> str:
    value = raw.strip().lower()
    if value not in choices:
        allowed = ", ".join(c for c in choices if c) or "(none)"
        raise ValueError(f"Expected one of {allowed} for {key}, got: {raw}")
    return value


def _normalize_value(key: str, value: object) -> object:
    """Validate a loaded value, raising ValueError when it does not fit the schema."""
    schema = CONFIG_SCHEMA[key]
    if schema.type is bool:
        if not isinstance(value, bool):
            raise ValueError(f"{key} must be a boolean")
        return value
    if schema.type is int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"{key} must be a non-negative integer")
        return value
    if schema.type is list:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ValueError(f"{key} must be a list of strings")
        return value
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    if key == "patch_backend":
        return _validate_choice(key, value, PATCH_BACKENDS)
    if key == "shellcheck_severity":
        return _validate_choice(key, value, SHELLCHECK_SEVERITIES)
    return value


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load config from disk.

    Fills missing keys with defaults and resets invalid values to their
    default. A missing or unreadable file yields the default config.
    """
    p = path or CONFIG_FILE
    config: dict[str, Any] = {}
    if p.exists():
        try:
            loaded = json.loads(p.read_text())
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
            logger.debug("Ignoring unreadable config %s: %s", p, exc)
            loaded = {}
        if isinstance(loaded, dict):
            config = loaded

    for key, schema in CONFIG_SCHEMA.items():
        if key not in config:
            config[key] = copy.deepcopy(schema.default)
            continue
        try:
            config[key] = _normalize_value(key, config[key])
        except ValueError as exc:
            log_best_effort_failure(logger, f"use configured {key}", exc)
            config[key] = copy.deepcopy(schema.default)

    return config


def save_config(config: dict, path: Path | None = None) -> None:
    """Save config to disk atomically."""
    p = path or CONFIG_FILE
    safe_write_text(p, json.dumps(config, indent=2) + "\n")


def set_config_value(config: dict, key: str, raw: str) -> None:
    """Parse and set a config value from a raw string.

    Bools accept true/false/yes/no/1/0. List keys append (deduplicated).
    """
    if key not in CONFIG_SCHEMA:
        raise KeyError(f"Unknown config key: {key}")

    schema = CONFIG_SCHEMA[key]

    if schema.type is int:
        try:
            value = int(raw)
        except ValueError as exc:
            raise ValueError(f"Expected integer for {key}, got: {raw}") from exc
        config[key] = _normalize_value(key, value)
    elif schema.type is bool:
        if raw.lower() in ("true", "1", "yes"):
            config[key] = True
        elif raw.lower() in ("false", "0", "no"):
            config[key] = False
        else:
            raise ValueError(f"Expected true/false for {key}, got: {raw}")
    elif schema.type is list:
        config.setdefault(key, [])
        if raw not in config[key]:
            config[key].append(raw)
    else:
        config[key] = _normalize_value(key, raw)


def unset_config_value(config: dict, key: str) -> None:
    """Reset a config key to its default value."""
    if key not in CONFIG_SCHEMA:
        raise KeyError(f"Unknown config key: {key}")
    config[key] = copy.deepcopy(CONFIG_SCHEMA[key].default)


__all__ = [
    "CONFIG_FILE",
    "CONFIG_SCHEMA",
    "ConfigKey",
    "PATCH_BACKENDS",
    "default_config",
    "load_config",
    "save_config",
    "set_config_value",
    "unset_config_value",
]
