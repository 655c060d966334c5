"""Canonical enums for tool and outcome attributes."""

from __future__ import annotations

import enum


class ToolKind(enum.IntEnum):
    """Which role a tool plays. Lower values run first on each file."""

    STYLE_CHECKER = 1
    FORMATTER = 2


class Outcome(enum.StrEnum):
    CLEAN = "clean"
    FIXED = "fixed"
    UNRESOLVED = "unresolved"
    PATCH_FAILED = "patch_failed"
    WOULD_FIX = "would_fix"
