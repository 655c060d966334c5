"""Shebang/executable-bit consistency check. Detection only, never chmods."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from shfix.engine.targets import FileTarget

logger = logging.getLogger(__name__)


def find_permission_mismatches(targets: Iterable[FileTarget]) -> list[str]:
    """Return paths of regular files that start with ``#!`` but are not executable."""
    mismatches: list[str] = []
    for target in targets:
        if not target.is_file:
            continue
        if target.has_shebang and not target.executable:
            logger.debug("permission mismatch: %s (%s)", target.path, target.shebang)
            mismatches.append(str(target.path))
    return mismatches


__all__ = ["find_permission_mismatches"]
