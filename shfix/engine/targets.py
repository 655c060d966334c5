"""File targets: what was passed on the command line and whether it is worth fixing."""

from __future__ import annotations

import logging
import os
import stat
import subprocess
from dataclasses import dataclass
from pathlib import Path

from shfix.utils import decode_output

logger = logging.getLogger(__name__)

SHELL_INTERPRETERS = frozenset({"sh", "bash", "dash", "ksh", "mksh", "bats"})
_SHEBANG_READ_BYTES = 256


def read_shebang(path: Path) -> str | None:
    """Return the first line of *path* if it is an interpreter directive."""
    try:
        with open(path, "rb") as f:
            head = f.read(_SHEBANG_READ_BYTES)
    except OSError:
        return None
    if not head.startswith(b"#!"):
        return None
    return head.split(b"\n", 1)[0].decode("utf-8", errors="replace").rstrip("\r")


def shebang_interpreter(line: str) -> str | None:
    """Extract the interpreter name from a ``#!`` line.

    ``#!/usr/bin/env bash`` and ``#!/usr/bin/env -S bash -e`` both yield
    ``bash``; ``#!/bin/sh -e`` yields ``sh``.
    """
    parts = line[2:].split()
    if not parts:
        return None
    name = os.path.basename(parts[0])
    if name == "env":
        rest = [p for p in parts[1:] if not p.startswith("-") and "=" not in p]
        if not rest:
            return None
        name = os.path.basename(rest[0])
    return name or None


@dataclass(frozen=True)
class FileTarget:
    path: Path
    is_file: bool
    executable: bool = False
    shebang: str | None = None
    is_shell: bool = False

    @property
    def has_shebang(self) -> bool:
        return self.shebang is not None

    @classmethod
    def from_path(cls, raw: str | Path, extensions: list[str] | tuple[str, ...]) -> FileTarget:
        path = Path(raw)
        try:
            st = path.stat()
        except OSError:
            return cls(path=path, is_file=False)
        if not stat.S_ISREG(st.st_mode):
            return cls(path=path, is_file=False)
        executable = bool(st.st_mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))
        shebang = read_shebang(path)
        interpreter = shebang_interpreter(shebang) if shebang else None
        is_shell = path.suffix in extensions or interpreter in SHELL_INTERPRETERS
        return cls(
            path=path,
            is_file=True,
            executable=executable,
            shebang=shebang,
            is_shell=is_shell,
        )


def staged_files() -> list[str]:
    """Return added/copied/modified/renamed staged paths, absolute.

    Returns an empty list outside a git work tree or when git fails.
    """
    try:
        top = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            capture_output=True,
        )
        if top.returncode != 0:
            logger.debug("not a git work tree: %s", decode_output(top.stderr).strip())
            return []
        diff = subprocess.run(
            ["git", "diff", "--cached", "--name-only", "-z", "--diff-filter=ACMR"],
            capture_output=True,
        )
    except OSError as exc:
        logger.debug("git unavailable: %s", exc)
        return []
    if diff.returncode != 0:
        logger.debug("git diff --cached failed: %s", decode_output(diff.stderr).strip())
        return []
    root = Path(os.fsdecode(top.stdout).strip())
    return [str(root / name) for name in os.fsdecode(diff.stdout).split("\0") if name]


__all__ = [
    "FileTarget",
    "SHELL_INTERPRETERS",
    "read_shebang",
    "shebang_interpreter",
    "staged_files",
]
