"""Shared utilities: paths, colors, atomic file replacement."""

from __future__ import annotations

import os
import shutil
import sys
import tempfile
from pathlib import Path

PROJECT_ROOT = Path(os.environ.get("SHFIX_ROOT", Path.cwd())).resolve()

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "cyan": "\033[36m",
}

NO_COLOR = os.environ.get("NO_COLOR") is not None


def colorize(text: str, color: str) -> str:
    if NO_COLOR or not sys.stdout.isatty():
        return str(text)
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def rel(path: str | Path) -> str:
    try:
        return str(Path(path).resolve().relative_to(PROJECT_ROOT)).replace("\\", "/")
    except ValueError:
        # Path outside PROJECT_ROOT — normalize to consistent relative form
        return os.path.relpath(str(Path(path).resolve()), str(PROJECT_ROOT)).replace("\\", "/")


# ── Subprocess I/O ─────────────────────────────────────────


def decode_output(data: bytes | str | None) -> str:
    """Decode captured tool output without losing bytes or carriage returns.

    Undecodable bytes become lone surrogates, so ``encode_input`` gives
    back exactly what the tool wrote.
    """
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", "surrogateescape")


def encode_input(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")


def displayable(text: str) -> str:
    """Make decoded tool output safe to print."""
    return encode_input(text).decode("utf-8", "replace")


# ── Atomic file writes ─────────────────────────────────────


def make_scratch_copy(filepath: str | Path) -> Path:
    """Copy *filepath* to a temp file in the same directory and return its path.

    The scratch file keeps the original suffix so tools that sniff the
    dialect from the extension see the same file type.
    """
    p = Path(filepath)
    fd, tmp = tempfile.mkstemp(dir=p.parent, prefix=f".{p.name}.", suffix=p.suffix or ".tmp")
    os.close(fd)
    try:
        shutil.copyfile(p, tmp)
    except BaseException:
        discard_scratch(tmp)
        raise
    return Path(tmp)


def discard_scratch(tmp: str | Path) -> None:
    try:
        os.unlink(tmp)
    except OSError:
        pass


def replace_preserving_mode(tmp: str | Path, filepath: str | Path) -> None:
    """Rename *tmp* over *filepath*, carrying over the original permission bits."""
    shutil.copymode(filepath, tmp)
    os.replace(tmp, filepath)


def safe_write_text(filepath: str | Path, content: str) -> None:
    """Atomically write text to a file using temp+rename."""
    p = Path(filepath)
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=p.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(content)
        if p.exists():
            shutil.copymode(p, tmp)
        os.replace(tmp, str(p))
    except BaseException:
        discard_scratch(tmp)
        raise
