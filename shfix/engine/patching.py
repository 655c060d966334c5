"""Apply unified diffs to a scratch copy, then swap it in atomically.

The original file is never patched directly. A failed or partial patch
only ever touches the scratch copy, which is discarded; a clean patch is
renamed over the original with its permission bits preserved.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path

from shfix.core.errors import PatchApplyError, ToolNotFoundError
from shfix.utils import (
    decode_output,
    discard_scratch,
    encode_input,
    make_scratch_copy,
    replace_preserving_mode,
)

logger = logging.getLogger(__name__)

BACKEND_BINARIES = {"patch": "patch", "git": "git"}


def _ensure_trailing_newline(diff: str) -> str:
    return diff if diff.endswith("\n") else diff + "\n"


def _scratch_or_none(target: Path) -> Path | None:
    try:
        return make_scratch_copy(target)
    except OSError as exc:
        logger.debug("could not create scratch copy of %s: %s", target, exc)
        return None


def retarget_diff(diff: str, name: str) -> str:
    """Rewrite the ``---``/``+++`` headers of *diff* to point at *name*.

    ``diff --git`` lines are dropped so git derives the target from the
    rewritten headers. A header pair is only recognised when a hunk
    header follows it, so hunk lines that happen to start with ``---``
    are left alone. Lines are split on newlines only, so CRLF hunks keep
    their carriage returns.
    """
    lines = diff[:-1].split("\n") if diff.endswith("\n") else diff.split("\n")
    out: list[str] = []
    for i, line in enumerate(lines):
        if line.startswith("diff "):
            continue
        nxt = lines[i + 1] if i + 1 < len(lines) else ""
        after = lines[i + 2] if i + 2 < len(lines) else ""
        prev = lines[i - 1] if i > 0 else ""
        if line.startswith("--- ") and nxt.startswith("+++ ") and after.startswith("@@"):
            out.append(f"--- {name}")
        elif line.startswith("+++ ") and prev.startswith("--- ") and nxt.startswith("@@"):
            out.append(f"+++ {name}")
        else:
            out.append(line)
    return "\n".join(out) + "\n"


def _invoke(
    argv: list[str],
    diff: str,
    *,
    cwd: Path | None,
    target: Path,
    runner: Callable[..., subprocess.CompletedProcess],
) -> None:
    logger.debug("applying patch: %s (cwd=%s)", " ".join(argv), cwd)
    try:
        result = runner(argv, input=encode_input(diff), capture_output=True, cwd=cwd)
    except FileNotFoundError as exc:
        raise ToolNotFoundError(argv[0]) from exc
    except OSError as exc:
        raise PatchApplyError(str(target), str(exc)) from exc
    if result.returncode != 0:
        detail = (decode_output(result.stderr) or decode_output(result.stdout)).strip()
        raise PatchApplyError(str(target), detail)


def patch_scratch(
    scratch: Path,
    diff: str,
    *,
    backend: str = "patch",
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> None:
    """Apply *diff* to *scratch* in place. Raises PatchApplyError on failure."""
    diff = _ensure_trailing_newline(diff)
    if backend == "git":
        argv = ["git", "apply", "-p0", "--unsafe-paths", "--whitespace=nowarn", "-"]
        _invoke(
            argv,
            retarget_diff(diff, scratch.name),
            cwd=scratch.parent,
            target=scratch,
            runner=runner,
        )
        return
    if backend != "patch":
        raise ValueError(f"Unknown patch backend: {backend}")
    argv = [
        "patch",
        "--quiet",
        "--forward",
        "--batch",
        "--binary",
        "--no-backup-if-mismatch",
        "--reject-file=-",
        str(scratch),
    ]
    _invoke(argv, diff, cwd=None, target=scratch, runner=runner)


def apply_diff(
    path: str | Path,
    diff: str,
    *,
    backend: str = "patch",
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> bool:
    """Patch *path* through a same-directory scratch copy.

    Returns False (original untouched) when the diff does not apply.
    ToolNotFoundError propagates when the patch tool itself is missing.
    """
    target = Path(path)
    scratch = _scratch_or_none(target)
    if scratch is None:
        return False
    try:
        patch_scratch(scratch, diff, backend=backend, runner=runner)
    except PatchApplyError as exc:
        logger.debug("%s", exc)
        discard_scratch(scratch)
        return False
    except BaseException:
        discard_scratch(scratch)
        raise
    replace_preserving_mode(scratch, target)
    return True


def rewrite_via_scratch(
    path: str | Path,
    argv_for: Callable[[str], list[str]],
    *,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> bool:
    """Run an in-place rewriting command on a scratch copy of *path*.

    *argv_for* receives the scratch path and returns the command line.
    The scratch copy replaces the original only when the command exits 0.
    """
    target = Path(path)
    scratch = _scratch_or_none(target)
    if scratch is None:
        return False
    try:
        argv = argv_for(str(scratch))
        logger.debug("rewriting scratch copy: %s", " ".join(argv))
        try:
            result = runner(argv, capture_output=True)
        except FileNotFoundError as exc:
            raise ToolNotFoundError(argv[0]) from exc
        except OSError as exc:
            logger.debug("rewrite of %s failed: %s", target, exc)
            discard_scratch(scratch)
            return False
        if result.returncode != 0:
            logger.debug(
                "rewrite of %s exited %d: %s",
                target,
                result.returncode,
                decode_output(result.stderr).strip(),
            )
            discard_scratch(scratch)
            return False
    except BaseException:
        discard_scratch(scratch)
        raise
    replace_preserving_mode(scratch, target)
    return True


__all__ = [
    "BACKEND_BINARIES",
    "apply_diff",
    "patch_scratch",
    "retarget_diff",
    "rewrite_via_scratch",
]
