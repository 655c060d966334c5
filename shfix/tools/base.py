"""Capability interface for external fixers, plus the subprocess-backed default."""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable

from shfix.core.errors import ToolNotFoundError
from shfix.engine.patching import BACKEND_BINARIES, apply_diff
from shfix.enums import ToolKind
from shfix.tools.types import ToolSpec
from shfix.utils import decode_output

logger = logging.getLogger(__name__)


@runtime_checkable
class Tool(Protocol):
    """What the runner needs from a checker.

    ``diagnose`` returns a unified diff of suggested fixes (``""`` when
    there is nothing to apply). ``apply`` applies it and reports success;
    a False return means the file was left untouched. ``check`` returns
    remaining diagnostics (``""`` when clean).
    """

    name: str
    kind: ToolKind

    def requirements(self) -> list[str]: ...

    def diagnose(self, path: Path) -> str: ...

    def apply(self, path: Path, diff: str) -> bool: ...

    def check(self, path: Path) -> str: ...


class SubprocessTool:
    """Tool driven by a ToolSpec; fixes are applied by patching a scratch copy."""

    def __init__(
        self,
        spec: ToolSpec,
        *,
        patch_backend: str = "patch",
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        self.spec = spec
        self.patch_backend = patch_backend
        self._runner = runner

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def kind(self) -> ToolKind:
        return self.spec.kind

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.spec.name!r})"

    def requirements(self) -> list[str]:
        """Binaries that must be on PATH for this tool to work."""
        return [self.spec.binary, BACKEND_BINARIES[self.patch_backend]]

    def _run(self, args: tuple[str, ...], path: Path) -> subprocess.CompletedProcess | None:
        argv = self.spec.argv(args, str(path))
        logger.debug("%s: running %s", self.name, " ".join(argv))
        try:
            return self._runner(argv, capture_output=True)
        except FileNotFoundError as exc:
            raise ToolNotFoundError(self.spec.binary) from exc
        except OSError as exc:
            logger.debug("%s: OSError on %s: %s", self.name, path, exc)
            return None

    def diagnose(self, path: Path) -> str:
        result = self._run(self.spec.diagnose_args, path)
        if result is None:
            return ""
        diff = decode_output(result.stdout)
        if diff.strip() and not _looks_like_diff(diff):
            logger.debug("%s: ignoring non-diff output for %s", self.name, path)
            return ""
        return diff if diff.strip() else ""

    def apply(self, path: Path, diff: str) -> bool:
        return apply_diff(path, diff, backend=self.patch_backend, runner=self._runner)

    def check(self, path: Path) -> str:
        result = self._run(self.spec.check_args, path)
        if result is None:
            return f"{self.name} could not be run on {path}"
        if result.returncode == 0:
            return ""
        output = "\n".join(
            part.strip()
            for part in (decode_output(result.stdout), decode_output(result.stderr))
            if part.strip()
        )
        return output or f"{self.name} exited with status {result.returncode}"


def _looks_like_diff(text: str) -> bool:
    return any(line.startswith(("--- ", "+++ ", "@@")) for line in text.split("\n"))


def missing_requirement(tools: list[Tool], which: Callable[[str], str | None] = shutil.which) -> str | None:
    """Return the first required binary that is not on PATH, or None."""
    seen: set[str] = set()
    for tool in tools:
        for binary in tool.requirements():
            if binary in seen:
                continue
            seen.add(binary)
            if which(binary) is None:
                return binary
    return None


__all__ = ["SubprocessTool", "Tool", "missing_requirement"]
