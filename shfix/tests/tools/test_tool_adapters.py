"""Tests for the shellcheck/shfmt adapters and the tool registry."""

from __future__ import annotations

import os
import re
import shutil
import stat
import subprocess
from pathlib import Path

import pytest

from shfix.core.config import default_config
from shfix.core.errors import ToolNotFoundError, UnknownToolError
from shfix.enums import ToolKind
from shfix.tools.base import SubprocessTool, Tool, missing_requirement
from shfix.tools.registry import resolve_tools, selector_names
from shfix.tools.shellcheck import make_shellcheck, shellcheck_spec
from shfix.tools.shfmt import ShfmtTool, make_shfmt, shfmt_spec

SC_DIFF = (
    "--- a/x.sh\n"
    "+++ b/x.sh\n"
    "@@ -1,2 +1,2 @@\n"
    " #!/bin/sh\n"
    "-echo $1\n"
    '+echo "$1"\n'
)


class _Runner:
    """Records argv and replies from a queue of (rc, stdout, stderr)."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls: list[list[str]] = []

    def __call__(self, argv, **kwargs):
        self.calls.append(argv)
        rc, out, err = self.replies.pop(0)
        return subprocess.CompletedProcess(argv, rc, out, err)


# ── Specs ─────────────────────────────────────────────────────


class TestShellcheckSpec:
    def test_defaults(self):
        spec = shellcheck_spec(default_config())
        assert spec.kind is ToolKind.STYLE_CHECKER
        assert spec.diagnose_args == ("-f", "diff")
        assert spec.check_args == ()

    def test_severity_and_exclusions(self):
        config = default_config()
        config["shellcheck_severity"] = "warning"
        config["shellcheck_exclude"] = ["SC1091", "SC2034"]
        spec = shellcheck_spec(config)
        assert spec.check_args == ("-S", "warning", "-e", "SC1091,SC2034")
        assert spec.diagnose_args == ("-S", "warning", "-e", "SC1091,SC2034", "-f", "diff")

    def test_argv_appends_path(self):
        spec = shellcheck_spec(default_config())
        assert spec.argv(spec.diagnose_args, "x.sh") == ["shellcheck", "-f", "diff", "x.sh"]


class TestShfmtSpec:
    def test_defaults_match_hook_flags(self):
        spec = shfmt_spec(default_config())
        assert spec.kind is ToolKind.FORMATTER
        assert spec.diagnose_args == ("-d", "-i", "2", "-ci", "-bn")
        assert spec.write_args == ("-i", "2", "-ci", "-bn", "-w")

    def test_options_follow_config(self):
        config = default_config()
        config["shfmt_indent"] = 4
        config["shfmt_case_indent"] = False
        config["shfmt_binary_next_line"] = False
        assert shfmt_spec(config).check_args == ("-d", "-i", "4")


# ── SubprocessTool ────────────────────────────────────────────


class TestSubprocessTool:
    def test_satisfies_tool_protocol(self):
        assert isinstance(make_shellcheck(default_config()), Tool)
        assert isinstance(make_shfmt(default_config()), Tool)

    def test_diagnose_returns_diff(self):
        runner = _Runner((1, SC_DIFF, ""))
        tool = make_shellcheck(default_config(), runner=runner)
        assert tool.diagnose(Path("x.sh")) == SC_DIFF
        assert runner.calls == [["shellcheck", "-f", "diff", "x.sh"]]

    def test_diagnose_empty_when_nothing_fixable(self):
        tool = make_shellcheck(default_config(), runner=_Runner((1, "", "")))
        assert tool.diagnose(Path("x.sh")) == ""

    def test_diagnose_ignores_non_diff_output(self):
        tool = make_shellcheck(default_config(), runner=_Runner((1, "oops\n", "")))
        assert tool.diagnose(Path("x.sh")) == ""

    def test_check_clean(self):
        tool = make_shellcheck(default_config(), runner=_Runner((0, "", "")))
        assert tool.check(Path("x.sh")) == ""

    def test_check_returns_diagnostics(self):
        out = "In x.sh line 2:\necho $1\n     ^-- SC2086\n"
        tool = make_shellcheck(default_config(), runner=_Runner((1, out, "")))
        assert "SC2086" in tool.check(Path("x.sh"))

    def test_check_reports_status_when_silent(self):
        tool = make_shfmt(default_config(), runner=_Runner((1, "", "")))
        assert tool.check(Path("x.sh")) == "shfmt exited with status 1"

    def test_check_includes_stderr(self):
        tool = make_shfmt(
            default_config(), runner=_Runner((1, "", "x.sh:3:1: reached EOF without fi\n"))
        )
        assert "reached EOF" in tool.check(Path("x.sh"))

    def test_undecodable_output_is_kept(self):
        tool = make_shfmt(
            default_config(), runner=_Runner((1, b"", b"x.sh:1:6: caf\xe9 is not closed\n"))
        )
        remaining = tool.check(Path("x.sh"))
        assert remaining == "x.sh:1:6: caf\udce9 is not closed"

    def test_crlf_diff_reaches_patch_byte_for_byte(self, tmp_path):
        raw = b"--- a/x.sh\n+++ b/x.sh\n@@ -1 +1 @@\r\n-echo caf\xe9\r\n+echo 'caf\xe9'\r\n"
        f = tmp_path / "x.sh"
        f.write_bytes(b"echo caf\xe9\r\n")
        fed: list[bytes] = []

        def runner(argv, **kwargs):
            if argv[0] == "patch":
                fed.append(kwargs["input"])
                return subprocess.CompletedProcess(argv, 0, b"", b"")
            return subprocess.CompletedProcess(argv, 1, raw, b"")

        tool = make_shellcheck(default_config(), runner=runner)
        diff = tool.diagnose(f)
        assert diff
        assert tool.apply(f, diff) is True
        assert fed == [raw]

    def test_missing_binary_raises(self):
        def runner(argv, **kwargs):
            raise FileNotFoundError(argv[0])

        tool = make_shellcheck(default_config(), runner=runner)
        with pytest.raises(ToolNotFoundError) as exc_info:
            tool.diagnose(Path("x.sh"))
        assert exc_info.value.tool == "shellcheck"

    def test_os_error_becomes_diagnostic(self):
        def runner(argv, **kwargs):
            raise PermissionError("denied")

        tool = make_shellcheck(default_config(), runner=runner)
        assert tool.diagnose(Path("x.sh")) == ""
        assert "could not be run" in tool.check(Path("x.sh"))

    def test_requirements_include_patch_backend(self):
        assert make_shellcheck(default_config()).requirements() == ["shellcheck", "patch"]
        git = make_shellcheck(default_config(), patch_backend="git")
        assert git.requirements() == ["shellcheck", "git"]
        assert make_shfmt(default_config()).requirements() == ["shfmt"]


class TestShfmtApply:
    def test_write_mode_runs_on_scratch(self, tmp_path):
        f = tmp_path / "x.sh"
        f.write_text("if true; then\necho hi\nfi\n")
        os.chmod(f, 0o755)
        seen: list[list[str]] = []

        def runner(argv, **kwargs):
            seen.append(argv)
            Path(argv[-1]).write_text("if true; then\n  echo hi\nfi\n")
            return subprocess.CompletedProcess(argv, 0, "", "")

        tool = make_shfmt(default_config(), runner=runner)
        assert isinstance(tool, ShfmtTool)
        assert tool.apply(f, "ignored") is True

        assert seen[0][:-1] == ["shfmt", "-i", "2", "-ci", "-bn", "-w"]
        assert seen[0][-1] != str(f)
        assert f.read_text() == "if true; then\n  echo hi\nfi\n"
        assert stat.S_IMODE(f.stat().st_mode) == 0o755

    def test_failed_write_keeps_original(self, tmp_path):
        f = tmp_path / "x.sh"
        f.write_text("if true; then\n")

        def runner(argv, **kwargs):
            return subprocess.CompletedProcess(argv, 1, "", "reached EOF without fi")

        assert make_shfmt(default_config(), runner=runner).apply(f, "") is False
        assert f.read_text() == "if true; then\n"
        assert [p.name for p in tmp_path.iterdir()] == ["x.sh"]


# ── Registry ──────────────────────────────────────────────────


class TestRegistry:
    def test_selector_names(self):
        assert selector_names() == ["shellcheck", "shfmt", "all"]

    def test_all_orders_style_before_format(self):
        tools = resolve_tools("all", default_config())
        assert [t.name for t in tools] == ["shellcheck", "shfmt"]

    @pytest.mark.parametrize("name", ["shellcheck", "shfmt"])
    def test_single(self, name):
        (tool,) = resolve_tools(name, default_config())
        assert tool.name == name
        assert isinstance(tool, SubprocessTool)

    def test_unknown(self):
        with pytest.raises(UnknownToolError, match="Unknown tool: shfmtt") as exc_info:
            resolve_tools("shfmtt", default_config())
        assert "all" in exc_info.value.available

    def test_patch_backend_passed_through(self):
        (tool,) = resolve_tools("shellcheck", default_config(), patch_backend="git")
        assert tool.patch_backend == "git"


class TestMissingRequirement:
    def test_first_missing(self):
        tools = resolve_tools("all", default_config())
        present = {"shellcheck", "patch"}
        assert missing_requirement(tools, lambda b: b if b in present else None) == "shfmt"

    def test_none_missing(self):
        tools = resolve_tools("all", default_config())
        assert missing_requirement(tools, lambda b: f"/bin/{b}") is None


# ── End to end with the real tools ───────────────────────────


def _shellcheck_supports_diff() -> bool:
    if shutil.which("shellcheck") is None:
        return False
    out = subprocess.run(["shellcheck", "--version"], capture_output=True, text=True).stdout
    match = re.search(r"version: (\d+)\.(\d+)", out)
    return bool(match) and (int(match.group(1)), int(match.group(2))) >= (0, 7)


@pytest.mark.skipif(
    not (_shellcheck_supports_diff() and shutil.which("shfmt") and shutil.which("patch")),
    reason="shellcheck>=0.7, shfmt and patch required",
)
def test_real_tools_fix_quoting_and_indentation(tmp_path):
    from shfix.engine.runner import run

    f = tmp_path / "a.sh"
    f.write_text('#!/bin/bash\nif [ -n "$1" ]; then\n      echo $1\nfi\n')
    os.chmod(f, 0o755)

    summary = run("all", [str(f)], config=default_config())

    assert summary.exit_code == 0, summary.to_dict()
    assert summary.fixed == {str(f): ["shellcheck", "shfmt"]}
    assert f.read_text() == '#!/bin/bash\nif [ -n "$1" ]; then\n  echo "$1"\nfi\n'
    assert stat.S_IMODE(f.stat().st_mode) == 0o755

    again = run("all", [str(f)], config=default_config())
    assert again.fixed == {}
    assert again.exit_code == 0


@pytest.mark.skipif(shutil.which("sh") is None, reason="POSIX sh required")
def test_latin1_tool_output_does_not_crash_run(tmp_path, monkeypatch):
    from shfix.engine.runner import run

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    fake = bin_dir / "shfmt"
    fake.write_bytes(b"#!/bin/sh\nprintf 'a.sh:1:1: caf\\351\\n' >&2\nexit 1\n")
    os.chmod(fake, 0o755)
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")

    f = tmp_path / "a.sh"
    f.write_bytes(b"#!/bin/sh\necho caf\xe9\n")
    os.chmod(f, 0o755)

    summary = run("shfmt", [str(f)], config=default_config())

    assert summary.exit_code == 1
    (result,) = summary.unresolved[str(f)]
    assert "caf\udce9" in result.diagnostics
    assert f.read_bytes() == b"#!/bin/sh\necho caf\xe9\n"
