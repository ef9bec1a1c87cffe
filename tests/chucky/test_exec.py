"""Tests for typed command execution helpers."""

from __future__ import annotations

import shutil
import subprocess
import sys
from pathlib import Path

import pytest

from chucky import exec as exec_util


def test_subprocess_command_runner_forwards_options(monkeypatch: pytest.MonkeyPatch) -> None:
    """Runner returns typed output and forwards execution options."""
    calls: dict[str, object] = {}

    def fake_run(argv: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        calls["argv"] = argv
        calls["kwargs"] = kwargs
        return subprocess.CompletedProcess(argv, 0, stdout="ok", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)

    request = exec_util.CommandRequest(
        argv=("git", "status"),
        cwd=Path("/tmp"),
        timeout_seconds=5.0,
        stdin=subprocess.DEVNULL,
    )
    result = exec_util.SubprocessCommandRunner().run(request)

    assert result == exec_util.CommandResult(
        argv=("git", "status"), returncode=0, stdout="ok", stderr=""
    )
    assert calls["argv"] == ["git", "status"]
    run_kwargs = calls["kwargs"]
    assert isinstance(run_kwargs, dict)
    assert run_kwargs["cwd"] == Path("/tmp")
    assert run_kwargs["timeout"] == 5.0
    assert run_kwargs["stdin"] == subprocess.DEVNULL
    assert run_kwargs["encoding"] == "utf-8"


def test_subprocess_command_runner_returns_none_when_missing_executable(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def fake_run(argv: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        del argv, kwargs
        raise FileNotFoundError

    monkeypatch.setattr(subprocess, "run", fake_run)

    request = exec_util.CommandRequest(argv=("missing-tool",))
    assert exec_util.SubprocessCommandRunner().run(request) is None
    assert exec_util.missing_command_detail(request) == "missing required command: missing-tool"


def test_subprocess_command_runner_reports_timeouts(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(argv: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        raise subprocess.TimeoutExpired(argv, 1.0, output="partial", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)

    result = exec_util.SubprocessCommandRunner().run(
        exec_util.CommandRequest(argv=("git", "fetch"), timeout_seconds=1.0)
    )

    assert result is not None
    assert result.timed_out is True
    assert result.returncode == 124
    assert result.stdout == "partial"


def test_capped_runner_returns_full_output_under_limit() -> None:
    request = exec_util.CommandRequest(
        argv=(sys.executable, "-c", "print('x' * 100)"),
        max_output_bytes=1024,
    )
    result = exec_util.run_with_runner(request)

    assert result is not None
    assert result.truncated is False
    assert result.returncode == 0
    assert result.stdout.strip() == "x" * 100


def test_capped_runner_stops_reading_past_limit() -> None:
    request = exec_util.CommandRequest(
        argv=(sys.executable, "-c", "import sys; sys.stdout.write('y' * 200000)"),
        max_output_bytes=1000,
    )
    result = exec_util.run_with_runner(request)

    assert result is not None
    assert result.truncated is True
    assert len(result.stdout) <= 1000


def test_capped_runner_returns_none_when_missing_executable(tmp_path: Path) -> None:
    missing = tmp_path / "no-such-binary"
    assert shutil.which(str(missing)) is None
    request = exec_util.CommandRequest(argv=(str(missing),), max_output_bytes=10)
    assert exec_util.run_with_runner(request) is None


def test_command_result_output_joins_streams() -> None:
    result = exec_util.CommandResult(
        argv=("git",), returncode=1, stdout=" out \n", stderr=" err \n"
    )
    assert result.output == "err\nout"
