"""Subprocess helpers for running external commands."""

import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Protocol

_READ_CHUNK_BYTES = 64 * 1024


@dataclass(frozen=True)
class CommandRequest:
    """Typed command invocation request.

    ``max_output_bytes`` caps how much stdout is buffered; the process is
    killed once the cap is exceeded and the result is marked ``truncated``.
    """

    argv: tuple[str, ...]
    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    capture_output: bool = True
    text: bool = True
    timeout_seconds: float | None = None
    stdin: int | None = None
    max_output_bytes: int | None = None


@dataclass(frozen=True)
class CommandResult:
    """Typed command execution result."""

    argv: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str
    timed_out: bool = False
    truncated: bool = False

    @property
    def output(self) -> str:
        """Combined stderr and stdout text, stripped."""
        return "\n".join(
            part for part in (self.stderr.strip(), self.stdout.strip()) if part
        )


class CommandRunner(Protocol):
    """Runtime command-execution interface."""

    def run(self, request: CommandRequest) -> CommandResult | None: ...


class SubprocessCommandRunner:
    """Default command-runner adapter backed by subprocess."""

    def run(self, request: CommandRequest) -> CommandResult | None:
        if request.max_output_bytes is not None:
            return self._run_capped(request, request.max_output_bytes)
        run_kwargs: dict[str, object] = {
            "cwd": request.cwd,
            "env": request.env,
            "check": False,
        }
        if request.capture_output:
            run_kwargs["capture_output"] = True
            run_kwargs["text"] = request.text
            if request.text:
                run_kwargs["encoding"] = "utf-8"
                run_kwargs["errors"] = "replace"
        if request.timeout_seconds is not None:
            run_kwargs["timeout"] = request.timeout_seconds
        if request.stdin is not None:
            run_kwargs["stdin"] = request.stdin
        try:
            completed = subprocess.run(list(request.argv), **run_kwargs)
        except FileNotFoundError:
            return None
        except subprocess.TimeoutExpired as exc:
            stdout = (exc.stdout or "") if isinstance(exc.stdout, str) else ""
            stderr = (exc.stderr or "") if isinstance(exc.stderr, str) else ""
            return CommandResult(
                argv=request.argv,
                returncode=124,
                stdout=stdout,
                stderr=stderr,
                timed_out=True,
            )

        stdout = completed.stdout if isinstance(completed.stdout, str) else ""
        stderr = completed.stderr if isinstance(completed.stderr, str) else ""
        return CommandResult(
            argv=request.argv,
            returncode=completed.returncode,
            stdout=stdout,
            stderr=stderr,
        )

    def _run_capped(self, request: CommandRequest, limit: int) -> CommandResult | None:
        # stderr goes to a file so a chatty process cannot block on a full pipe
        # while stdout is being drained.
        with tempfile.TemporaryFile() as stderr_file:
            try:
                process = subprocess.Popen(
                    list(request.argv),
                    cwd=request.cwd,
                    env=request.env,
                    stdin=request.stdin,
                    stdout=subprocess.PIPE,
                    stderr=stderr_file,
                )
            except FileNotFoundError:
                return None
            chunks: list[bytes] = []
            total = 0
            truncated = False
            assert process.stdout is not None
            with process.stdout:
                while True:
                    chunk = process.stdout.read(_READ_CHUNK_BYTES)
                    if not chunk:
                        break
                    total += len(chunk)
                    if total > limit:
                        truncated = True
                        process.kill()
                        break
                    chunks.append(chunk)
            returncode = process.wait()
            stderr_file.seek(0)
            stderr = stderr_file.read().decode("utf-8", errors="replace")
        return CommandResult(
            argv=request.argv,
            returncode=returncode,
            stdout=b"".join(chunks).decode("utf-8", errors="replace"),
            stderr=stderr,
            truncated=truncated,
        )


_DEFAULT_COMMAND_RUNNER: CommandRunner = SubprocessCommandRunner()


def run_with_runner(
    request: CommandRequest, *, runner: CommandRunner | None = None
) -> CommandResult | None:
    """Execute a typed command request with the given runner."""
    active_runner = runner or _DEFAULT_COMMAND_RUNNER
    return active_runner.run(request)


def missing_command_detail(request: CommandRequest) -> str:
    argv = request.argv
    if not argv:
        return "missing required command"
    return f"missing required command: {argv[0]}"

