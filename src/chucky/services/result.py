"""Result rendering shared by every command.

A command produces either a success payload or a ``ServiceFailure``. This
module turns either into human text, a JSON document or nothing (quiet),
and maps failures to their process exit code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping, NoReturn

from rich.text import Text

from .. import log
from ..io import say_json
from .errors import ExitCode, ServiceFailure


@dataclass(frozen=True)
class OutputOptions:
    """How a command reports its result.

    Attributes:
        json: Emit structured JSON documents.
        quiet: Emit nothing; only the exit code is meaningful.
    """

    json: bool = False
    quiet: bool = False

    @property
    def human(self) -> bool:
        return not (self.json or self.quiet)


def _print(text: Text, *, stderr: bool = False) -> None:
    log.console(stderr=stderr).print(text)


def emit(
    payload: Mapping[str, object],
    options: OutputOptions,
    *,
    human: Callable[[], None],
) -> None:
    """Report a success payload.

    Args:
        payload: Machine-readable result.
        options: Output mode.
        human: Renderer used in human mode.
    """
    if options.quiet:
        return
    if options.json:
        say_json(dict(payload))
        return
    human()


def render_failure(failure: ServiceFailure, options: OutputOptions) -> ExitCode:
    """Report a failure and return the exit code it maps to."""
    if options.quiet:
        return failure.exit_code
    if options.json:
        say_json(failure.to_payload())
        return failure.exit_code
    _print(Text(f"Error: {failure.message}", style="bold red"), stderr=True)
    files = failure.details.get("files")
    if isinstance(files, (list, tuple)):
        for path in files:
            _print(Text(f"  - {path}", style="dim"), stderr=True)
    if failure.recovery_hint:
        _print(Text(failure.recovery_hint, style="yellow"), stderr=True)
    return failure.exit_code


def exit_with_failure(failure: ServiceFailure, options: OutputOptions) -> NoReturn:
    """Render a failure and terminate with its exit code."""
    raise SystemExit(int(render_failure(failure, options)))
