"""Command-line interface for Chucky."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Optional

import typer

from . import __version__
from . import log as chucky_log
from .commands import apply_changeset as apply_cmd
from .commands import discard_changeset as discard_cmd
from .commands import fetch_changeset as fetch_cmd
from .commands import pull_changeset as pull_cmd
from .commands import list_sessions as sessions_cmd
from .commands import show_diff as diff_cmd
from .commands import show_log as log_cmd
from .commands import wait_for_job as wait_cmd
from .services.changesets.list_sessions import DEFAULT_SESSION_LIMIT
from .services.changesets.wait_for_job import DEFAULT_WAIT_TIMEOUT_SECONDS

app = typer.Typer(
    name="chucky",
    help="Fetch, review and apply changes produced by remote agent runs.",
    add_completion=False,
    no_args_is_help=True,
)

_ID_HELP = "Job id (run_...) or session id; sessions may be abbreviated"
_JSON_HELP = "Print a JSON document instead of text"
_QUIET_HELP = "Print nothing; report through the exit code only"


def _validate_log_level(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized not in chucky_log.LEVEL_NAMES:
        raise typer.BadParameter(
            f"expected one of: {', '.join(chucky_log.LEVEL_NAMES)}"
        )
    return normalized


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"chucky {__version__}")
        raise typer.Exit()


@app.callback()
def root(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        callback=_validate_log_level,
        help="Log verbosity (trace, debug, info, success, warning, error)",
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Chucky command-line client."""
    if log_level is not None:
        chucky_log.set_level(log_level)
    if no_color:
        chucky_log.set_no_color(True)


@app.command("fetch")
def fetch(
    changeset_id: str = typer.Argument(..., metavar="ID", help=_ID_HELP),
    json_output: bool = typer.Option(False, "--json", help=_JSON_HELP),
    quiet: bool = typer.Option(False, "--quiet", "-q", help=_QUIET_HELP),
) -> None:
    """Download a changeset into its chucky/* branch for review."""
    fetch_cmd(SimpleNamespace(id=changeset_id, json=json_output, quiet=quiet))


@app.command("apply")
def apply(
    changeset_id: str = typer.Argument(..., metavar="ID", help=_ID_HELP),
    force: bool = typer.Option(False, "--force", "-f", help="Always create a merge commit"),
    json_output: bool = typer.Option(False, "--json", help=_JSON_HELP),
    quiet: bool = typer.Option(False, "--quiet", "-q", help=_QUIET_HELP),
) -> None:
    """Merge a fetched changeset into the current branch."""
    apply_cmd(SimpleNamespace(id=changeset_id, force=force, json=json_output, quiet=quiet))


@app.command("discard")
def discard(
    changeset_id: str = typer.Argument(..., metavar="ID", help=_ID_HELP),
    json_output: bool = typer.Option(False, "--json", help=_JSON_HELP),
    quiet: bool = typer.Option(False, "--quiet", "-q", help=_QUIET_HELP),
) -> None:
    """Delete a fetched changeset without applying it."""
    discard_cmd(SimpleNamespace(id=changeset_id, json=json_output, quiet=quiet))


@app.command("pull")
def pull(
    changeset_id: str = typer.Argument(..., metavar="ID", help=_ID_HELP),
    force: bool = typer.Option(False, "--force", "-f", help="Always create a merge commit"),
    wait: bool = typer.Option(
        False, "--wait", help="Retry while the remote bundle is still being prepared"
    ),
    json_output: bool = typer.Option(False, "--json", help=_JSON_HELP),
    quiet: bool = typer.Option(False, "--quiet", "-q", help=_QUIET_HELP),
) -> None:
    """Fetch and apply a changeset in one step."""
    pull_cmd(
        SimpleNamespace(
            id=changeset_id, force=force, wait=wait, json=json_output, quiet=quiet
        )
    )


@app.command("diff")
def diff(
    changeset_id: str = typer.Argument(..., metavar="ID", help=_ID_HELP),
    stat: bool = typer.Option(False, "--stat", help="Show a summary instead of the full diff"),
    json_output: bool = typer.Option(False, "--json", help=_JSON_HELP),
) -> None:
    """Show the changes a fetched changeset would apply."""
    diff_cmd(SimpleNamespace(id=changeset_id, stat=stat, json=json_output, quiet=False))


@app.command("log")
def log(
    changeset_id: str = typer.Argument(..., metavar="ID", help=_ID_HELP),
    json_output: bool = typer.Option(False, "--json", help=_JSON_HELP),
) -> None:
    """List the commits in a fetched changeset."""
    log_cmd(SimpleNamespace(id=changeset_id, json=json_output, quiet=False))


@app.command("sessions")
def sessions(
    limit: int = typer.Option(
        DEFAULT_SESSION_LIMIT, "--limit", "-n", min=1, help="Number of sessions to show"
    ),
    with_bundle: bool = typer.Option(
        False, "--with-bundle", help="Only show sessions that produced a bundle"
    ),
    json_output: bool = typer.Option(False, "--json", help=_JSON_HELP),
) -> None:
    """List recent sessions and their ids."""
    sessions_cmd(
        SimpleNamespace(limit=limit, with_bundle=with_bundle, json=json_output, quiet=False)
    )


@app.command("wait")
def wait(
    job_id: str = typer.Argument(..., metavar="JOB_ID", help="Job id (run_...)"),
    timeout: int = typer.Option(
        DEFAULT_WAIT_TIMEOUT_SECONDS, "--timeout", min=1, help="Seconds to wait"
    ),
    json_output: bool = typer.Option(False, "--json", help=_JSON_HELP),
    quiet: bool = typer.Option(False, "--quiet", "-q", help=_QUIET_HELP),
) -> None:
    """Wait for a remote job to finish."""
    wait_cmd(SimpleNamespace(job_id=job_id, timeout=timeout, json=json_output, quiet=quiet))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
