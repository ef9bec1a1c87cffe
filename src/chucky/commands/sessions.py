"""Implementation for the ``chucky sessions`` command."""

from __future__ import annotations

from rich.text import Text

from .. import config, log
from ..models import Session
from ..services import emit
from ..services.changesets import ListSessionsRequest, ListSessionsService
from ..services.changesets.list_sessions import DEFAULT_SESSION_LIMIT
from .resolve import build_api, output_options, reporting_failures

_STATUS_STYLES = {"completed": "green", "failed": "red"}


def _session_row(session: Session) -> Text:
    duration = f"{session.duration_ms / 1000:.1f}s" if session.duration_ms else "-"
    cost = f"${session.total_cost_usd:.4f}" if session.total_cost_usd else "-"
    row = Text()
    row.append(session.id[:8], style="dim")
    row.append(" ")
    row.append(session.status.ljust(10), style=_STATUS_STYLES.get(session.status, "yellow"))
    row.append(f" {duration:>6} {cost:>8} ", style="dim")
    row.append((session.user_id or "").ljust(16)[:16], style="dim")
    if session.has_bundle:
        marker = " [bundle]" if session.bundle_has_changes else " [bundle, no changes]"
        row.append(marker, style="cyan")
    if session.job_id:
        row.append(f" job:{session.job_id[:8]}", style="dim")
    return row


def list_sessions(args: object) -> None:
    """List recent sessions, scoped to the current project when one is bound."""
    options = output_options(args)
    limit = getattr(args, "limit", None) or DEFAULT_SESSION_LIMIT
    with reporting_failures("sessions", options):
        api = build_api()
        project = config.load_project_config()
        request = ListSessionsRequest(
            limit=int(limit),
            with_bundle=bool(getattr(args, "with_bundle", False)),
            project_id=project.project_id if project else None,
        )
        outcome = ListSessionsService(api)(request)

    def human() -> None:
        out = log.console()
        if not outcome.sessions:
            out.print(Text("No sessions found.", style="yellow"))
            return
        scope = (
            f"project: {project.project_name or project.project_id}" if project else "all projects"
        )
        out.print(Text(f"\nSessions ({scope}):\n", style="bold"))
        for session in outcome.sessions:
            out.print(_session_row(session))
        out.print(Text(f"\nShowing {len(outcome.sessions)} sessions", style="dim"))
        if outcome.has_more:
            out.print(Text("Use --limit to see more", style="dim"))

    emit(outcome.payload(), options, human=human)
