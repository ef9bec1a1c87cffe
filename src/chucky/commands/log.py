"""Implementation for the ``chucky log`` command."""

from __future__ import annotations

from rich.text import Text

from .. import git, summary
from .. import log as chucky_log
from ..services import emit
from .resolve import (
    build_context,
    output_options,
    reporting_failures,
    require_quarantine_branch,
    resolve_ref,
)


def show_log(args: object) -> None:
    """List the commits a quarantine branch adds on top of ``HEAD``."""
    options = output_options(args)
    with reporting_failures("log", options):
        context = build_context()
        ref = resolve_ref(context, str(getattr(args, "id")))
        branch = require_quarantine_branch(context, ref)
        commits = git.git_commit_log(context.repo_dir, branch, git_path=context.git_path)

    def human() -> None:
        out = chucky_log.console()
        out.print()
        out.print(Text(f"Commits for {ref.kind.value} {ref.short_id}:", style="bold"))
        out.print()
        summary.render_commits(commits)
        out.print()

    payload = ref.payload(
        commits=[
            {"hash": c.hash, "message": c.message, "files": c.files_changed} for c in commits
        ]
    )
    emit(payload, options, human=human)
