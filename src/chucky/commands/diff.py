"""Implementation for the ``chucky diff`` command."""

from __future__ import annotations

from rich.text import Text

from .. import log, summary
from ..changesets import ChangesetRef
from ..io import say
from ..services import emit
from .resolve import (
    build_context,
    output_options,
    reporting_failures,
    require_quarantine_branch,
    resolve_ref,
)


def _print_heading(ref: ChangesetRef) -> None:
    out = log.console()
    out.print()
    out.print(Text(f"Changes for {ref.kind.value} {ref.short_id}:", style="bold"))
    out.print()


def show_diff(args: object) -> None:
    """Show a quarantine branch's changes against ``HEAD``."""
    options = output_options(args)
    stat_only = bool(getattr(args, "stat", False))
    with reporting_failures("diff", options):
        context = build_context()
        ref = resolve_ref(context, str(getattr(args, "id")))
        branch = require_quarantine_branch(context, ref)
        if options.json or stat_only:
            stats = summary.summarize(context.repo_dir, branch, git_path=context.git_path)
            view = None
        else:
            view = summary.diff_view(context.repo_dir, branch, git_path=context.git_path)
            stats = view.summary

    if view is None:

        def human() -> None:
            _print_heading(ref)
            summary.render_summary(stats)

        emit(ref.payload(**summary.stats_payload(stats)), options, human=human)
        return

    if options.quiet:
        return
    if not view.too_large:
        say(view.text)
        return
    out = log.console()
    out.print(Text("Diff output is too large to display.", style="yellow"))
    out.print(
        Text(f"Use 'chucky diff {ref.short_id} --stat' to see a summary instead.", style="dim")
    )
    out.print()
    out.print(
        Text(
            f"Files: {len(stats.files_added)} added, {len(stats.files_modified)} modified, "
            f"{len(stats.files_deleted)} deleted",
            style="dim",
        )
    )
    out.print(Text(f"Lines: +{stats.insertions} -{stats.deletions}", style="dim"))
