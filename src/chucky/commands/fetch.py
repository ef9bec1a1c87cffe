"""Implementation for the ``chucky fetch`` command."""

from __future__ import annotations

from rich.text import Text

from .. import log, summary
from ..changesets import ChangesetRef
from ..services import OutputOptions, emit
from ..services.changesets import (
    FetchChangesetOutcome,
    FetchChangesetRequest,
    FetchChangesetService,
)
from .resolve import build_context, output_options, reporting_failures, resolve_ref


def print_next_steps(ref: ChangesetRef) -> None:
    out = log.console()
    out.print()
    out.print(Text(f"Run 'chucky diff {ref.short_id}' to see changes", style="yellow"))
    out.print(Text(f"Run 'chucky apply {ref.short_id}' to apply changes", style="yellow"))
    out.print(Text(f"Run 'chucky discard {ref.short_id}' to discard", style="yellow"))


def report_fetched(outcome: FetchChangesetOutcome, options: OutputOptions) -> None:
    def human() -> None:
        log.success(f"Fetched {outcome.summary.commits} commit(s) to {outcome.ref.branch}")
        summary.render_counts(outcome.summary)
        print_next_steps(outcome.ref)

    emit(outcome.payload(), options, human=human)


def fetch_changeset(args: object) -> None:
    """Download a job or session bundle into its quarantine branch."""
    options = output_options(args)
    with reporting_failures("fetch", options):
        context = build_context()
        ref = resolve_ref(context, str(getattr(args, "id")))
        if options.human:
            log.info(f"Getting {ref.kind.value} bundle...")
        outcome = FetchChangesetService(context)(FetchChangesetRequest(ref=ref))
    report_fetched(outcome, options)
