"""Implementation for the ``chucky apply`` command."""

from __future__ import annotations

from .. import log
from ..services import OutputOptions, emit
from ..services.changesets import (
    ApplyChangesetOutcome,
    ApplyChangesetRequest,
    ApplyChangesetService,
)
from .resolve import build_context, output_options, reporting_failures, resolve_ref


def report_applied(outcome: ApplyChangesetOutcome, options: OutputOptions) -> None:
    def human() -> None:
        suffix = " (merge commit)" if outcome.merge_commit else ""
        log.success(
            f"Applied {outcome.merge.commits} commit(s), "
            f"{outcome.merge.files} file(s) changed{suffix}"
        )
        log.info(f"Changes: +{outcome.summary.insertions} -{outcome.summary.deletions}", style="dim")
        log.success("Changes applied successfully!")

    emit(outcome.payload(), options, human=human)


def apply_changeset(args: object) -> None:
    """Merge a fetched quarantine branch into the current branch."""
    options = output_options(args)
    with reporting_failures("apply", options):
        context = build_context()
        ref = resolve_ref(context, str(getattr(args, "id")))
        request = ApplyChangesetRequest(ref=ref, force=bool(getattr(args, "force", False)))
        if options.human:
            log.info("Applying changes...")
        outcome = ApplyChangesetService(context)(request)
    report_applied(outcome, options)
