"""Implementation for the ``chucky pull`` command."""

from __future__ import annotations

from .. import log
from ..services.changesets import (
    ApplyChangesetService,
    FetchChangesetService,
    PullChangesetRequest,
    PullChangesetService,
)
from .apply import report_applied
from .fetch import report_fetched
from .resolve import build_context, output_options, reporting_failures, resolve_ref


def pull_changeset(args: object) -> None:
    """Fetch a changeset and apply it in one step.

    JSON mode prints the fetch document followed by the apply document.
    """
    options = output_options(args)
    with reporting_failures("pull", options):
        context = build_context()
        ref = resolve_ref(context, str(getattr(args, "id")))
        request = PullChangesetRequest(
            ref=ref,
            force=bool(getattr(args, "force", False)),
            wait=bool(getattr(args, "wait", False)),
        )
        if options.human:
            log.info(f"Pulling {ref.kind.value} {ref.short_id}...")
        service = PullChangesetService(
            fetch_service=FetchChangesetService(context),
            apply_service=ApplyChangesetService(context),
        )
        outcome = service(request)
    if options.human:
        log.success(f"Fetched {outcome.fetched.summary.commits} commit(s) to {ref.branch}")
    else:
        report_fetched(outcome.fetched, options)
    report_applied(outcome.applied, options)
