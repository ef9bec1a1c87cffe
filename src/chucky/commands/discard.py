"""Implementation for the ``chucky discard`` command."""

from __future__ import annotations

from rich.text import Text

from .. import log
from ..services import emit
from ..services.changesets import DiscardChangesetRequest, DiscardChangesetService
from .resolve import build_context, output_options, reporting_failures, resolve_ref


def discard_changeset(args: object) -> None:
    """Delete a quarantine branch; succeeds when it is already gone."""
    options = output_options(args)
    with reporting_failures("discard", options):
        context = build_context()
        ref = resolve_ref(context, str(getattr(args, "id")))
        outcome = DiscardChangesetService(context)(DiscardChangesetRequest(ref=ref))
    emit(
        outcome.payload(),
        options,
        human=lambda: log.console().print(
            Text(f"Discarded changes for {ref.kind.value} {ref.short_id}", style="yellow")
        ),
    )
