"""Implementation for the ``chucky wait`` command."""

from __future__ import annotations

from rich.text import Text

from .. import log
from ..services import emit
from ..services.changesets import WaitForJobRequest, WaitForJobService
from ..services.changesets.wait_for_job import DEFAULT_WAIT_TIMEOUT_SECONDS
from .resolve import build_api, output_options, reporting_failures


def wait_for_job(args: object) -> None:
    """Block until a remote job completes, fails or the timeout elapses."""
    options = output_options(args)
    job_id = str(getattr(args, "job_id"))
    timeout = getattr(args, "timeout", None)
    request = WaitForJobRequest(
        job_id=job_id,
        timeout_seconds=int(timeout) if timeout is not None else DEFAULT_WAIT_TIMEOUT_SECONDS,
    )
    with reporting_failures("wait", options):
        if options.human:
            log.info(f"Waiting for job {job_id}...")
        outcome = WaitForJobService(build_api())(request)

    def human() -> None:
        log.success(f"Job completed in {outcome.duration_seconds}s")
        out = log.console()
        out.print(Text("Job completed successfully!", style="green"))
        out.print(Text(f"Run 'chucky fetch {job_id}' to get results", style="yellow"))

    emit(outcome.payload(), options, human=human)
