from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from ... import log
from ...api import ApiNotFoundError, ChuckyApi
from ..base import BaseService
from ..errors import JobFailedError, RemoteNotFoundError, WaitTimeoutError

DEFAULT_WAIT_TIMEOUT_SECONDS = 300
DEFAULT_POLL_INTERVAL_SECONDS = 2.0


@dataclass(frozen=True)
class WaitForJobRequest:
    job_id: str
    timeout_seconds: int = DEFAULT_WAIT_TIMEOUT_SECONDS
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS


@dataclass(frozen=True)
class WaitForJobOutcome:
    job_id: str
    duration_seconds: int

    def payload(self) -> dict[str, object]:
        return {
            "status": "completed",
            "job_id": self.job_id,
            "duration_seconds": self.duration_seconds,
        }


class WaitForJobService(BaseService[WaitForJobRequest, WaitForJobOutcome]):
    """Poll a remote job until it completes or the deadline passes."""

    def __init__(
        self,
        api: ChuckyApi,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._api = api
        self._sleep = sleep
        self._clock = clock

    def _run(self, request: WaitForJobRequest) -> WaitForJobOutcome:
        job_id = request.job_id
        details = {"job_id": job_id}
        start = self._clock()
        while True:
            try:
                job = self._api.get_job(job_id)
            except ApiNotFoundError as exc:
                raise RemoteNotFoundError(
                    "job_not_found", f"Job '{job_id}' not found.", details=details
                ) from exc
            elapsed = int(self._clock() - start)
            if job.is_completed:
                if job.is_success:
                    return WaitForJobOutcome(job_id=job_id, duration_seconds=elapsed)
                message = job.error.message if job.error else "Job failed"
                raise JobFailedError(message, details=details)
            if elapsed >= request.timeout_seconds:
                raise WaitTimeoutError(
                    f"Timeout after {request.timeout_seconds}s waiting for job to complete.",
                    details=details,
                )
            log.debug(f"job {job_id} is {job.status or 'pending'} ({elapsed}s)")
            self._sleep(request.poll_interval_seconds)
