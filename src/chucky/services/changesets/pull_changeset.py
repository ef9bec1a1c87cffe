from __future__ import annotations

from dataclasses import dataclass

from ...changesets import ChangesetRef
from ..base import BaseService
from .apply_changeset import (
    ApplyChangesetOutcome,
    ApplyChangesetRequest,
    ApplyChangesetService,
)
from .fetch_changeset import (
    FetchChangesetOutcome,
    FetchChangesetRequest,
    FetchChangesetService,
)


@dataclass(frozen=True)
class PullChangesetRequest:
    ref: ChangesetRef
    force: bool = False
    wait: bool = False


@dataclass(frozen=True)
class PullChangesetOutcome:
    fetched: FetchChangesetOutcome
    applied: ApplyChangesetOutcome


class PullChangesetService(BaseService[PullChangesetRequest, PullChangesetOutcome]):
    """Fetch a changeset, then apply it.

    ``no_changes`` from the fetch step propagates and the apply is skipped.
    """

    def __init__(
        self,
        fetch_service: FetchChangesetService,
        apply_service: ApplyChangesetService,
    ) -> None:
        self._fetch_service = fetch_service
        self._apply_service = apply_service

    def _run(self, request: PullChangesetRequest) -> PullChangesetOutcome:
        fetched = self._fetch_service(FetchChangesetRequest(ref=request.ref, wait=request.wait))
        applied = self._apply_service(ApplyChangesetRequest(ref=request.ref, force=request.force))
        return PullChangesetOutcome(fetched=fetched, applied=applied)
