from __future__ import annotations

from dataclasses import dataclass

from ... import git
from ...changesets import ChangesetRef
from ..base import BaseService
from .context import ChangesetContext


@dataclass(frozen=True)
class DiscardChangesetRequest:
    ref: ChangesetRef


@dataclass(frozen=True)
class DiscardChangesetOutcome:
    ref: ChangesetRef
    existed: bool

    def payload(self) -> dict[str, object]:
        return {"status": "discarded", **self.ref.payload()}


class DiscardChangesetService(BaseService[DiscardChangesetRequest, DiscardChangesetOutcome]):
    """Delete a quarantine branch; an absent branch is a successful no-op."""

    def __init__(self, context: ChangesetContext) -> None:
        self._context = context

    def _run(self, request: DiscardChangesetRequest) -> DiscardChangesetOutcome:
        ctx = self._context
        branch = request.ref.branch
        existed = git.git_branch_exists(ctx.repo_dir, branch, git_path=ctx.git_path)
        if existed:
            git.git_delete_branch(ctx.repo_dir, branch, force=True, git_path=ctx.git_path)
        return DiscardChangesetOutcome(ref=request.ref, existed=existed)
