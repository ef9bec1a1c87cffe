from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from ... import git, log, summary, transport
from ...changesets import ChangesetRef
from ..base import BaseService
from ..errors import BranchExistsError, InvalidBundleError, NoChangesError
from .context import ChangesetContext

DownloadBundle = Callable[[str, Path], Path]


@dataclass(frozen=True)
class FetchChangesetRequest:
    ref: ChangesetRef
    wait: bool = False


@dataclass(frozen=True)
class FetchChangesetOutcome:
    ref: ChangesetRef
    summary: git.ChangeSummary

    def payload(self) -> dict[str, object]:
        return {
            "status": "fetched",
            **self.ref.payload(
                branch=self.ref.branch,
                commits=self.summary.commits,
                files_added=list(self.summary.files_added),
                files_modified=list(self.summary.files_modified),
                files_deleted=list(self.summary.files_deleted),
                insertions=self.summary.insertions,
                deletions=self.summary.deletions,
            ),
        }


class FetchChangesetService(BaseService[FetchChangesetRequest, FetchChangesetOutcome]):
    """Download a changeset's bundle into its quarantine branch.

    The only repository side effect is one new local branch. The temporary
    bundle file is removed whether or not the fetch succeeds.
    """

    def __init__(
        self,
        context: ChangesetContext,
        *,
        download: DownloadBundle = transport.download_bundle,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._context = context
        self._download = download
        self._sleep = sleep

    def _run(self, request: FetchChangesetRequest) -> FetchChangesetOutcome:
        ctx = self._context
        ref = request.ref
        branch = ref.branch
        if git.git_branch_exists(ctx.repo_dir, branch, git_path=ctx.git_path):
            raise BranchExistsError(
                f"Branch '{branch}' already exists. "
                f"Use 'chucky apply {ref.short_id}' or 'chucky discard {ref.short_id}' first.",
                details=ref.payload(branch=branch),
            )

        location = transport.locate_bundle(
            ctx.api,
            ref,
            wait=ctx.wait_policy if request.wait else None,
            sleep=self._sleep,
        )
        if not location.has_changes:
            raise NoChangesError("Agent made no changes.", details=ref.payload())

        with transport.temporary_bundle(ref) as bundle_path:
            self._download(location.download_url, bundle_path)
            log.debug(f"verifying {bundle_path}")
            if not git.git_verify_bundle(ctx.repo_dir, bundle_path, git_path=ctx.git_path):
                raise InvalidBundleError(
                    "Bundle verification failed. The bundle may be corrupted.",
                    details=ref.payload(),
                )
            log.debug(f"fetching bundle into {branch}")
            git.git_fetch_bundle(ctx.repo_dir, bundle_path, branch, git_path=ctx.git_path)

        return FetchChangesetOutcome(
            ref=ref,
            summary=summary.summarize(ctx.repo_dir, branch, git_path=ctx.git_path),
        )
