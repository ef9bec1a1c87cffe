from __future__ import annotations

from dataclasses import dataclass

from ... import git, log, summary
from ...changesets import ChangesetRef
from ..base import BaseService
from ..errors import BranchNotFoundError, DirtyWorkspaceError, MergeConflictError
from .context import ChangesetContext


@dataclass(frozen=True)
class ApplyChangesetRequest:
    ref: ChangesetRef
    force: bool = False


@dataclass(frozen=True)
class MergeResult:
    """Counts captured from the quarantine branch before it was merged."""

    commits: int
    files: int


@dataclass(frozen=True)
class ApplyChangesetOutcome:
    """Result of merging a quarantine branch.

    Attributes:
        ref: The applied changeset.
        merge: Commit and file counts captured before the merge.
        summary: Line statistics captured before the merge.
        merge_commit: Whether an explicit merge commit was created.
    """

    ref: ChangesetRef
    merge: MergeResult
    summary: git.ChangeSummary
    merge_commit: bool

    def payload(self) -> dict[str, object]:
        return {
            "status": "applied",
            **self.ref.payload(
                commits_merged=self.merge.commits,
                files_changed=self.merge.files,
                insertions=self.summary.insertions,
                deletions=self.summary.deletions,
                merge_commit=self.merge_commit,
            ),
        }


class ApplyChangesetService(BaseService[ApplyChangesetRequest, ApplyChangesetOutcome]):
    """Merge a quarantine branch into the current branch.

    A fast-forward is tried first unless ``force`` is set; diverged history
    falls back to a ``Merge <branch>`` commit. Conflicts leave the repository
    mid-merge and keep the quarantine branch.
    """

    def __init__(self, context: ChangesetContext) -> None:
        self._context = context

    def _run(self, request: ApplyChangesetRequest) -> ApplyChangesetOutcome:
        ctx = self._context
        ref = request.ref
        branch = ref.branch
        if not git.git_branch_exists(ctx.repo_dir, branch, git_path=ctx.git_path):
            raise BranchNotFoundError(
                f"Branch '{branch}' not found. Run 'chucky fetch {ref.short_id}' first.",
                details=ref.payload(),
            )

        stats = summary.summarize(ctx.repo_dir, branch, git_path=ctx.git_path)
        try:
            if request.force:
                self._merge(branch, force=True)
                used_merge = True
            else:
                try:
                    self._merge(branch, force=False)
                    used_merge = False
                except git.GitMergeDivergedError:
                    log.debug(f"{branch} diverged from HEAD; creating a merge commit")
                    self._merge(branch, force=True)
                    used_merge = True
        except git.GitMergeConflictError as exc:
            raise MergeConflictError(
                "Merge conflict detected. Resolve conflicts manually and commit.",
                details=ref.payload(files=exc.paths),
            ) from exc
        except git.GitWorkingTreeBlockedError as exc:
            raise DirtyWorkspaceError(
                "Local changes would be overwritten by the merge.",
                details=ref.payload(files=exc.paths),
            ) from exc

        git.git_delete_branch(ctx.repo_dir, branch, force=True, git_path=ctx.git_path)
        return ApplyChangesetOutcome(
            ref=ref,
            merge=MergeResult(commits=stats.commits, files=stats.files_changed),
            summary=stats,
            merge_commit=used_merge,
        )

    def _merge(self, branch: str, *, force: bool) -> None:
        git.git_merge_branch(
            self._context.repo_dir, branch, force=force, git_path=self._context.git_path
        )
