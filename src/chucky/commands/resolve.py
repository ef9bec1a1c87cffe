"""Shared context and failure handling for changeset commands."""

from __future__ import annotations

import contextlib
from pathlib import Path
from typing import Iterator

from .. import config, git
from ..api import ApiError, ChuckyApi
from ..changesets import ChangesetRef, resolve_changeset
from ..models import GlobalConfig
from ..services import (
    BranchNotFoundError,
    CommandFailedError,
    NotGitRepoError,
    OutputOptions,
    ServiceFailure,
    exit_with_failure,
)
from ..services.changesets import ChangesetContext


def output_options(args: object) -> OutputOptions:
    return OutputOptions(
        json=bool(getattr(args, "json", False)),
        quiet=bool(getattr(args, "quiet", False)),
    )


def build_api(global_config: GlobalConfig | None = None) -> ChuckyApi:
    """Build an authenticated API client from the user-wide config."""
    if global_config is None:
        global_config = config.load_global_config()
    return ChuckyApi(
        config.require_api_key(global_config),
        base_url=config.portal_url(global_config),
    )


def build_context(cwd: Path | None = None) -> ChangesetContext:
    """Load configuration once and bind it to the project repository.

    Raises:
        ServiceFailure: Missing credentials, missing project binding or the
            project folder is not a git repository.
    """
    base_dir = cwd or Path.cwd()
    global_config = config.load_global_config()
    api = build_api(global_config)
    project_config = config.require_project_config(base_dir)
    repo_dir = (base_dir / project_config.folder).resolve()
    if not git.git_repo_info(repo_dir).is_repo:
        raise NotGitRepoError(
            f"Not a git repository: {repo_dir}", details={"folder": str(repo_dir)}
        )
    return ChangesetContext(
        repo_dir=repo_dir,
        api=api,
        project_id=project_config.project_id,
        wait_policy=config.bundle_wait_policy(global_config),
    )


def resolve_ref(context: ChangesetContext, raw_id: str) -> ChangesetRef:
    return resolve_changeset(raw_id, context.api, project_id=context.project_id)


@contextlib.contextmanager
def reporting_failures(command: str, options: OutputOptions) -> Iterator[None]:
    """Render failures raised in the block and exit with their code.

    Unexpected git and API errors become ``<command>_failed``.
    """
    try:
        yield
    except ServiceFailure as failure:
        exit_with_failure(failure, options)
    except (git.GitError, ApiError) as exc:
        exit_with_failure(CommandFailedError(f"{command}_failed", str(exc)), options)


def require_quarantine_branch(context: ChangesetContext, ref: ChangesetRef) -> str:
    """Return the changeset's branch, failing with ``branch_not_found`` if absent."""
    branch = ref.branch
    if not git.git_branch_exists(context.repo_dir, branch, git_path=context.git_path):
        raise BranchNotFoundError(
            f"Branch '{branch}' not found. Run 'chucky fetch {ref.short_id}' first.",
            details=ref.payload(),
        )
    return branch
