from .base import BaseService
from .errors import (
    BranchExistsError,
    BranchNotFoundError,
    CommandFailedError,
    DirtyWorkspaceError,
    DownloadFailedError,
    ExitCode,
    InvalidBundleError,
    JobFailedError,
    MergeConflictError,
    NoChangesError,
    NotGitRepoError,
    RemoteNotFoundError,
    ServiceFailure,
    WaitTimeoutError,
)
from .result import OutputOptions, emit, exit_with_failure, render_failure

__all__ = [
    "BaseService",
    "BranchExistsError",
    "BranchNotFoundError",
    "CommandFailedError",
    "DirtyWorkspaceError",
    "DownloadFailedError",
    "ExitCode",
    "InvalidBundleError",
    "JobFailedError",
    "MergeConflictError",
    "NoChangesError",
    "NotGitRepoError",
    "OutputOptions",
    "RemoteNotFoundError",
    "ServiceFailure",
    "WaitTimeoutError",
    "emit",
    "exit_with_failure",
    "render_failure",
]
