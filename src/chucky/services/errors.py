"""Service failure contracts.

Services return typed outcomes on success and raise ServiceFailure on expected
conditions. Each failure carries a stable string tag, a human message and the
single process exit code its condition maps to. Programmer bugs raise normal
exceptions.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Mapping


class ExitCode(IntEnum):
    SUCCESS = 0
    CONFLICT = 1
    NOT_FOUND = 2
    NOT_GIT_REPO = 3
    NETWORK_ERROR = 4
    DIRTY_WORKSPACE = 5
    TIMEOUT = 6
    NO_CHANGES = 7


class ServiceFailure(Exception):
    """Expected service failure.

    Raised by services instead of returning a failure value. Use ``raise
    ServiceFailure(...) from exc`` to chain a causing exception; it is
    available as ``__cause__``. Callers hand the failure to the result
    protocol, which renders it and exits with ``exit_code``.
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        exit_code: ExitCode,
        recovery_hint: str | None = None,
        details: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.exit_code = exit_code
        self.recovery_hint = recovery_hint
        self.details = dict(details or {})

    def to_payload(self) -> dict[str, object]:
        """Structured error object for machine-readable output."""
        return {"error": self.code, "message": self.message, **self.details}


class BranchExistsError(ServiceFailure):
    """A quarantine branch for the changeset is already present."""

    def __init__(self, message: str, *, details: Mapping[str, object] | None = None) -> None:
        super().__init__("branch_exists", message, exit_code=ExitCode.CONFLICT, details=details)


class BranchNotFoundError(ServiceFailure):
    """No quarantine branch exists for the changeset."""

    def __init__(self, message: str, *, details: Mapping[str, object] | None = None) -> None:
        super().__init__(
            "branch_not_found", message, exit_code=ExitCode.NOT_FOUND, details=details
        )


class NoChangesError(ServiceFailure):
    """The remote changeset finished without touching any file."""

    def __init__(self, message: str, *, details: Mapping[str, object] | None = None) -> None:
        super().__init__("no_changes", message, exit_code=ExitCode.NO_CHANGES, details=details)


class InvalidBundleError(ServiceFailure):
    """The downloaded bundle failed verification."""

    def __init__(self, message: str, *, details: Mapping[str, object] | None = None) -> None:
        super().__init__("invalid_bundle", message, exit_code=ExitCode.CONFLICT, details=details)


class MergeConflictError(ServiceFailure):
    """A merge stopped on conflicts and was left for manual resolution."""

    def __init__(self, message: str, *, details: Mapping[str, object] | None = None) -> None:
        super().__init__(
            "merge_conflict",
            message,
            exit_code=ExitCode.CONFLICT,
            recovery_hint="resolve the conflicts, then commit",
            details=details,
        )


class DownloadFailedError(ServiceFailure):
    """The bundle could not be downloaded."""

    def __init__(self, message: str, *, details: Mapping[str, object] | None = None) -> None:
        super().__init__(
            "download_failed", message, exit_code=ExitCode.NETWORK_ERROR, details=details
        )


class DirtyWorkspaceError(ServiceFailure):
    """Local changes block the operation."""

    def __init__(self, message: str, *, details: Mapping[str, object] | None = None) -> None:
        super().__init__(
            "dirty_workspace",
            message,
            exit_code=ExitCode.DIRTY_WORKSPACE,
            recovery_hint="commit or stash your changes and retry",
            details=details,
        )


class NotGitRepoError(ServiceFailure):
    """The project folder is not inside a git repository."""

    def __init__(self, message: str, *, details: Mapping[str, object] | None = None) -> None:
        super().__init__(
            "not_a_git_repo", message, exit_code=ExitCode.NOT_GIT_REPO, details=details
        )


class RemoteNotFoundError(ServiceFailure):
    """A job or session is unknown to the remote API.

    ``code`` is ``job_not_found``, ``session_not_found`` or ``ambiguous_id``.
    """

    def __init__(
        self, code: str, message: str, *, details: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(code, message, exit_code=ExitCode.NOT_FOUND, details=details)


class JobFailedError(ServiceFailure):
    """The remote job finished unsuccessfully."""

    def __init__(self, message: str, *, details: Mapping[str, object] | None = None) -> None:
        super().__init__("job_failed", message, exit_code=ExitCode.CONFLICT, details=details)


class WaitTimeoutError(ServiceFailure):
    """A wait deadline elapsed."""

    def __init__(self, message: str, *, details: Mapping[str, object] | None = None) -> None:
        super().__init__("timeout", message, exit_code=ExitCode.TIMEOUT, details=details)


class CommandFailedError(ServiceFailure):
    """Catch-all for unexpected git, API or configuration errors.

    ``code`` is ``<command>_failed`` or a configuration tag such as
    ``not_logged_in``.
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        recovery_hint: str | None = None,
        details: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            code,
            message,
            exit_code=ExitCode.NETWORK_ERROR,
            recovery_hint=recovery_hint,
            details=details,
        )
