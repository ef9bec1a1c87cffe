"""Git helper functions used by the Chucky CLI.

Every repository read or mutation goes through the local ``git`` executable.
Failures that callers branch on are raised as distinct ``GitError``
subclasses: a non-fast-forward merge, a content conflict, a merge blocked by
local changes and an oversized diff are never reported as the same thing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from . import exec as exec_util
from . import log

MAX_DIFF_OUTPUT_BYTES = 10 * 1024 * 1024
MERGE_MESSAGE_TEMPLATE = "Merge {branch}"

_RECORD_SEP = "\x1e"
_FIELD_SEP = "\x1f"
_DIVERGED_MARKERS = ("not possible to fast-forward", "diverging", "fast-forward")
_OVERWRITE_MARKER = "would be overwritten by merge"


class GitError(RuntimeError):
    """Base error for failed git invocations."""

    def __init__(
        self, message: str, *, result: exec_util.CommandResult | None = None
    ) -> None:
        super().__init__(message)
        self.result = result


class GitCommandError(GitError):
    """Generic git failure with no more specific meaning."""


class GitMergeDivergedError(GitError):
    """A fast-forward-only merge was refused because histories diverged."""


class GitMergeConflictError(GitError):
    """A merge stopped on overlapping edits; the repo is left mid-merge."""

    def __init__(
        self,
        message: str,
        *,
        paths: list[str],
        result: exec_util.CommandResult | None = None,
    ) -> None:
        super().__init__(message, result=result)
        self.paths = paths


class GitWorkingTreeBlockedError(GitError):
    """A merge was refused because it would overwrite local changes."""

    def __init__(
        self,
        message: str,
        *,
        paths: list[str],
        result: exec_util.CommandResult | None = None,
    ) -> None:
        super().__init__(message, result=result)
        self.paths = paths


class GitOutputTooLargeError(GitError):
    """Command output exceeded the buffering threshold."""


@dataclass(frozen=True)
class RepoInfo:
    """Snapshot of a folder's repository state."""

    is_repo: bool
    is_repo_root: bool
    head_commit: str
    is_dirty: bool
    dirty_files: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ChangeSummary:
    """Changes between ``HEAD`` and a quarantine branch.

    Attributes:
        commits: Commits reachable from the branch but not from ``HEAD``.
        files_added: Paths added on the branch.
        files_modified: Paths modified on the branch.
        files_deleted: Paths deleted on the branch.
        insertions: Summed numeric line insertions (binary files count 0).
        deletions: Summed numeric line deletions (binary files count 0).
    """

    commits: int
    files_added: list[str]
    files_modified: list[str]
    files_deleted: list[str]
    insertions: int
    deletions: int

    @property
    def files_changed(self) -> int:
        return len(self.files_added) + len(self.files_modified) + len(self.files_deleted)


@dataclass(frozen=True)
class CommitInfo:
    hash: str
    message: str
    files_changed: int


def git_command(args: list[str], *, git_path: str | None = None) -> list[str]:
    """Build a git command using an optional executable path."""
    resolved = git_path.strip() if isinstance(git_path, str) else ""
    if not resolved:
        resolved = "git"
    return [resolved, *args]


def _run_git(
    repo_dir: Path,
    args: list[str],
    *,
    git_path: str | None = None,
    max_output_bytes: int | None = None,
) -> exec_util.CommandResult:
    request = exec_util.CommandRequest(
        argv=tuple(
            git_command(
                ["-c", "core.quotepath=off", "-C", str(repo_dir), *args], git_path=git_path
            )
        ),
        capture_output=True,
        text=True,
        max_output_bytes=max_output_bytes,
    )
    log.trace(f"$ {' '.join(request.argv)}")
    result = exec_util.run_with_runner(request)
    if result is None:
        raise GitCommandError(exec_util.missing_command_detail(request))
    return result


def _git_checked(repo_dir: Path, args: list[str], *, git_path: str | None = None) -> str:
    result = _run_git(repo_dir, args, git_path=git_path)
    if result.returncode != 0:
        raise GitCommandError(
            result.stderr.strip() or f"git {args[0]} failed", result=result
        )
    return result.stdout.strip()


def _git_safe(repo_dir: Path, args: list[str], *, git_path: str | None = None) -> str | None:
    try:
        return _git_checked(repo_dir, args, git_path=git_path)
    except GitError:
        return None


def git_repo_info(folder: Path, *, git_path: str | None = None) -> RepoInfo:
    """Inspect a folder's repository state.

    Never raises: any git failure reports the folder as not being a repository.

    Args:
        folder: Folder to inspect.

    Returns:
        ``RepoInfo`` for the folder.
    """
    full_path = Path(folder).resolve()
    if _git_safe(full_path, ["rev-parse", "--git-dir"], git_path=git_path) is None:
        return RepoInfo(
            is_repo=False,
            is_repo_root=False,
            head_commit="",
            is_dirty=False,
            dirty_files=[],
        )
    head_commit = _git_safe(full_path, ["rev-parse", "HEAD"], git_path=git_path) or ""
    result = _run_git(full_path, ["status", "--porcelain", "-z"], git_path=git_path)
    dirty_files = parse_porcelain_status(result.stdout) if result.returncode == 0 else []
    return RepoInfo(
        is_repo=True,
        is_repo_root=(full_path / ".git").exists(),
        head_commit=head_commit,
        is_dirty=bool(dirty_files),
        dirty_files=dirty_files,
    )


def git_branch_exists(repo_dir: Path, branch: str, *, git_path: str | None = None) -> bool:
    """Check whether a local branch (``refs/heads/<branch>``) exists."""
    result = _run_git(
        repo_dir,
        ["show-ref", "--verify", "--quiet", f"refs/heads/{branch}"],
        git_path=git_path,
    )
    return result.returncode == 0


def git_verify_bundle(repo_dir: Path, bundle_path: Path, *, git_path: str | None = None) -> bool:
    """Return whether a bundle file is valid against this repository.

    Fails closed: any error, including a missing git executable, is ``False``.
    """
    try:
        result = _run_git(repo_dir, ["bundle", "verify", str(bundle_path)], git_path=git_path)
    except GitError:
        return False
    if result.returncode != 0:
        log.debug(f"bundle verify failed: {result.output}")
        return False
    return True


def git_fetch_bundle(
    repo_dir: Path, bundle_path: Path, branch: str, *, git_path: str | None = None
) -> None:
    """Fetch a bundle's ``HEAD`` into a new local branch.

    Raises:
        GitCommandError: The branch already exists or the bundle is unreadable.
    """
    if git_branch_exists(repo_dir, branch, git_path=git_path):
        raise GitCommandError(f"branch {branch!r} already exists")
    _git_checked(repo_dir, ["fetch", str(bundle_path), f"HEAD:{branch}"], git_path=git_path)


def parse_numstat(text: str) -> tuple[int, int, int]:
    """Sum ``git diff --numstat`` output.

    Binary entries (``-`` counts) contribute zero lines but still count as a
    changed path.

    Returns:
        Tuple of ``(insertions, deletions, paths)``.

    Example:
        >>> parse_numstat("3\\t1\\ta.txt\\n-\\t-\\tlogo.png\\n")
        (3, 1, 2)
    """
    insertions = 0
    deletions = 0
    paths = 0
    for line in text.splitlines():
        if not line.strip():
            continue
        parts = line.split("\t", 2)
        if len(parts) < 3:
            continue
        added, removed = parts[0], parts[1]
        paths += 1
        if added != "-":
            insertions += _to_int(added)
        if removed != "-":
            deletions += _to_int(removed)
    return insertions, deletions, paths


def _to_int(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return 0


def parse_name_status(text: str) -> tuple[list[str], list[str], list[str]]:
    """Classify ``git diff --name-status --no-renames -z`` output.

    Entries are NUL-separated status and path pairs, so paths arrive
    unquoted. Type changes (``T``) are reported as modifications.

    Returns:
        Tuple of ``(added, modified, deleted)`` path lists.

    Example:
        >>> parse_name_status("A\\0new.txt\\0M\\0src/app.py\\0D\\0old.txt\\0")
        (['new.txt'], ['src/app.py'], ['old.txt'])
    """
    added: list[str] = []
    modified: list[str] = []
    deleted: list[str] = []
    fields = text.split("\0")
    for status, path in zip(fields[0::2], fields[1::2]):
        status = status.strip()
        if not path:
            continue
        if status.startswith("A"):
            added.append(path)
        elif status.startswith(("M", "T")):
            modified.append(path)
        elif status.startswith("D"):
            deleted.append(path)
    return added, modified, deleted


def parse_porcelain_status(text: str) -> list[str]:
    """Return the paths listed by ``git status --porcelain -z``.

    Renames and copies carry their source path as an extra field, which is
    skipped.

    Example:
        >>> parse_porcelain_status(" M src/app.py\\0?? notes.txt\\0R  new.py\\0old.py\\0")
        ['src/app.py', 'notes.txt', 'new.py']
    """
    paths: list[str] = []
    fields = iter(text.split("\0"))
    for entry in fields:
        if len(entry) < 4:
            continue
        paths.append(entry[3:])
        if entry[0] in "RC":
            next(fields, None)
    return paths


def git_diff_stats(repo_dir: Path, branch: str, *, git_path: str | None = None) -> ChangeSummary:
    """Summarize the changes between ``HEAD`` and ``branch``.

    Args:
        repo_dir: Git repository directory.
        branch: Quarantine branch to compare against ``HEAD``.

    Returns:
        ``ChangeSummary`` for the range.
    """
    span = f"HEAD..{branch}"
    rev_count = _git_safe(repo_dir, ["rev-list", "--count", span], git_path=git_path)
    commits = _to_int(rev_count) if rev_count else 0
    numstat = _git_safe(repo_dir, ["diff", "--no-renames", "--numstat", span], git_path=git_path)
    insertions, deletions, _ = parse_numstat(numstat or "")
    name_status = _git_safe(
        repo_dir, ["diff", "--no-renames", "--name-status", "-z", span], git_path=git_path
    )
    added, modified, deleted = parse_name_status(name_status or "")
    return ChangeSummary(
        commits=commits,
        files_added=added,
        files_modified=modified,
        files_deleted=deleted,
        insertions=insertions,
        deletions=deletions,
    )


def git_full_diff(
    repo_dir: Path,
    branch: str,
    *,
    max_output_bytes: int = MAX_DIFF_OUTPUT_BYTES,
    git_path: str | None = None,
) -> str:
    """Return the unified diff between ``HEAD`` and ``branch``.

    Raises:
        GitOutputTooLargeError: The diff exceeds ``max_output_bytes``.
        GitCommandError: git failed.
    """
    result = _run_git(
        repo_dir,
        ["diff", f"HEAD..{branch}"],
        git_path=git_path,
        max_output_bytes=max_output_bytes,
    )
    if result.truncated:
        raise GitOutputTooLargeError(
            f"diff output exceeds {max_output_bytes} bytes", result=result
        )
    if result.returncode != 0:
        raise GitCommandError(result.stderr.strip() or "git diff failed", result=result)
    return result.stdout.strip()


def git_commit_log(repo_dir: Path, branch: str, *, git_path: str | None = None) -> list[CommitInfo]:
    """Return the commits on ``branch`` that are not on ``HEAD``, oldest first."""
    output = _git_safe(
        repo_dir,
        [
            "log",
            "--reverse",
            "--numstat",
            f"--format={_RECORD_SEP}%h{_FIELD_SEP}%s",
            f"HEAD..{branch}",
        ],
        git_path=git_path,
    )
    commits: list[CommitInfo] = []
    for record in (output or "").split(_RECORD_SEP):
        if not record.strip():
            continue
        header, _, body = record.partition("\n")
        commit_hash, _, message = header.partition(_FIELD_SEP)
        files = sum(1 for line in body.splitlines() if "\t" in line)
        commits.append(
            CommitInfo(hash=commit_hash.strip(), message=message.strip(), files_changed=files)
        )
    return commits


def git_conflicted_paths(repo_dir: Path, *, git_path: str | None = None) -> list[str]:
    """Return paths with unresolved merge conflicts."""
    output = _git_safe(
        repo_dir, ["diff", "--name-only", "--diff-filter=U", "-z"], git_path=git_path
    )
    return [path for path in (output or "").split("\0") if path]


def _overwritten_paths(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.startswith("\t")]


def git_merge_branch(
    repo_dir: Path,
    branch: str,
    *,
    force: bool = False,
    git_path: str | None = None,
) -> None:
    """Merge ``branch`` into the current branch.

    Without ``force`` only a fast-forward is attempted. With ``force`` an
    explicit merge commit titled ``Merge <branch>`` is always created. A
    conflicted merge is not aborted.

    Raises:
        GitMergeDivergedError: Fast-forward was impossible.
        GitMergeConflictError: The merge stopped on conflicting edits.
        GitWorkingTreeBlockedError: Local changes would be overwritten.
        GitCommandError: Any other failure.
    """
    if force:
        args = [
            "merge",
            "--no-ff",
            "--no-edit",
            "-m",
            MERGE_MESSAGE_TEMPLATE.format(branch=branch),
            branch,
        ]
    else:
        args = ["merge", "--ff-only", branch]
    result = _run_git(repo_dir, args, git_path=git_path)
    if result.returncode != 0:
        text = result.output
        if _OVERWRITE_MARKER in text:
            raise GitWorkingTreeBlockedError(
                "merge would overwrite local changes",
                paths=_overwritten_paths(result.stderr),
                result=result,
            )
        if force:
            conflicts = git_conflicted_paths(repo_dir, git_path=git_path)
            if conflicts or "CONFLICT" in text:
                raise GitMergeConflictError(
                    "merge stopped on conflicts", paths=conflicts, result=result
                )
        elif any(marker in text.lower() for marker in _DIVERGED_MARKERS):
            raise GitMergeDivergedError(
                f"cannot fast-forward to {branch!r}", result=result
            )
        raise GitCommandError(text or "git merge failed", result=result)


def git_delete_branch(
    repo_dir: Path, branch: str, *, force: bool = True, git_path: str | None = None
) -> None:
    """Delete a local branch; a missing branch is not an error."""
    if not git_branch_exists(repo_dir, branch, git_path=git_path):
        return
    _git_checked(repo_dir, ["branch", "-D" if force else "-d", branch], git_path=git_path)


def git_auto_commit(repo_dir: Path, message: str, *, git_path: str | None = None) -> str:
    """Stage every change, commit it and return the new ``HEAD`` hash."""
    _git_checked(repo_dir, ["add", "-A"], git_path=git_path)
    _git_checked(repo_dir, ["commit", "-m", message], git_path=git_path)
    return _git_checked(repo_dir, ["rev-parse", "HEAD"], git_path=git_path)
