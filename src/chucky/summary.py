"""Read-only projections of a quarantine branch against ``HEAD``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from rich.text import Text

from . import git, log

_MAX_LISTED_FILES = 10


@dataclass(frozen=True)
class DiffView:
    """A full diff, or the summary that replaces it when the diff is too big.

    Attributes:
        text: Unified diff text; empty when ``too_large`` is set.
        summary: Statistics for the same range.
        too_large: The diff exceeded the buffering threshold.
    """

    text: str
    summary: git.ChangeSummary
    too_large: bool = False


def summarize(repo_dir: Path, branch: str, *, git_path: str | None = None) -> git.ChangeSummary:
    return git.git_diff_stats(repo_dir, branch, git_path=git_path)


def diff_view(
    repo_dir: Path,
    branch: str,
    *,
    max_output_bytes: int = git.MAX_DIFF_OUTPUT_BYTES,
    git_path: str | None = None,
) -> DiffView:
    """Return the full diff, degrading to statistics for oversized output."""
    summary = summarize(repo_dir, branch, git_path=git_path)
    try:
        text = git.git_full_diff(
            repo_dir, branch, max_output_bytes=max_output_bytes, git_path=git_path
        )
    except git.GitOutputTooLargeError:
        log.debug(f"diff for {branch} exceeds {max_output_bytes} bytes")
        return DiffView(text="", summary=summary, too_large=True)
    return DiffView(text=text, summary=summary)


def stats_payload(summary: git.ChangeSummary) -> dict[str, object]:
    """Machine-readable statistics.

    Example:
        >>> s = git.ChangeSummary(2, ["a"], ["b"], [], 5, 1)
        >>> stats_payload(s)["files_changed"]
        2
    """
    return {
        "commits": summary.commits,
        "files_changed": summary.files_changed,
        "files_added": list(summary.files_added),
        "files_modified": list(summary.files_modified),
        "files_deleted": list(summary.files_deleted),
        "insertions": summary.insertions,
        "deletions": summary.deletions,
    }


def _print(text: Text) -> None:
    log.console().print(text)


def _print_group(title: str, marker: str, style: str, files: list[str]) -> None:
    if not files:
        return
    _print(Text(f"{title}:", style=style))
    for path in files[:_MAX_LISTED_FILES]:
        _print(Text(f"  {marker} {path}", style=style))
    if len(files) > _MAX_LISTED_FILES:
        _print(Text(f"  ... and {len(files) - _MAX_LISTED_FILES} more", style="dim"))


def render_summary(summary: git.ChangeSummary) -> None:
    """Print changed paths grouped by kind, then the line totals."""
    _print_group("Added", "+", "green", summary.files_added)
    _print_group("Modified", "~", "yellow", summary.files_modified)
    _print_group("Deleted", "-", "red", summary.files_deleted)
    _print(Text(f"Total: +{summary.insertions} -{summary.deletions}", style="dim"))


def render_counts(summary: git.ChangeSummary) -> None:
    _print(Text(f"Files added: {len(summary.files_added)}", style="dim"))
    _print(Text(f"Files modified: {len(summary.files_modified)}", style="dim"))
    _print(Text(f"Files deleted: {len(summary.files_deleted)}", style="dim"))
    _print(Text(f"Changes: +{summary.insertions} -{summary.deletions}", style="dim"))


def render_commits(commits: list[git.CommitInfo]) -> None:
    if not commits:
        _print(Text("  No commits found", style="dim"))
        return
    for commit in commits:
        line = Text()
        line.append(commit.hash, style="yellow")
        line.append(f" {commit.message} ")
        noun = "file" if commit.files_changed == 1 else "files"
        line.append(f"({commit.files_changed} {noun})", style="dim")
        _print(line)
