"""Command implementations exposed by the Chucky CLI."""

from .apply import apply_changeset
from .diff import show_diff
from .discard import discard_changeset
from .fetch import fetch_changeset
from .log import show_log
from .pull import pull_changeset
from .sessions import list_sessions
from .wait import wait_for_job

__all__ = [
    "apply_changeset",
    "discard_changeset",
    "fetch_changeset",
    "list_sessions",
    "pull_changeset",
    "show_diff",
    "show_log",
    "wait_for_job",
]
