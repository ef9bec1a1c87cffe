"""Changeset transport and reconciliation services."""

from .apply_changeset import (
    ApplyChangesetOutcome,
    ApplyChangesetRequest,
    ApplyChangesetService,
)
from .context import ChangesetContext
from .discard_changeset import (
    DiscardChangesetOutcome,
    DiscardChangesetRequest,
    DiscardChangesetService,
)
from .fetch_changeset import (
    FetchChangesetOutcome,
    FetchChangesetRequest,
    FetchChangesetService,
)
from .list_sessions import (
    ListSessionsOutcome,
    ListSessionsRequest,
    ListSessionsService,
)
from .pull_changeset import (
    PullChangesetOutcome,
    PullChangesetRequest,
    PullChangesetService,
)
from .wait_for_job import (
    WaitForJobOutcome,
    WaitForJobRequest,
    WaitForJobService,
)

__all__ = [
    "ApplyChangesetOutcome",
    "ApplyChangesetRequest",
    "ApplyChangesetService",
    "ChangesetContext",
    "DiscardChangesetOutcome",
    "DiscardChangesetRequest",
    "DiscardChangesetService",
    "FetchChangesetOutcome",
    "FetchChangesetRequest",
    "FetchChangesetService",
    "ListSessionsOutcome",
    "ListSessionsRequest",
    "ListSessionsService",
    "PullChangesetOutcome",
    "PullChangesetRequest",
    "PullChangesetService",
    "WaitForJobOutcome",
    "WaitForJobRequest",
    "WaitForJobService",
]
