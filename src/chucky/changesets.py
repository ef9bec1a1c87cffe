"""Changeset identity: job/session ids and their quarantine branch names."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .api import ChuckyApi

BRANCH_NAMESPACE = "chucky"
JOB_ID_PREFIX = "run_"
SESSION_DISPLAY_LENGTH = 8


class ChangesetKind(str, Enum):
    JOB = "job"
    SESSION = "session"

    @property
    def id_field(self) -> str:
        """Key used for the id in structured output, e.g. ``job_id``."""
        return f"{self.value}_id"

    @property
    def label(self) -> str:
        return self.value.capitalize()


def changeset_kind(raw_id: str) -> ChangesetKind:
    """Detect the id namespace from its prefix.

    Example:
        >>> changeset_kind("run_abc").value
        'job'
        >>> changeset_kind("4f0c2a").value
        'session'
    """
    if raw_id.startswith(JOB_ID_PREFIX):
        return ChangesetKind.JOB
    return ChangesetKind.SESSION


@dataclass(frozen=True)
class ChangesetRef:
    """A fully resolved remote changeset.

    Attributes:
        kind: Job or session.
        id: Full remote id (job ids keep their ``run_`` prefix).
    """

    kind: ChangesetKind
    id: str

    @property
    def branch(self) -> str:
        """Quarantine branch holding this changeset's commits.

        Example:
            >>> ChangesetRef(ChangesetKind.JOB, "run_123").branch
            'chucky/job-run_123'
        """
        return f"{BRANCH_NAMESPACE}/{self.kind.value}-{self.id}"

    @property
    def short_id(self) -> str:
        """Id used in human output; sessions are abbreviated.

        Example:
            >>> ChangesetRef(ChangesetKind.SESSION, "0123456789abcdef").short_id
            '01234567'
        """
        if self.kind is ChangesetKind.SESSION:
            return self.id[:SESSION_DISPLAY_LENGTH]
        return self.id

    def payload(self, **fields: object) -> dict[str, object]:
        """Build an output payload keyed by this changeset's id field."""
        return {self.kind.id_field: self.id, **fields}


def resolve_changeset(
    raw_id: str, api: ChuckyApi, *, project_id: str | None = None
) -> ChangesetRef:
    """Resolve a user-supplied id into a ``ChangesetRef``.

    Job ids are used verbatim; session ids may be abbreviated and are
    resolved through the remote API.

    Raises:
        ServiceFailure: The session prefix matches no session or several.
    """
    kind = changeset_kind(raw_id)
    if kind is ChangesetKind.JOB:
        return ChangesetRef(kind=kind, id=raw_id)
    return ChangesetRef(kind=kind, id=api.resolve_session_id(raw_id, project_id=project_id))
