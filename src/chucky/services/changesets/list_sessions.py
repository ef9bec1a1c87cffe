from __future__ import annotations

from dataclasses import dataclass

from ...api import ChuckyApi
from ...models import Session
from ..base import BaseService

DEFAULT_SESSION_LIMIT = 20


@dataclass(frozen=True)
class ListSessionsRequest:
    limit: int = DEFAULT_SESSION_LIMIT
    with_bundle: bool = False
    project_id: str | None = None


@dataclass(frozen=True)
class ListSessionsOutcome:
    """Sessions returned for one page, newest first.

    Attributes:
        sessions: The listed sessions.
        has_more: Whether the server holds more sessions past ``limit``.
        project_id: Project the listing was scoped to, if any.
    """

    sessions: list[Session]
    has_more: bool
    project_id: str | None = None

    def payload(self) -> dict[str, object]:
        return {
            "sessions": [session.model_dump(mode="json") for session in self.sessions],
            "has_more": self.has_more,
        }


class ListSessionsService(BaseService[ListSessionsRequest, ListSessionsOutcome]):
    """List recent sessions so their ids can be fetched, applied or discarded."""

    def __init__(self, api: ChuckyApi) -> None:
        self._api = api

    def _run(self, request: ListSessionsRequest) -> ListSessionsOutcome:
        result = self._api.list_sessions(
            limit=request.limit,
            project_id=request.project_id,
            with_bundle=True if request.with_bundle else None,
        )
        return ListSessionsOutcome(
            sessions=list(result.sessions),
            has_more=result.pagination.has_more,
            project_id=request.project_id,
        )
