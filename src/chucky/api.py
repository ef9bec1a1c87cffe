"""Client for the Chucky portal API."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from typing import TYPE_CHECKING

from pydantic import ValidationError

from . import log
from .models import BundleLocation, Job, SessionList
from .services.errors import RemoteNotFoundError

if TYPE_CHECKING:
    from .changesets import ChangesetRef

_DEFAULT_TIMEOUT = 30
_FULL_SESSION_ID_LENGTH = 36
_SESSION_SEARCH_LIMIT = 100
_NOT_FOUND_MARKERS = ("not found", "no bundle")


class ApiError(RuntimeError):
    """A portal request failed."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ApiNotFoundError(ApiError):
    """The portal reported the requested resource as missing."""


def _is_not_found(status: int | None, message: str) -> bool:
    if status == 404:
        return True
    lowered = message.lower()
    return any(marker in lowered for marker in _NOT_FOUND_MARKERS)


class ChuckyApi:
    """JSON-over-HTTPS client with bearer authentication."""

    def __init__(self, api_key: str, *, base_url: str, timeout: float = _DEFAULT_TIMEOUT) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def _request(self, method: str, path: str, body: dict[str, object] | None = None) -> dict:
        url = f"{self._base_url}{path}"
        data = None
        if body is not None:
            data = json.dumps({k: v for k, v in body.items() if v is not None}).encode("utf-8")
        request = urllib.request.Request(
            url,
            data=data,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            method=method,
        )
        log.trace(f"{method} {url}")
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                payload = json.load(response)
        except urllib.error.HTTPError as exc:
            message = _http_error_message(exc)
            if _is_not_found(exc.code, message):
                raise ApiNotFoundError(message, status=exc.code) from exc
            raise ApiError(message, status=exc.code) from exc
        except (urllib.error.URLError, TimeoutError) as exc:
            reason = getattr(exc, "reason", exc)
            raise ApiError(f"request to {path} failed: {reason}") from exc
        except json.JSONDecodeError as exc:
            raise ApiError(f"request to {path} returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise ApiError(f"request to {path} returned an unexpected payload")
        return payload

    def get_job(self, job_id: str) -> Job:
        payload = self._request("POST", "/api/jobs/get", {"jobId": job_id})
        try:
            return Job.model_validate(payload.get("job") or {})
        except ValidationError as exc:
            raise ApiError(f"invalid job payload: {exc.error_count()} error(s)") from exc

    def get_job_bundle(self, job_id: str) -> BundleLocation:
        payload = self._request("POST", "/api/jobs/bundle", {"jobId": job_id})
        return _bundle_location(payload)

    def get_session_bundle(self, session_id: str) -> BundleLocation:
        payload = self._request("POST", "/api/sessions/bundle", {"session_id": session_id})
        return _bundle_location(payload)

    def get_bundle_location(self, ref: ChangesetRef) -> BundleLocation:
        """Look up the bundle for a job or a session."""
        from .changesets import ChangesetKind

        if ref.kind is ChangesetKind.JOB:
            return self.get_job_bundle(ref.id)
        return self.get_session_bundle(ref.id)

    def list_sessions(
        self,
        *,
        limit: int | None = None,
        project_id: str | None = None,
        with_bundle: bool | None = None,
    ) -> SessionList:
        payload = self._request(
            "POST",
            "/api/sessions/list",
            {"limit": limit, "project_id": project_id, "with_bundle": with_bundle},
        )
        try:
            return SessionList.model_validate(payload)
        except ValidationError as exc:
            raise ApiError(f"invalid session list: {exc.error_count()} error(s)") from exc

    def resolve_session_id(self, partial_id: str, *, project_id: str | None = None) -> str:
        """Resolve an abbreviated session id by unique prefix.

        Raises:
            RemoteNotFoundError: No session or more than one session matches.
        """
        if len(partial_id) >= _FULL_SESSION_ID_LENGTH:
            return partial_id
        sessions = self.list_sessions(limit=_SESSION_SEARCH_LIMIT, project_id=project_id)
        matches = [s.id for s in sessions.sessions if s.id.startswith(partial_id)]
        if not matches:
            raise RemoteNotFoundError(
                "session_not_found",
                f"No session found matching '{partial_id}'",
                details={"session_id": partial_id},
            )
        if len(matches) > 1:
            raise RemoteNotFoundError(
                "ambiguous_id",
                f"Ambiguous session ID '{partial_id}' - matches {len(matches)} sessions. "
                "Use more characters.",
                details={"session_id": partial_id, "matches": matches},
            )
        return matches[0]


def _http_error_message(exc: urllib.error.HTTPError) -> str:
    detail = ""
    if exc.fp:
        raw = exc.read().decode("utf-8", errors="ignore")
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            detail = raw.strip()
        else:
            if isinstance(parsed, dict) and parsed.get("error"):
                detail = str(parsed["error"])
    return detail or f"Request failed: {exc.code}"


def _bundle_location(payload: dict) -> BundleLocation:
    try:
        return BundleLocation.model_validate(payload)
    except ValidationError as exc:
        raise ApiError(f"invalid bundle payload: {exc.error_count()} error(s)") from exc
