from __future__ import annotations

import io
import json
import urllib.error
from unittest.mock import patch

import pytest

from chucky import api as api_mod
from chucky.changesets import ChangesetKind, ChangesetRef
from chucky.services import RemoteNotFoundError

BASE_URL = "https://portal.example.com/"


def _response(payload: object) -> io.BytesIO:
    return io.BytesIO(json.dumps(payload).encode("utf-8"))


def _http_error(code: int, body: bytes) -> urllib.error.HTTPError:
    return urllib.error.HTTPError(
        "https://portal.example.com/api", code, "error", {}, io.BytesIO(body)
    )


def _client() -> api_mod.ChuckyApi:
    return api_mod.ChuckyApi("ak_test", base_url=BASE_URL)


def test_request_sends_bearer_json_and_drops_none_fields() -> None:
    with patch(
        "chucky.api.urllib.request.urlopen",
        return_value=_response({"sessions": []}),
    ) as mock_urlopen:
        _client().list_sessions(limit=5)

    request = mock_urlopen.call_args.args[0]
    assert request.full_url == "https://portal.example.com/api/sessions/list"
    assert request.get_method() == "POST"
    assert request.get_header("Authorization") == "Bearer ak_test"
    assert json.loads(request.data) == {"limit": 5}


def test_job_and_session_bundles_normalize_field_spelling() -> None:
    with patch(
        "chucky.api.urllib.request.urlopen",
        side_effect=[
            _response({"downloadUrl": "https://r2/job.bundle", "hasChanges": True}),
            _response({"download_url": "https://r2/s.bundle", "has_changes": False}),
        ],
    ):
        job = _client().get_job_bundle("run_1")
        session = _client().get_session_bundle("abc")

    assert (job.download_url, job.has_changes) == ("https://r2/job.bundle", True)
    assert (session.download_url, session.has_changes) == ("https://r2/s.bundle", False)


def test_get_bundle_location_dispatches_on_kind() -> None:
    client = _client()
    with (
        patch.object(client, "get_job_bundle", return_value="job") as job_bundle,
        patch.object(client, "get_session_bundle", return_value="session") as session_bundle,
    ):
        assert client.get_bundle_location(ChangesetRef(ChangesetKind.JOB, "run_1")) == "job"
        assert client.get_bundle_location(ChangesetRef(ChangesetKind.SESSION, "s1")) == "session"
    job_bundle.assert_called_once_with("run_1")
    session_bundle.assert_called_once_with("s1")


def test_get_job_parses_status_flags() -> None:
    payload = {
        "job": {
            "id": "run_1",
            "status": "failed",
            "isCompleted": True,
            "isSuccess": False,
            "error": {"message": "agent crashed"},
        }
    }
    with patch("chucky.api.urllib.request.urlopen", return_value=_response(payload)):
        job = _client().get_job("run_1")

    assert job.is_completed is True
    assert job.is_success is False
    assert job.error is not None
    assert job.error.message == "agent crashed"


@pytest.mark.parametrize(
    ("code", "body"),
    [
        (404, b"{}"),
        (400, b'{"error": "No bundle available yet"}'),
        (500, b'{"error": "Session not found"}'),
    ],
)
def test_not_found_answers_raise_api_not_found(code: int, body: bytes) -> None:
    with patch(
        "chucky.api.urllib.request.urlopen", side_effect=_http_error(code, body)
    ):
        with pytest.raises(api_mod.ApiNotFoundError):
            _client().get_session_bundle("abc")


def test_other_http_errors_surface_payload_message() -> None:
    with patch(
        "chucky.api.urllib.request.urlopen",
        side_effect=_http_error(401, b'{"error": "Invalid API key"}'),
    ):
        with pytest.raises(api_mod.ApiError) as excinfo:
            _client().get_job("run_1")

    assert not isinstance(excinfo.value, api_mod.ApiNotFoundError)
    assert str(excinfo.value) == "Invalid API key"
    assert excinfo.value.status == 401


def test_connection_errors_raise_api_error() -> None:
    with patch(
        "chucky.api.urllib.request.urlopen",
        side_effect=urllib.error.URLError("connection refused"),
    ):
        with pytest.raises(api_mod.ApiError, match="connection refused"):
            _client().get_job("run_1")


def test_resolve_session_id_returns_full_ids_untouched() -> None:
    full_id = "0123456789abcdef0123456789abcdef0123"
    with patch("chucky.api.urllib.request.urlopen") as mock_urlopen:
        assert _client().resolve_session_id(full_id) == full_id
    mock_urlopen.assert_not_called()


def test_resolve_session_id_matches_unique_prefix() -> None:
    sessions = {"sessions": [{"id": "abc12345-1"}, {"id": "def67890-2"}]}
    with patch(
        "chucky.api.urllib.request.urlopen", return_value=_response(sessions)
    ) as mock_urlopen:
        assert _client().resolve_session_id("abc", project_id="proj_1") == "abc12345-1"

    body = json.loads(mock_urlopen.call_args.args[0].data)
    assert body == {"limit": 100, "project_id": "proj_1"}


def test_resolve_session_id_reports_missing_and_ambiguous_prefixes() -> None:
    sessions = {"sessions": [{"id": "abc-1"}, {"id": "abc-2"}]}
    with patch(
        "chucky.api.urllib.request.urlopen",
        side_effect=[_response(sessions), _response(sessions)],
    ):
        with pytest.raises(RemoteNotFoundError) as missing:
            _client().resolve_session_id("zzz")
        with pytest.raises(RemoteNotFoundError) as ambiguous:
            _client().resolve_session_id("abc")

    assert missing.value.code == "session_not_found"
    assert missing.value.message == "No session found matching 'zzz'"
    assert ambiguous.value.code == "ambiguous_id"
    assert "matches 2 sessions" in ambiguous.value.message
