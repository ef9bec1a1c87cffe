from __future__ import annotations

import io
import os
import urllib.error
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from chucky import transport
from chucky.api import ApiError, ApiNotFoundError
from chucky.changesets import ChangesetKind, ChangesetRef
from chucky.models import BundleLocation, BundleWaitPolicy
from chucky.services import DownloadFailedError, RemoteNotFoundError

JOB = ChangesetRef(ChangesetKind.JOB, "run_42")
SESSION = ChangesetRef(ChangesetKind.SESSION, "0123456789abcdef")
LOCATION = BundleLocation(download_url="https://r2/b.bundle", has_changes=True)


def test_locate_bundle_makes_one_attempt_without_policy() -> None:
    api = MagicMock()
    api.get_bundle_location.side_effect = ApiNotFoundError("Job not found")
    sleeps: list[float] = []

    with pytest.raises(RemoteNotFoundError) as excinfo:
        transport.locate_bundle(api, JOB, sleep=sleeps.append)

    assert excinfo.value.code == "job_not_found"
    assert excinfo.value.details == {"job_id": "run_42"}
    assert api.get_bundle_location.call_count == 1
    assert sleeps == []


def test_locate_bundle_retries_until_bundle_is_ready() -> None:
    api = MagicMock()
    api.get_bundle_location.side_effect = [
        ApiNotFoundError("No bundle yet"),
        ApiNotFoundError("No bundle yet"),
        LOCATION,
    ]
    sleeps: list[float] = []

    location = transport.locate_bundle(
        api,
        SESSION,
        wait=BundleWaitPolicy(attempts=5, delay_seconds=0.5),
        sleep=sleeps.append,
    )

    assert location == LOCATION
    assert sleeps == [0.5, 0.5]


def test_locate_bundle_gives_up_after_policy_attempts() -> None:
    api = MagicMock()
    api.get_bundle_location.side_effect = ApiNotFoundError("No bundle yet")
    sleeps: list[float] = []

    with pytest.raises(RemoteNotFoundError) as excinfo:
        transport.locate_bundle(
            api,
            SESSION,
            wait=BundleWaitPolicy(attempts=3, delay_seconds=1.0),
            sleep=sleeps.append,
        )

    assert excinfo.value.code == "session_not_found"
    assert api.get_bundle_location.call_count == 3
    assert sleeps == [1.0, 1.0]


def test_locate_bundle_does_not_retry_other_api_errors() -> None:
    api = MagicMock()
    api.get_bundle_location.side_effect = ApiError("Invalid API key", status=401)

    with pytest.raises(ApiError):
        transport.locate_bundle(api, JOB, wait=BundleWaitPolicy(attempts=4), sleep=lambda _: None)
    assert api.get_bundle_location.call_count == 1


def test_download_bundle_streams_to_destination(tmp_path: Path) -> None:
    dest = tmp_path / "b.bundle"
    with patch(
        "chucky.transport.urllib.request.urlopen",
        return_value=io.BytesIO(b"# v2 git bundle\n"),
    ):
        assert transport.download_bundle("https://r2/b.bundle", dest) == dest
    assert dest.read_bytes() == b"# v2 git bundle\n"


def test_download_bundle_maps_http_errors(tmp_path: Path) -> None:
    error = urllib.error.HTTPError("https://r2/b.bundle", 403, "Forbidden", {}, None)
    with patch("chucky.transport.urllib.request.urlopen", side_effect=error):
        with pytest.raises(DownloadFailedError) as excinfo:
            transport.download_bundle("https://r2/b.bundle", tmp_path / "b.bundle")
    assert excinfo.value.details == {"status": 403}


def test_download_bundle_maps_connection_errors(tmp_path: Path) -> None:
    with patch(
        "chucky.transport.urllib.request.urlopen",
        side_effect=urllib.error.URLError("timed out"),
    ):
        with pytest.raises(DownloadFailedError, match="timed out"):
            transport.download_bundle("https://r2/b.bundle", tmp_path / "b.bundle")


def test_temporary_bundle_is_process_scoped_and_removed() -> None:
    with transport.temporary_bundle(JOB) as path:
        assert str(os.getpid()) in path.name
        path.write_bytes(b"bundle")
    assert not path.exists()


def test_temporary_bundle_is_removed_when_block_raises() -> None:
    with pytest.raises(RuntimeError):
        with transport.temporary_bundle(JOB) as path:
            path.write_bytes(b"bundle")
            raise RuntimeError("boom")
    assert not path.exists()


def test_remove_quietly_swallows_os_errors(tmp_path: Path) -> None:
    target = tmp_path / "b.bundle"
    with patch.object(Path, "unlink", side_effect=PermissionError("denied")):
        transport.remove_quietly(target)
