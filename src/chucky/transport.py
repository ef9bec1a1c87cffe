"""Bundle transport primitives: locate, download and scope a bundle file."""

from __future__ import annotations

import contextlib
import shutil
import time
import urllib.error
import urllib.request
from pathlib import Path
from typing import Callable, Iterator

from . import log, paths
from .api import ApiNotFoundError, ChuckyApi
from .changesets import ChangesetKind, ChangesetRef
from .models import BundleLocation, BundleWaitPolicy
from .services.errors import DownloadFailedError, RemoteNotFoundError

_DOWNLOAD_TIMEOUT = 120


def locate_bundle(
    api: ChuckyApi,
    ref: ChangesetRef,
    *,
    wait: BundleWaitPolicy | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BundleLocation:
    """Ask the remote API where a changeset's bundle lives.

    Without ``wait`` a single lookup is made. With a policy, "not found"
    answers are retried while the server finalizes the bundle.

    Raises:
        RemoteNotFoundError: The changeset or its bundle is unknown.
        ApiError: Any other API failure.
    """
    attempts = wait.attempts if wait is not None else 1
    delay = wait.delay_seconds if wait is not None else 0.0
    for attempt in range(1, attempts + 1):
        try:
            location = api.get_bundle_location(ref)
        except ApiNotFoundError as exc:
            if attempt >= attempts:
                code = (
                    "job_not_found" if ref.kind is ChangesetKind.JOB else "session_not_found"
                )
                raise RemoteNotFoundError(
                    code,
                    f"{ref.kind.label} {ref.short_id} not found or has no bundle: {exc}",
                    details=ref.payload(),
                ) from exc
            log.debug(f"bundle not ready (attempt {attempt}/{attempts}); retrying")
            sleep(delay)
            continue
        log.debug(f"bundle for {ref.short_id}: has_changes={location.has_changes}")
        return location
    raise AssertionError("unreachable")


def download_bundle(url: str, dest: Path, *, timeout: float = _DOWNLOAD_TIMEOUT) -> Path:
    """Stream a bundle to ``dest``.

    Raises:
        DownloadFailedError: The request failed or the file could not be written.
    """
    log.debug(f"downloading bundle to {dest}")
    try:
        with urllib.request.urlopen(url, timeout=timeout) as response:
            with dest.open("wb") as fh:
                shutil.copyfileobj(response, fh)
    except urllib.error.HTTPError as exc:
        raise DownloadFailedError(
            f"Failed to download bundle: HTTP {exc.code}", details={"status": exc.code}
        ) from exc
    except (urllib.error.URLError, TimeoutError, OSError) as exc:
        reason = getattr(exc, "reason", exc)
        raise DownloadFailedError(f"Failed to download bundle: {reason}") from exc
    return dest


def remove_quietly(path: Path) -> None:
    """Delete a file, logging rather than raising on failure."""
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        log.debug(f"could not remove {path}: {exc}")


@contextlib.contextmanager
def temporary_bundle(ref: ChangesetRef) -> Iterator[Path]:
    """Yield a process-scoped temp path that is removed on exit."""
    path = paths.bundle_temp_path(ref.id)
    try:
        yield path
    finally:
        remove_quietly(path)
