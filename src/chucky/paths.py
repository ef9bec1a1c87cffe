"""Path helpers for locating Chucky configuration files."""

import os
import tempfile
from pathlib import Path

from platformdirs import user_config_dir

CHUCKY_APP_NAME = "chucky"
GLOBAL_CONFIG_FILENAME = "config.json"
PROJECT_CONFIG_FILENAME = ".chucky.json"
BUNDLE_FILE_PREFIX = "chucky-bundle-"
BUNDLE_FILE_SUFFIX = ".bundle"


def chucky_config_dir() -> Path:
    """Return the user-wide Chucky configuration directory.

    ``CHUCKY_CONFIG_DIR`` overrides the platform default.

    Example:
        >>> isinstance(chucky_config_dir(), Path)
        True
    """
    override = os.environ.get("CHUCKY_CONFIG_DIR", "").strip()
    if override:
        return Path(override).expanduser()
    return Path(user_config_dir(CHUCKY_APP_NAME))


def global_config_path() -> Path:
    """Return the path to the user-wide config file.

    Example:
        >>> global_config_path().name == GLOBAL_CONFIG_FILENAME
        True
    """
    return chucky_config_dir() / GLOBAL_CONFIG_FILENAME


def project_config_path(cwd: Path | None = None) -> Path:
    """Return the project binding file for a directory.

    Example:
        >>> project_config_path(Path("/work/app")).as_posix()
        '/work/app/.chucky.json'
    """
    return (cwd or Path.cwd()) / PROJECT_CONFIG_FILENAME


def bundle_temp_path(changeset_id: str) -> Path:
    """Return a process-specific temp path for a downloaded bundle.

    Example:
        >>> bundle_temp_path("run_1").name.endswith("-run_1.bundle")
        True
    """
    safe_id = changeset_id.replace("/", "_")
    name = f"{BUNDLE_FILE_PREFIX}{os.getpid()}-{safe_id}{BUNDLE_FILE_SUFFIX}"
    return Path(tempfile.gettempdir()) / name
