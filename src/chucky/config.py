"""Configuration helpers for Chucky.

This module reads and writes the user-wide ``config.json`` and the
per-directory ``.chucky.json`` binding, validating both with Pydantic.

Example:
    >>> from chucky.config import DEFAULT_PORTAL_URL
    >>> DEFAULT_PORTAL_URL.startswith("https://")
    True
"""

import json
import os
from pathlib import Path

from pydantic import BaseModel, ValidationError

from . import log, paths
from .models import BundleWaitPolicy, GlobalConfig, ProjectConfig
from .services.errors import CommandFailedError

DEFAULT_PORTAL_URL = "https://doting-hornet-490.convex.site"
API_KEY_ENV = "CHUCKY_API_KEY"
PORTAL_URL_ENV = "CHUCKY_PORTAL_URL"


def load_json(path: Path) -> dict | None:
    """Load a JSON file if it exists.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed payload as a dict, or ``None`` if the file does not exist.

    Example:
        >>> from pathlib import Path
        >>> load_json(Path("missing.json")) is None
        True
    """
    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def write_json(path: Path, payload: dict | BaseModel) -> None:
    """Write a JSON payload to disk, creating parent directories.

    Args:
        path: Path to the JSON file to write.
        payload: Dict or Pydantic model to serialize.
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_none=True)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2)
        fh.write("\n")


def _load_model(path: Path, model_type: type[BaseModel]) -> BaseModel | None:
    try:
        payload = load_json(path)
    except (OSError, json.JSONDecodeError) as exc:
        log.warning(f"ignoring unreadable config {path}: {exc}")
        return None
    if payload is None:
        return None
    try:
        return model_type.model_validate(payload)
    except ValidationError as exc:
        log.warning(f"ignoring invalid config {path}: {exc.error_count()} error(s)")
        return None


def load_global_config(path: Path | None = None) -> GlobalConfig | None:
    """Load the user-wide config, or ``None`` when absent or invalid."""
    loaded = _load_model(path or paths.global_config_path(), GlobalConfig)
    return loaded if isinstance(loaded, GlobalConfig) else None


def save_global_config(config: GlobalConfig, path: Path | None = None) -> None:
    write_json(path or paths.global_config_path(), config)


def load_project_config(cwd: Path | None = None) -> ProjectConfig | None:
    """Load the project binding for a directory, or ``None`` when absent."""
    loaded = _load_model(paths.project_config_path(cwd), ProjectConfig)
    return loaded if isinstance(loaded, ProjectConfig) else None


def save_project_config(config: ProjectConfig, cwd: Path | None = None) -> None:
    write_json(paths.project_config_path(cwd), config)


def require_api_key(global_config: GlobalConfig | None = None) -> str:
    """Return the API key from the environment or the user-wide config.

    Raises:
        CommandFailedError: No key is configured (``not_logged_in``).
    """
    env_key = os.environ.get(API_KEY_ENV, "").strip()
    if env_key:
        return env_key
    loaded = global_config if global_config is not None else load_global_config()
    if loaded is None or not loaded.api_key:
        raise CommandFailedError(
            "not_logged_in",
            f"Not logged in. Run 'chucky login' first or set {API_KEY_ENV}.",
        )
    return loaded.api_key


def require_project_config(cwd: Path | None = None) -> ProjectConfig:
    """Return the project binding for a directory.

    Raises:
        CommandFailedError: No binding exists (``project_not_initialized``).
    """
    loaded = load_project_config(cwd)
    if loaded is None:
        raise CommandFailedError(
            "project_not_initialized",
            "Project not initialized. Run 'chucky init' first.",
        )
    return loaded


def portal_url(global_config: GlobalConfig | None = None) -> str:
    """Return the portal base URL (environment, then config, then default)."""
    env_url = os.environ.get(PORTAL_URL_ENV, "").strip()
    if env_url:
        return env_url.rstrip("/")
    loaded = global_config if global_config is not None else load_global_config()
    if loaded is not None and loaded.portal_url:
        return loaded.portal_url.rstrip("/")
    return DEFAULT_PORTAL_URL


def bundle_wait_policy(global_config: GlobalConfig | None = None) -> BundleWaitPolicy:
    loaded = global_config if global_config is not None else load_global_config()
    if loaded is None:
        return BundleWaitPolicy()
    return loaded.bundle_wait
