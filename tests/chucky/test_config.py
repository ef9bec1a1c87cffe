from __future__ import annotations

import json
from pathlib import Path

import pytest

from chucky import config, paths
from chucky.models import BundleWaitPolicy, GlobalConfig, ProjectConfig
from chucky.services import CommandFailedError, ExitCode


def test_global_config_round_trips_through_config_dir(tmp_path: Path) -> None:
    config.save_global_config(GlobalConfig(api_key="ak_live_1", email="dev@example.com"))

    assert paths.global_config_path().parent == tmp_path / "chucky-config"
    loaded = config.load_global_config()
    assert loaded is not None
    assert loaded.api_key == "ak_live_1"
    assert loaded.bundle_wait == BundleWaitPolicy()


def test_global_config_accepts_legacy_camel_case(tmp_path: Path) -> None:
    path = paths.global_config_path()
    path.parent.mkdir(parents=True)
    path.write_text(
        json.dumps({"apiKey": " ak_live_2 ", "portalUrl": "https://p.example.com/"}),
        encoding="utf-8",
    )

    loaded = config.load_global_config()

    assert loaded is not None
    assert loaded.api_key == "ak_live_2"
    assert config.portal_url(loaded) == "https://p.example.com"


def test_invalid_global_config_is_ignored(tmp_path: Path) -> None:
    path = paths.global_config_path()
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")

    assert config.load_global_config() is None


def test_require_api_key_prefers_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    config.save_global_config(GlobalConfig(api_key="ak_from_file"))
    monkeypatch.setenv("CHUCKY_API_KEY", "ak_from_env")

    assert config.require_api_key() == "ak_from_env"


def test_require_api_key_fails_when_not_logged_in() -> None:
    with pytest.raises(CommandFailedError) as excinfo:
        config.require_api_key()

    assert excinfo.value.code == "not_logged_in"
    assert excinfo.value.exit_code is ExitCode.NETWORK_ERROR


def test_portal_url_resolution_order(monkeypatch: pytest.MonkeyPatch) -> None:
    assert config.portal_url(GlobalConfig()) == config.DEFAULT_PORTAL_URL
    assert config.portal_url(GlobalConfig(portal_url="https://cfg")) == "https://cfg"
    monkeypatch.setenv("CHUCKY_PORTAL_URL", "https://env/")
    assert config.portal_url(GlobalConfig(portal_url="https://cfg")) == "https://env"


def test_project_config_reads_camel_case_binding(tmp_path: Path) -> None:
    (tmp_path / ".chucky.json").write_text(
        json.dumps({"projectId": "proj_1", "projectName": "demo", "folder": "app"}),
        encoding="utf-8",
    )

    loaded = config.require_project_config(tmp_path)

    assert loaded.project_id == "proj_1"
    assert loaded.folder == "app"


def test_project_config_round_trips(tmp_path: Path) -> None:
    config.save_project_config(ProjectConfig(project_id="proj_2", folder=""), tmp_path)

    loaded = config.load_project_config(tmp_path)

    assert loaded is not None
    assert loaded.project_id == "proj_2"
    assert loaded.folder == "."


def test_missing_project_binding_fails(tmp_path: Path) -> None:
    with pytest.raises(CommandFailedError) as excinfo:
        config.require_project_config(tmp_path)
    assert excinfo.value.code == "project_not_initialized"


def test_bundle_wait_policy_reads_overrides() -> None:
    loaded = GlobalConfig.model_validate(
        {"bundle_wait": {"attempts": 3, "delay_seconds": 0.25}}
    )
    assert config.bundle_wait_policy(loaded) == BundleWaitPolicy(attempts=3, delay_seconds=0.25)
    assert config.bundle_wait_policy(None).attempts == 15
