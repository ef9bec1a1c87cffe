# ruff: noqa: E402

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import chucky.log as chucky_log


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHUCKY_CONFIG_DIR", str(tmp_path / "chucky-config"))
    for name in (
        "CHUCKY_API_KEY",
        "CHUCKY_PORTAL_URL",
        "CHUCKY_LOG_LEVEL",
        "CHUCKY_NO_COLOR",
        "NO_COLOR",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(chucky_log, "_configured_level", None)
    monkeypatch.setattr(chucky_log, "_no_color_override", None)

