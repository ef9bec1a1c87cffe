from pathlib import Path

import pytest
from _pytest.doctest import DoctestModule

ROOT = Path(__file__).resolve().parent

DOCTEST_MODULES = {
    ROOT / "src" / "chucky" / "__init__.py",
    ROOT / "src" / "chucky" / "changesets.py",
    ROOT / "src" / "chucky" / "config.py",
    ROOT / "src" / "chucky" / "git.py",
    ROOT / "src" / "chucky" / "io.py",
    ROOT / "src" / "chucky" / "models.py",
    ROOT / "src" / "chucky" / "paths.py",
    ROOT / "src" / "chucky" / "summary.py",
}


def pytest_collect_file(
    parent: pytest.Collector, file_path: Path
) -> DoctestModule | None:
    path = file_path if isinstance(file_path, Path) else Path(str(file_path))
    if path in DOCTEST_MODULES:
        return DoctestModule.from_parent(parent, path=path)
    return None
