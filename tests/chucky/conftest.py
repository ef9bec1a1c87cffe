from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Callable, Mapping

import pytest

FileEdits = Mapping[str, "str | bytes | None"]


class GitRepo:
    """Throwaway repository driven through the real git binary."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def git(self, *args: str, check: bool = True) -> str:
        result = subprocess.run(
            ["git", "-C", str(self.path), *args],
            capture_output=True,
            text=True,
            check=False,
        )
        if check and result.returncode != 0:
            raise AssertionError(f"git {' '.join(args)} failed: {result.stderr}")
        return result.stdout.strip()

    def configure(self) -> None:
        self.git("config", "user.name", "Chucky Tests")
        self.git("config", "user.email", "tests@example.com")
        self.git("config", "commit.gpgsign", "false")

    def write(self, edits: FileEdits) -> None:
        for name, content in edits.items():
            target = self.path / name
            if content is None:
                target.unlink()
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")

    def commit(self, edits: FileEdits, message: str) -> str:
        self.write(edits)
        self.git("add", "-A")
        self.git("commit", "-q", "-m", message)
        return self.head()

    def head(self) -> str:
        return self.git("rev-parse", "HEAD")

    def parents(self, ref: str = "HEAD") -> list[str]:
        return self.git("rev-list", "--parents", "-n", "1", ref).split()[1:]

    def branches(self) -> list[str]:
        output = self.git("for-each-ref", "--format=%(refname:short)", "refs/heads")
        return [line for line in output.splitlines() if line]

    def count(self, ref: str = "HEAD") -> int:
        return int(self.git("rev-list", "--count", ref))


@pytest.fixture
def git_repo(tmp_path: Path) -> GitRepo:
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    path = tmp_path / "repo"
    path.mkdir()
    repo = GitRepo(path)
    repo.git("init", "-q")
    repo.configure()
    repo.commit({"README.md": "# project\n", "src/app.py": "print('hello')\n"}, "initial")
    return repo


MakeBundle = Callable[..., Path]


@pytest.fixture
def make_bundle(tmp_path: Path) -> MakeBundle:
    """Build a bundle of commits made on top of ``repo``'s current ``HEAD``.

    Each element of ``commits`` is ``(edits, message)``. The bundle carries
    only the new commits and lists the base commit as a prerequisite.
    """
    counter = {"n": 0}

    def build(repo: GitRepo, commits: list[tuple[FileEdits, str]]) -> Path:
        counter["n"] += 1
        clone = GitRepo(tmp_path / f"agent-{counter['n']}")
        subprocess.run(
            ["git", "clone", "-q", str(repo.path), str(clone.path)],
            check=True,
            capture_output=True,
        )
        clone.configure()
        base = clone.head()
        for edits, message in commits:
            clone.commit(edits, message)
        bundle = tmp_path / f"agent-{counter['n']}.bundle"
        clone.git("bundle", "create", str(bundle), f"{base}..HEAD")
        return bundle

    return build
