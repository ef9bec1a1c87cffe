from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ...api import ChuckyApi
from ...models import BundleWaitPolicy


@dataclass(frozen=True)
class ChangesetContext:
    """Per-invocation configuration shared by the changeset services.

    Attributes:
        repo_dir: Repository the quarantine branches live in.
        api: Remote API client.
        project_id: Project used to scope session lookups.
        wait_policy: Retry policy for bundles still being finalized.
        git_path: Optional git executable override.
    """

    repo_dir: Path
    api: ChuckyApi
    project_id: str | None = None
    wait_policy: BundleWaitPolicy = field(default_factory=BundleWaitPolicy)
    git_path: str | None = None
