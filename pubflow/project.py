"""Package state stored in pyproject.toml.

Project never caches file contents: every accessor re-reads pyproject.toml,
so rollback can tell whether the version bump already hit the disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .errors import ConfigError
from .toml import (
    get_classifiers,
    get_index_publish_url,
    get_project_name,
    get_project_urls,
    get_project_version,
    get_tool_settings,
    load_pyproject,
    set_project_version,
)

PRIVATE_CLASSIFIER = "Private :: Do Not Upload"
LOCK_FILE = "uv.lock"

# [project.urls] labels that point at the source repository, in priority order
REPO_URL_LABELS = ("repository", "source", "source code", "code", "homepage")


class Project:
    """A Python package rooted at a directory containing pyproject.toml."""

    def __init__(self, root: Path) -> None:
        self.root = root

    @classmethod
    def discover(cls, start: Path | None = None) -> Project:
        """Find the nearest directory at or above start with a pyproject.toml.

        Raises:
            ConfigError: If no pyproject.toml is found.
        """
        here = (start or Path.cwd()).resolve()
        for candidate in (here, *here.parents):
            if (candidate / "pyproject.toml").is_file():
                return cls(candidate)
        raise ConfigError(f"No pyproject.toml found in {here} or its parents")

    @property
    def pyproject(self) -> Path:
        return self.root / "pyproject.toml"

    @property
    def lock_file(self) -> Path:
        return self.root / LOCK_FILE

    @property
    def name(self) -> str:
        return get_project_name(load_pyproject(self.pyproject), self.root.name)

    def read_version(self) -> str:
        """Read [project].version from disk."""
        return get_project_version(load_pyproject(self.pyproject))

    def write_version(self, new_version: str) -> None:
        set_project_version(self.pyproject, new_version)

    def is_private(self) -> bool:
        """True when the package opts out of index uploads via its classifiers."""
        return PRIVATE_CLASSIFIER in get_classifiers(load_pyproject(self.pyproject))

    def has_lock_file(self) -> bool:
        return self.lock_file.exists()

    def is_git_root(self) -> bool:
        return (self.root / ".git").exists()

    def repo_url(self) -> str | None:
        """Source repository URL from [project.urls], if declared."""
        urls = get_project_urls(load_pyproject(self.pyproject))
        for label in REPO_URL_LABELS:
            if label in urls:
                return urls[label]
        return None

    def settings(self) -> dict[str, Any]:
        """The raw [tool.pubflow] table."""
        return get_tool_settings(load_pyproject(self.pyproject), "pubflow")

    def index_publish_url(self, index_name: str) -> str | None:
        return get_index_publish_url(load_pyproject(self.pyproject), index_name)
