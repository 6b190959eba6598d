"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from pubflow.config import ReleaseOptions
from pubflow.project import Project
from pubflow.registry import PackageIndex
from pubflow.services import Services
from pubflow.vcs import Git

PYPROJECT = """\
[project]
name = "Demo_Pkg"
# bumped by pubflow
version = "1.2.3"
description = "A demo package"
classifiers = ["Programming Language :: Python :: 3"]

[project.urls]
Homepage = "https://demo.example.com"
Repository = "https://github.com/acme/demo-pkg"

[tool.pubflow]
branch = "main"
tag-prefix = "v"
"""


@pytest.fixture
def project(tmp_path: Path) -> Project:
    """A package checked out at the root of a git repository."""
    (tmp_path / "pyproject.toml").write_text(PYPROJECT)
    (tmp_path / ".git").mkdir()
    return Project(tmp_path)


@pytest.fixture
def git() -> MagicMock:
    """A git double whose latest tag follows the tags it creates."""
    mock = MagicMock(spec=Git)
    mock.has_upstream.return_value = True
    mock.push_graceful.return_value = None
    mock.latest_tag.return_value = "v1.2.3"

    def _tag(name: str) -> None:
        mock.latest_tag.return_value = name

    mock.tag.side_effect = _tag
    return mock


@pytest.fixture
def registry() -> MagicMock:
    mock = MagicMock(spec=PackageIndex)
    mock.publish_args.return_value = ["publish"]
    mock.is_external_registry.return_value = False
    mock.two_factor_url.return_value = (
        "https://pypi.org/manage/project/demo-pkg/settings/"
    )
    return mock


@pytest.fixture
def services(project: Project, git: MagicMock, registry: MagicMock) -> Services:
    return Services(project=project, git=git, registry=registry)


@pytest.fixture
def make_options() -> Callable[..., ReleaseOptions]:
    """Build ReleaseOptions for 1.2.3 → 1.2.4 with slow steps turned off."""

    def _make(**overrides: Any) -> ReleaseOptions:
        values: dict[str, Any] = {
            "version": "1.2.4",
            "branch": "main",
            "repo_url": "https://github.com/acme/demo-pkg",
            "run_tests": False,
            "cleanup": False,
        }
        values.update(overrides)
        return ReleaseOptions(**values)

    return _make
