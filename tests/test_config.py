"""Tests for pubflow.config."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from pubflow.config import (
    DEFAULT_BUILD_COMMAND,
    ReleaseOptions,
    Settings,
    load_settings,
)
from pubflow.errors import ConfigError
from pubflow.project import Project


def _project_with_settings(root: Path, table: str) -> Project:
    (root / "pyproject.toml").write_text(
        '[project]\nname = "demo"\nversion = "1.0.0"\n\n[tool.pubflow]\n' + table
    )
    return Project(root)


class TestLoadSettings:
    def test_defaults_without_table(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "demo"\nversion = "1.0.0"\n'
        )
        settings = load_settings(Project(tmp_path))

        assert settings == Settings()
        assert settings.tag_prefix == "v"
        assert settings.build_command == DEFAULT_BUILD_COMMAND

    def test_kebab_case_keys(self, tmp_path: Path) -> None:
        project = _project_with_settings(
            tmp_path,
            'tag-prefix = "release-"\n'
            'test-command = "uv run pytest -x"\n'
            "any-branch = true\n"
            "release-draft = false\n"
            "2fa = false\n",
        )
        settings = load_settings(project)

        assert settings.tag_prefix == "release-"
        assert settings.test_command == "uv run pytest -x"
        assert settings.any_branch is True
        assert settings.release_draft is False
        assert settings.two_factor is False

    def test_unknown_key_is_rejected(self, tmp_path: Path) -> None:
        project = _project_with_settings(tmp_path, "publsh = false\n")
        with pytest.raises(ConfigError, match="Invalid \\[tool.pubflow\\]"):
            load_settings(project)

    def test_wrong_type_is_rejected(self, tmp_path: Path) -> None:
        project = _project_with_settings(tmp_path, 'tests = "sometimes"\n')
        with pytest.raises(ConfigError):
            load_settings(project)


class TestReleaseOptions:
    def test_git_tag_uses_prefix(self) -> None:
        assert ReleaseOptions(version="1.2.4").git_tag == "v1.2.4"
        assert ReleaseOptions(version="1.2.4", tag_prefix="").git_tag == "1.2.4"

    def test_commit_message_defaults_to_version(self) -> None:
        assert ReleaseOptions(version="1.2.4").commit_message() == "1.2.4"

    def test_commit_message_placeholder(self) -> None:
        options = ReleaseOptions(version="1.2.4", message="chore: release %s (%s)")
        assert options.commit_message() == "chore: release 1.2.4 (1.2.4)"

    def test_two_factor_alias(self) -> None:
        options = ReleaseOptions.model_validate({"version": "1.0.0", "2fa": False})
        assert options.two_factor is False

    def test_frozen(self) -> None:
        options = ReleaseOptions(version="1.0.0")
        with pytest.raises(ValidationError):
            options.preview = True  # type: ignore[misc]
