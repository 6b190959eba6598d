"""Tests for pubflow.registry."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from pubflow.errors import CommandError, PreflightError
from pubflow.models import ReleaseContext
from pubflow.project import Project
from pubflow.registry import PackageIndex


@pytest.fixture
def indexed_project(tmp_path: Path) -> Project:
    (tmp_path / "pyproject.toml").write_text(
        "[project]\n"
        'name = "demo"\n'
        'version = "1.0.0"\n'
        "\n"
        "[[tool.uv.index]]\n"
        'name = "internal"\n'
        'url = "https://pkgs.example.com/simple/"\n'
        'publish-url = "https://pkgs.example.com/upload/"\n'
        "\n"
        "[[tool.uv.index]]\n"
        'name = "pypi-upload"\n'
        'url = "https://pypi.org/simple/"\n'
        'publish-url = "https://upload.pypi.org/legacy/"\n'
    )
    return Project(tmp_path)


class TestExternalRegistry:
    def test_pypi_by_default(self, project: Project) -> None:
        assert not PackageIndex(project).is_external_registry()

    def test_named_index(self, indexed_project: Project) -> None:
        assert PackageIndex(indexed_project, "internal").is_external_registry()

    def test_named_index_pointing_at_pypi(self, indexed_project: Project) -> None:
        assert not PackageIndex(indexed_project, "pypi-upload").is_external_registry()

    def test_undeclared_index(self, indexed_project: Project) -> None:
        assert PackageIndex(indexed_project, "missing").is_external_registry()


class TestPublish:
    def test_publish_args(self, project: Project) -> None:
        assert PackageIndex(project).publish_args() == ["publish"]
        assert PackageIndex(project, "internal").publish_args() == [
            "publish",
            "--index",
            "internal",
        ]

    @patch("pubflow.registry.run")
    def test_publish_runs_uv(self, mock_run: MagicMock, project: Project) -> None:
        ctx = ReleaseContext(original_version="1.2.3", new_version="1.2.4")

        PackageIndex(project, "internal").publish(ctx)

        mock_run.assert_called_once_with(
            "uv", "publish", "--index", "internal", capture=True, cwd=project.root
        )

    @patch("pubflow.registry.run")
    def test_publish_failure_propagates(
        self, mock_run: MagicMock, project: Project
    ) -> None:
        mock_run.side_effect = CommandError(("uv", "publish"), 1, "403 Forbidden")
        ctx = ReleaseContext(original_version="1.2.3", new_version="1.2.4")

        with pytest.raises(CommandError, match="403"):
            PackageIndex(project).publish(ctx)


class TestAvailability:
    @patch("pubflow.registry.requests.get")
    def test_unclaimed_name(self, mock_get: MagicMock, project: Project) -> None:
        mock_get.return_value = MagicMock(status_code=404, ok=False)

        result = PackageIndex(project).check_availability("Demo_Pkg")

        assert result.is_available and not result.is_unknown
        assert mock_get.call_args[0][0] == "https://pypi.org/pypi/demo-pkg/json"

    @patch("pubflow.registry.requests.get")
    def test_existing_name(self, mock_get: MagicMock, project: Project) -> None:
        mock_get.return_value = MagicMock(status_code=200, ok=True)

        result = PackageIndex(project).check_availability("demo-pkg")

        assert not result.is_available and not result.is_unknown

    @patch("pubflow.registry.requests.get")
    def test_network_error_is_unknown(
        self, mock_get: MagicMock, project: Project
    ) -> None:
        mock_get.side_effect = requests.ConnectionError("offline")

        result = PackageIndex(project).check_availability("demo-pkg")

        assert result.is_unknown

    @patch("pubflow.registry.requests.get")
    def test_external_registry_is_unknown(
        self, mock_get: MagicMock, indexed_project: Project
    ) -> None:
        result = PackageIndex(indexed_project, "internal").check_availability("demo")

        assert result.is_unknown
        mock_get.assert_not_called()


class TestPingAndTwoFactor:
    @patch("pubflow.registry.requests.head")
    def test_ping_failure(self, mock_head: MagicMock, project: Project) -> None:
        mock_head.side_effect = requests.Timeout("slow")

        with pytest.raises(PreflightError, match="pypi.org"):
            PackageIndex(project).ping()

    @patch("pubflow.registry.click.launch")
    def test_enable_two_factor_opens_settings(
        self, mock_launch: MagicMock, project: Project
    ) -> None:
        PackageIndex(project).enable_two_factor(None, "Demo_Pkg")

        mock_launch.assert_called_once_with(
            "https://pypi.org/manage/project/demo-pkg/settings/"
        )
