"""Release configuration.

Settings come from the [tool.pubflow] table of the package's pyproject.toml
(kebab-case keys) and are overridden by command-line flags. The merged
result is a frozen ReleaseOptions snapshot that the pipeline is assembled
from.

Example:
    [tool.pubflow]
    branch = "main"
    tag-prefix = "v"
    test-command = "uv run pytest -x"
    release-draft = false
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError
from .models import Availability
from .project import Project

DEFAULT_TEST_COMMAND = "uv run pytest"
DEFAULT_BUILD_COMMAND = "uv build"
DEFAULT_TAG_PREFIX = "v"


def _kebab(name: str) -> str:
    return name.replace("_", "-")


class Settings(BaseModel):
    """The [tool.pubflow] table. Unset values fall back to CLI defaults."""

    model_config = ConfigDict(
        alias_generator=_kebab, populate_by_name=True, extra="forbid", frozen=True
    )

    branch: str | None = None
    any_branch: bool = False
    cleanup: bool = True
    tests: bool = True
    build: bool = True
    publish: bool = True
    release_draft: bool = True
    two_factor: bool = Field(default=True, alias="2fa")
    message: str | None = None
    index: str | None = None
    test_command: str = DEFAULT_TEST_COMMAND
    build_command: str = DEFAULT_BUILD_COMMAND
    tag_prefix: str = DEFAULT_TAG_PREFIX


class ReleaseOptions(BaseModel):
    """Static configuration snapshot for one release run.

    Attributes:
        version: The resolved new version.
        run_build: Build distributions after bumping.
        run_publish: Upload distributions to the index.
        run_tests: Run the test command before bumping.
        cleanup: Recreate the virtual environment before testing.
        preview: Show what would run without mutating anything.
        message: Commit message; "%s" is replaced with the new version.
        release_draft: Open a GitHub release draft at the end.
        two_factor: Enable two-factor requirements for a first release.
        index: Named [[tool.uv.index]] to publish to; PyPI when unset.
        branch: Branch releases must be cut from.
        any_branch: Allow releasing from any branch.
        availability: Whether the package name is free on the index.
        repo_url: Source repository URL, used to detect GitHub.
        test_command: Command line for the test step.
        build_command: Command line for the build step.
        tag_prefix: Prefix prepended to the version in git tags.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: str
    run_build: bool = True
    run_publish: bool = True
    run_tests: bool = True
    cleanup: bool = True
    preview: bool = False
    message: str | None = None
    release_draft: bool = True
    two_factor: bool = Field(default=True, alias="2fa")
    index: str | None = None
    branch: str = "main"
    any_branch: bool = False
    availability: Availability = Field(default_factory=Availability)
    repo_url: str | None = None
    test_command: str = DEFAULT_TEST_COMMAND
    build_command: str = DEFAULT_BUILD_COMMAND
    tag_prefix: str = DEFAULT_TAG_PREFIX

    @property
    def git_tag(self) -> str:
        """Git tag for the new version."""
        return f"{self.tag_prefix}{self.version}"

    def commit_message(self) -> str:
        if self.message:
            return self.message.replace("%s", self.version)
        return self.version


def load_settings(project: Project) -> Settings:
    """Read and validate [tool.pubflow] from the project's pyproject.toml.

    Raises:
        ConfigError: If the table contains unknown keys or bad values.
    """
    raw: dict[str, Any] = project.settings()
    try:
        return Settings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid [tool.pubflow] settings:\n{exc}") from exc
