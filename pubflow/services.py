"""The external collaborators a release run is wired with."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .project import Project
from .registry import PackageIndex
from .vcs import Git


class Services(BaseModel):
    """Bundle of collaborators handed to the pipeline.

    Attributes:
        project: Reads and writes package state in pyproject.toml.
        git: Version control operations.
        registry: The package index releases are uploaded to.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    project: Project
    git: Git
    registry: PackageIndex

    @classmethod
    def for_project(cls, project: Project, index: str | None = None) -> Services:
        return cls(project=project, git=Git(), registry=PackageIndex(project, index))
