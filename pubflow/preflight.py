"""Checks run before anything in the repository is changed.

check_prerequisites covers the index and the requested version,
check_git covers the branch and working tree. Both raise PreflightError
with a message telling the user what to fix.
"""

from __future__ import annotations

from packaging.version import Version

from .config import ReleaseOptions
from .errors import PreflightError
from .project import Project
from .registry import PackageIndex
from .shell import info
from .vcs import Git
from .versions import resolve

MIN_GIT_VERSION = "2.11.0"


def check_prerequisites(
    options: ReleaseOptions, project: Project, git: Git, registry: PackageIndex
) -> None:
    """Verify the index, git and the target version before publishing.

    Raises:
        PreflightError: If any check fails.
        VersionNotGreater: If the target version does not exceed the current one.
    """
    if registry.is_external_registry():
        info("Skipping index ping for external registry")
    else:
        registry.ping()
        info("Package index is reachable")

    git_version = git.version()
    if Version(git_version) < Version(MIN_GIT_VERSION):
        raise PreflightError(
            f"Please upgrade to git>={MIN_GIT_VERSION} (found {git_version})."
        )
    info(f"git {git_version}")

    git.check_remote()
    info("Git remote is reachable")

    resolve(project.read_version(), options.version)
    info(f"Version {options.version} is valid")

    if git.tag_exists(options.git_tag):
        raise PreflightError(f"Git tag `{options.git_tag}` already exists.")
    info(f"Git tag {options.git_tag} is free")


def check_git(options: ReleaseOptions, git: Git) -> None:
    """Verify the release branch, working tree and remote history.

    Raises:
        PreflightError: If the repository is not in a releasable state.
    """
    if not options.any_branch:
        branch = git.current_branch()
        if branch != options.branch:
            raise PreflightError(
                f"Not on `{options.branch}` branch. Use --any-branch to publish "
                "anyway, or set a different release branch using --branch."
            )
        info(f"On release branch {branch}")

    if not git.is_working_tree_clean():
        raise PreflightError("Unclean working tree. Commit or stash changes first.")
    info("Working tree is clean")

    if git.has_upstream():
        git.fetch()
        if not git.is_remote_history_clean():
            raise PreflightError("Remote history differs. Please pull changes.")
        info("Remote history is in sync")
