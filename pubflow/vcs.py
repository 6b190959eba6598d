"""Git operations used by the release pipeline.

Each method shells out to the git CLI through pubflow.shell, so a failing
command surfaces as CommandError with git's stderr attached.
"""

from __future__ import annotations

import re

from .errors import CommandError, PreflightError
from .models import PushResult
from .shell import git, run

# GitHub rejects pushes to protected branches with this error code
BRANCH_PROTECTION_ERROR = "GH006"
DEFAULT_BRANCH_CANDIDATES = ("main", "master", "gh-pages")


class Git:
    """Thin object wrapper around the git CLI.

    Kept as a class so the pipeline can be handed a fake in tests.
    """

    def latest_tag(self) -> str:
        """Most recent tag reachable from HEAD."""
        return git("describe", "--abbrev=0", "--tags")

    def tag_exists(self, tag: str) -> bool:
        result = run(
            "git",
            "rev-parse",
            "--quiet",
            "--verify",
            f"refs/tags/{tag}",
            check=False,
            capture=True,
        )
        return result.returncode == 0

    def delete_tag(self, tag: str) -> None:
        git("tag", "--delete", tag)

    def remove_last_commit(self) -> None:
        git("reset", "--hard", "HEAD~1")

    def add(self, *paths: str) -> None:
        git("add", *paths)

    def commit(self, message: str) -> None:
        git("commit", "-m", message)

    def tag(self, name: str) -> None:
        git("tag", name)

    def version(self) -> str:
        """Installed git version, e.g. "2.43.0"."""
        output = git("version")
        match = re.search(r"\d+\.\d+\.\d+", output)
        if not match:
            raise PreflightError(f"Could not determine git version from `{output}`")
        return match.group(0)

    def current_branch(self) -> str:
        return git("symbolic-ref", "--short", "HEAD")

    def default_branch(self) -> str:
        """First of main/master/gh-pages that exists locally."""
        for name in DEFAULT_BRANCH_CANDIDATES:
            result = run(
                "git",
                "show-ref",
                "--verify",
                "--quiet",
                f"refs/heads/{name}",
                check=False,
                capture=True,
            )
            if result.returncode == 0:
                return name
        raise PreflightError(
            "Could not infer the default Git branch. Please specify one with --branch."
        )

    def is_working_tree_clean(self) -> bool:
        return git("status", "--porcelain") == ""

    def has_upstream(self) -> bool:
        result = run(
            "git",
            "rev-parse",
            "--abbrev-ref",
            "--symbolic-full-name",
            "@{u}",
            check=False,
            capture=True,
        )
        return result.returncode == 0

    def fetch(self) -> None:
        git("fetch")

    def is_remote_history_clean(self) -> bool:
        """True when the upstream has no commits missing locally."""
        count = git("rev-list", "--count", "--left-only", "@{u}...HEAD", check=False)
        return count in ("", "0")

    def check_remote(self) -> None:
        """Verify the origin remote is reachable.

        Raises:
            PreflightError: If `git ls-remote` fails.
        """
        try:
            git("ls-remote", "origin", "HEAD")
        except CommandError as exc:
            raise PreflightError(f"Git remote is not reachable:\n{exc.stderr}") from exc

    def remote_url(self) -> str | None:
        return git("remote", "get-url", "origin", check=False) or None

    def push_graceful(self, is_github: bool) -> PushResult | None:
        """Push commits and tags, falling back to tags only on branch protection.

        Returns:
            None when everything was pushed, or a PushResult explaining
            what was pushed instead.

        Raises:
            CommandError: If the push failed for any other reason.
        """
        try:
            git("push", "--follow-tags")
        except CommandError as exc:
            if is_github and BRANCH_PROTECTION_ERROR in exc.stderr:
                git("push", "--tags")
                return PushResult(
                    pushed="tags",
                    reason="Branch protection: pubflow can't push the commits. "
                    "Push them manually.",
                )
            raise
        return None
