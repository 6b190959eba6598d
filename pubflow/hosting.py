"""Git hosting helpers: provider detection and GitHub release drafts."""

from __future__ import annotations

import re

from .shell import gh, info
from .versions import parse_version

KNOWN_HOSTS = {
    "github.com": "github",
    "gitlab.com": "gitlab",
    "bitbucket.org": "bitbucket",
}

# https://host/owner/repo, ssh://git@host/owner/repo, git@host:owner/repo
_URL_PATTERN = re.compile(
    r"^(?:git\+)?(?:(?:https?|ssh|git)://)?(?:[^@/]+@)?"
    r"(?P<host>[^/:]+)[/:](?P<owner>[^/]+)/(?P<repo>[^/#?]+?)(?:\.git)?/?$"
)


def parse_repo_url(url: str) -> tuple[str, str, str] | None:
    """Split a repository URL into (host, owner, repo), or None."""
    match = _URL_PATTERN.match(url.strip())
    if not match:
        return None
    return match["host"].lower(), match["owner"], match["repo"]


def hosted_provider(url: str | None) -> str | None:
    """Name of the hosting service for a repository URL.

    Examples:
        "https://github.com/acme/widgets" → "github"
        "git@gitlab.com:acme/widgets.git" → "gitlab"
        "https://git.example.com/acme/widgets" → None
    """
    if not url:
        return None
    parts = parse_repo_url(url)
    if parts is None:
        return None
    return KNOWN_HOSTS.get(parts[0])


def is_github(url: str | None) -> bool:
    return hosted_provider(url) == "github"


def create_release_draft(repo_url: str, tag: str, version: str) -> str:
    """Create a draft GitHub release for tag with generated notes.

    Returns:
        The URL of the draft as printed by gh.
    """
    parts = parse_repo_url(repo_url)
    args = ["release", "create", tag, "--draft", "--title", tag, "--generate-notes"]
    if parts is not None:
        args.extend(["--repo", f"{parts[1]}/{parts[2]}"])
    if parse_version(version).prerelease is not None:
        args.append("--prerelease")
    url = gh(*args)
    info(f"Release draft: {url}")
    return url
