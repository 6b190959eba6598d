"""TOML reading and writing utilities.

Uses tomlkit to preserve formatting and comments when modifying pyproject.toml
files. This is important for keeping the version bump commit a one-line diff.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, cast

import tomlkit
from packaging.utils import canonicalize_name
from tomlkit.exceptions import TOMLKitError

from .errors import ConfigError


def load_pyproject(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a pyproject.toml file.

    Returns a TOMLDocument that preserves formatting when modified and saved.

    Raises:
        ConfigError: If the file is missing or is not valid TOML.
    """
    try:
        return tomlkit.parse(path.read_text())
    except FileNotFoundError as exc:
        raise ConfigError(f"No pyproject.toml found at {path}") from exc
    except TOMLKitError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def save_pyproject(path: Path, doc: tomlkit.TOMLDocument) -> None:
    """Save a TOMLDocument back to disk, preserving original formatting."""
    path.write_text(tomlkit.dumps(doc))


def get_project_name(doc: tomlkit.TOMLDocument, fallback: str) -> str:
    """Extract the canonical package name from [project].name.

    Names are normalized per PEP 503 (lowercase, hyphens instead of
    underscores) for consistent comparison.

    Args:
        doc: Parsed pyproject.toml document.
        fallback: Value to return if name is not specified.
    """
    return canonicalize_name(doc.get("project", {}).get("name", fallback))


def get_project_version(doc: tomlkit.TOMLDocument) -> str:
    """Extract the static version from [project].version.

    Raises:
        ConfigError: If the version is missing or declared dynamic, since
            there is nothing pubflow could rewrite.
    """
    project = doc.get("project", {})
    if "version" in project.get("dynamic", []):
        raise ConfigError(
            "[project].version is dynamic; pubflow needs a static version to bump."
        )
    version = project.get("version")
    if version is None:
        raise ConfigError("No [project].version defined in pyproject.toml")
    return str(version)


def set_project_version(path: Path, new_version: str) -> None:
    """Rewrite [project].version in place, keeping the rest of the file intact."""
    doc = load_pyproject(path)
    # Cast needed because tomlkit types are complex unions
    project = cast(dict[str, Any], doc["project"])
    project["version"] = new_version
    save_pyproject(path, doc)


def get_classifiers(doc: tomlkit.TOMLDocument) -> list[str]:
    return [str(c) for c in doc.get("project", {}).get("classifiers", [])]


def get_project_urls(doc: tomlkit.TOMLDocument) -> dict[str, str]:
    """Return [project.urls] with lower-cased labels."""
    urls = doc.get("project", {}).get("urls", {})
    return {str(label).lower(): str(url) for label, url in urls.items()}


def get_tool_settings(doc: tomlkit.TOMLDocument, tool: str) -> dict[str, Any]:
    """Return the [tool.<tool>] table as a plain dict (empty if absent)."""
    table = doc.get("tool", {}).get(tool, {})
    return cast(dict[str, Any], table.unwrap() if hasattr(table, "unwrap") else table)


def get_index_publish_url(doc: tomlkit.TOMLDocument, index_name: str) -> str | None:
    """Find the publish-url of a named [[tool.uv.index]] entry.

    Returns None if no index with that name is declared or it has no
    publish-url.
    """
    for entry in doc.get("tool", {}).get("uv", {}).get("index", []):
        if entry.get("name") == index_name:
            url = entry.get("publish-url")
            return str(url) if url is not None else None
    return None
