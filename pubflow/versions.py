"""Version parsing, bumping and resolution.

Resolves a release increment ("patch", "premajor", ...) or an explicit
version string against the current package version, following the usual
semver increment rules. Prerelease numbering starts at 0, so the premajor
of 1.2.3 is 2.0.0-0.
"""

from __future__ import annotations

import re

import semver

from .errors import InvalidIncrement, InvalidVersionFormat, VersionNotGreater

INCREMENTS = (
    "patch",
    "minor",
    "major",
    "prepatch",
    "preminor",
    "premajor",
    "prerelease",
)
PRERELEASE_INCREMENTS = ("prepatch", "preminor", "premajor", "prerelease")

_VERSION_LIKE = re.compile(r"^[v=]?\d")


def _clean(version_str: str) -> str:
    """Strip whitespace and a leading "v" or "=" ("v1.2.3" → "1.2.3")."""
    text = version_str.strip()
    if text[:1] in ("v", "="):
        text = text[1:]
    return text


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Raises:
        InvalidVersionFormat: If the string is not a full semantic version.
    """
    try:
        return semver.Version.parse(_clean(version_str))
    except (TypeError, ValueError) as exc:
        raise InvalidVersionFormat(
            f"Version should be a valid semver version, got `{version_str}`. "
            "See https://semver.org"
        ) from exc


def is_valid_version(version_str: str) -> bool:
    try:
        parse_version(version_str)
    except InvalidVersionFormat:
        return False
    return True


def is_valid_input(text: str) -> bool:
    """True for a known increment kind or a valid explicit version."""
    return text in INCREMENTS or is_valid_version(text)


def is_prerelease_or_increment(text: str) -> bool:
    """True for a pre* increment or an explicit prerelease version."""
    if text in PRERELEASE_INCREMENTS:
        return True
    return is_valid_version(text) and parse_version(text).prerelease is not None


def _bump_prerelease(prerelease: str | None, identifier: str | None) -> str:
    parts = prerelease.split(".") if prerelease else []
    if not parts:
        parts = ["0"]
    else:
        # Increment the right-most numeric identifier, or start a counter
        for i in range(len(parts) - 1, -1, -1):
            if parts[i].isdigit():
                parts[i] = str(int(parts[i]) + 1)
                break
        else:
            parts.append("0")

    if identifier:
        if parts[0] != identifier or len(parts) < 2 or not parts[1].isdigit():
            parts = [identifier, "0"]
    return ".".join(parts)


def increment_version(
    version_str: str, kind: str, identifier: str | None = None
) -> str:
    """Apply a relative increment to a version.

    Examples:
        increment_version("1.2.3", "patch") → "1.2.4"
        increment_version("1.2.3", "premajor") → "2.0.0-0"
        increment_version("1.2.4-0", "prerelease") → "1.2.4-1"
        increment_version("1.2.3", "preminor", "rc") → "1.3.0-rc.0"
        increment_version("2.0.0-1", "major") → "2.0.0"

    Raises:
        InvalidIncrement: If kind is not one of INCREMENTS.
        InvalidVersionFormat: If version_str is not a valid version.
    """
    v = parse_version(version_str)
    major, minor, patch, pre = v.major, v.minor, v.patch, v.prerelease

    if kind == "major":
        # A prerelease of x.0.0 is promoted rather than bumped
        if not (pre and minor == 0 and patch == 0):
            major += 1
        minor = patch = 0
        pre = None
    elif kind == "minor":
        if not (pre and patch == 0):
            minor += 1
        patch = 0
        pre = None
    elif kind == "patch":
        if not pre:
            patch += 1
        pre = None
    elif kind == "premajor":
        major, minor, patch = major + 1, 0, 0
        pre = _bump_prerelease(None, identifier)
    elif kind == "preminor":
        minor, patch = minor + 1, 0
        pre = _bump_prerelease(None, identifier)
    elif kind == "prepatch":
        patch += 1
        pre = _bump_prerelease(None, identifier)
    elif kind == "prerelease":
        if not pre:
            patch += 1
        pre = _bump_prerelease(pre, identifier)
    else:
        raise InvalidIncrement(f"Unknown increment `{kind}`")

    return str(semver.Version(major, minor, patch, prerelease=pre))


def resolve(current: str, increment: str, identifier: str | None = None) -> str:
    """Compute the next version from the current one.

    Args:
        current: The current package version.
        increment: An increment kind from INCREMENTS or an explicit version.
        identifier: Optional prerelease identifier (e.g. "rc", "beta").

    Returns:
        The new version, strictly greater than current.

    Raises:
        InvalidIncrement: If increment is neither a kind nor version-shaped.
        InvalidVersionFormat: If current or an explicit version is malformed.
        VersionNotGreater: If the result does not exceed current.
    """
    current_v = parse_version(current)
    increment = increment.strip()

    if increment in INCREMENTS:
        new_version = increment_version(current, increment, identifier)
    elif _VERSION_LIKE.match(increment):
        new_version = str(parse_version(increment))
    else:
        raise InvalidIncrement(
            f"Version should be either {', '.join(INCREMENTS)}, "
            f"or a valid semver version, got `{increment}`."
        )

    if parse_version(new_version) <= current_v:
        raise VersionNotGreater(
            f"New version `{new_version}` should be higher than "
            f"current version `{current}`."
        )
    return new_version


def version_diff(old: str, new: str) -> str | None:
    """Name the most significant component that differs between versions.

    Returns "major", "minor", "patch", "prerelease" or None if equal.
    """
    a, b = parse_version(old), parse_version(new)
    for part in ("major", "minor", "patch", "prerelease"):
        if getattr(a, part) != getattr(b, part):
            return part
    return None
