"""Tests for pubflow.versions."""

from __future__ import annotations

import pytest

from pubflow.errors import InvalidIncrement, InvalidVersionFormat, VersionNotGreater
from pubflow.versions import (
    INCREMENTS,
    increment_version,
    is_prerelease_or_increment,
    is_valid_input,
    parse_version,
    resolve,
    version_diff,
)


class TestParseVersion:
    def test_full_semver(self) -> None:
        v = parse_version("1.2.3")
        assert (v.major, v.minor, v.patch) == (1, 2, 3)

    def test_prerelease_and_build(self) -> None:
        v = parse_version("1.2.3-rc.1+build.5")
        assert v.prerelease == "rc.1"
        assert v.build == "build.5"

    def test_leading_v_is_stripped(self) -> None:
        assert str(parse_version("v2.0.0")) == "2.0.0"

    def test_two_part_version_is_rejected(self) -> None:
        with pytest.raises(InvalidVersionFormat):
            parse_version("1.2")


class TestIncrementVersion:
    @pytest.mark.parametrize(
        ("current", "kind", "expected"),
        [
            ("1.2.3", "patch", "1.2.4"),
            ("1.2.3", "minor", "1.3.0"),
            ("1.2.3", "major", "2.0.0"),
            ("1.2.3", "prepatch", "1.2.4-0"),
            ("1.2.3", "preminor", "1.3.0-0"),
            ("1.2.3", "premajor", "2.0.0-0"),
            ("1.2.3", "prerelease", "1.2.4-0"),
            ("1.2.4-0", "prerelease", "1.2.4-1"),
            ("1.2.4-alpha", "prerelease", "1.2.4-alpha.0"),
            ("1.2.4-alpha.1", "prerelease", "1.2.4-alpha.2"),
            ("1.2.4-1", "patch", "1.2.4"),
            ("1.3.0-1", "minor", "1.3.0"),
            ("2.0.0-1", "major", "2.0.0"),
            ("1.2.3+build.7", "patch", "1.2.4"),
        ],
    )
    def test_increments(self, current: str, kind: str, expected: str) -> None:
        assert increment_version(current, kind) == expected

    def test_prerelease_identifier(self) -> None:
        assert increment_version("1.2.3", "premajor", "rc") == "2.0.0-rc.0"
        assert increment_version("1.2.3", "preminor", "beta") == "1.3.0-beta.0"

    def test_identifier_change_restarts_counter(self) -> None:
        assert increment_version("1.2.4-beta.3", "prerelease", "rc") == "1.2.4-rc.0"

    def test_same_identifier_keeps_counting(self) -> None:
        assert increment_version("1.2.4-rc.1", "prerelease", "rc") == "1.2.4-rc.2"

    def test_unknown_kind(self) -> None:
        with pytest.raises(InvalidIncrement):
            increment_version("1.2.3", "huge")


class TestResolve:
    def test_examples(self) -> None:
        assert resolve("1.2.3", "patch") == "1.2.4"
        assert resolve("1.2.3", "premajor") == "2.0.0-0"

    @pytest.mark.parametrize("kind", INCREMENTS)
    @pytest.mark.parametrize("current", ["0.0.0", "1.2.3", "1.2.4-0", "3.0.0-rc.2"])
    def test_every_increment_is_greater(self, current: str, kind: str) -> None:
        assert parse_version(resolve(current, kind)) > parse_version(current)

    def test_explicit_version(self) -> None:
        assert resolve("1.2.3", "2.0.0") == "2.0.0"
        assert resolve("1.2.3", "v1.3.0") == "1.3.0"

    @pytest.mark.parametrize(
        "explicit", ["0.9.0", "1.2.3", "1.2.3-rc.1", "1.2.3+build"]
    )
    def test_explicit_version_not_greater(self, explicit: str) -> None:
        with pytest.raises(VersionNotGreater):
            resolve("1.2.3", explicit)

    def test_prerelease_ordering(self) -> None:
        assert resolve("1.0.0-alpha", "1.0.0-alpha.1") == "1.0.0-alpha.1"
        assert resolve("1.0.0-rc.1", "1.0.0") == "1.0.0"
        with pytest.raises(VersionNotGreater):
            resolve("1.0.0-beta", "1.0.0-alpha")

    def test_malformed_explicit_version(self) -> None:
        with pytest.raises(InvalidVersionFormat):
            resolve("1.2.3", "2.0")

    def test_unknown_word(self) -> None:
        with pytest.raises(InvalidIncrement) as excinfo:
            resolve("1.2.3", "bigger")
        assert not isinstance(excinfo.value, InvalidVersionFormat)

    def test_resolver_errors_share_a_base(self) -> None:
        assert issubclass(InvalidVersionFormat, InvalidIncrement)
        assert issubclass(VersionNotGreater, InvalidIncrement)

    def test_invalid_current_version(self) -> None:
        with pytest.raises(InvalidVersionFormat):
            resolve("not-a-version", "patch")


class TestHelpers:
    def test_is_valid_input(self) -> None:
        assert is_valid_input("minor")
        assert is_valid_input("1.0.0")
        assert not is_valid_input("1.0")
        assert not is_valid_input("later")

    def test_is_prerelease_or_increment(self) -> None:
        assert is_prerelease_or_increment("prepatch")
        assert is_prerelease_or_increment("2.0.0-beta.1")
        assert not is_prerelease_or_increment("patch")
        assert not is_prerelease_or_increment("2.0.0")

    def test_version_diff(self) -> None:
        assert version_diff("1.2.3", "2.0.0") == "major"
        assert version_diff("1.2.3", "1.2.4") == "patch"
        assert version_diff("1.2.4-0", "1.2.4-1") == "prerelease"
        assert version_diff("1.2.3", "1.2.3") is None
