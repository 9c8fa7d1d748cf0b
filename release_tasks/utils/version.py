"""Semantic version parsing, comparison, and next-version resolution.

Versions follow MAJOR.MINOR.PATCH with an optional ``-prerelease`` and
``+build`` suffix. Tags are derived from versions by the orchestrators, so
versions here never carry a ``v`` prefix.
"""

import re
from dataclasses import dataclass
from typing import Literal

from release_tasks.exceptions import ValidationError

BumpType = Literal["major", "minor", "patch"]

BUMP_TYPES: tuple[str, ...] = ("major", "minor", "patch")

# semver.org 2.0.0 grammar
SEMVER_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


@dataclass(frozen=True)
class SemVer:
    """Parsed semantic version."""

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


def is_bump_type(value: str) -> bool:
    """Check whether value is one of the bump keywords."""
    return value in BUMP_TYPES


def is_valid_version(version_str: str | None) -> bool:
    """Check if a string is a valid semantic version.

    Examples:
        >>> is_valid_version('1.2.3')
        True
        >>> is_valid_version('1.2.3-beta.1')
        True
        >>> is_valid_version('v1.2.3')
        False
        >>> is_valid_version('1.2')
        False
    """
    if not version_str:
        return False
    return SEMVER_PATTERN.match(version_str) is not None


def parse_version(version_str: str | None) -> SemVer:
    """Parse a semantic version string.

    Args:
        version_str: Version string to parse (e.g., '1.2.3', '2.0.0-rc.1')

    Returns:
        Parsed SemVer

    Raises:
        ValidationError: If the string is empty or not a semantic version
    """
    if not version_str or not version_str.strip():
        raise ValidationError(
            "Empty version string",
            details="Version string cannot be empty or whitespace",
            fix_hint="Provide a valid semantic version (e.g., '1.2.3')",
        )

    match = SEMVER_PATTERN.match(version_str.strip())
    if not match:
        raise ValidationError(
            f"Invalid version format: '{version_str}'",
            details="Version must follow semantic versioning: MAJOR.MINOR.PATCH[-prerelease]",
            fix_hint="Use format like '1.2.3' or '1.2.3-beta.1'",
        )

    major, minor, patch, prerelease, build = match.groups()
    return SemVer(
        major=int(major),
        minor=int(minor),
        patch=int(patch),
        prerelease=tuple(prerelease.split(".")) if prerelease else (),
        build=tuple(build.split(".")) if build else (),
    )


def _compare_identifiers(left: tuple[str, ...], right: tuple[str, ...]) -> int:
    # A version without prerelease has higher precedence than one with it
    if not left and not right:
        return 0
    if not left:
        return 1
    if not right:
        return -1

    for a, b in zip(left, right):
        if a == b:
            continue
        a_num, b_num = a.isdigit(), b.isdigit()
        if a_num and b_num:
            return -1 if int(a) < int(b) else 1
        if a_num:
            return -1
        if b_num:
            return 1
        return -1 if a < b else 1

    if len(left) == len(right):
        return 0
    return -1 if len(left) < len(right) else 1


def compare_versions(v1: str, v2: str) -> int:
    """Compare two semantic versions by precedence.

    Build metadata is ignored.

    Returns:
        -1 if v1 < v2, 0 if equal, 1 if v1 > v2

    Raises:
        ValidationError: If either version string is invalid

    Examples:
        >>> compare_versions('1.2.3', '1.2.4')
        -1
        >>> compare_versions('1.0.0', '1.0.0-rc.1')
        1
    """
    first = parse_version(v1)
    second = parse_version(v2)

    core1 = (first.major, first.minor, first.patch)
    core2 = (second.major, second.minor, second.patch)
    if core1 != core2:
        return -1 if core1 < core2 else 1
    return _compare_identifiers(first.prerelease, second.prerelease)


def bump_version(current: str | None, bump_type: BumpType | str) -> str:
    """Increment a version by a bump keyword.

    Prerelease versions are released rather than incremented when the
    prerelease already targets the requested component.

    Examples:
        >>> bump_version('1.2.3', 'minor')
        '1.3.0'
        >>> bump_version('1.3.0-beta.1', 'minor')
        '1.3.0'
        >>> bump_version('1.2.3-rc.1', 'patch')
        '1.2.3'

    Raises:
        ValidationError: If current is not a valid version or bump_type unknown
    """
    if not is_bump_type(bump_type):
        raise ValidationError(
            f"Unknown bump type: '{bump_type}'",
            fix_hint="Use 'major', 'minor' or 'patch'",
        )

    version = parse_version(current)
    major, minor, patch = version.major, version.minor, version.patch
    pre = bool(version.prerelease)

    if bump_type == "major":
        if pre and minor == 0 and patch == 0:
            return f"{major}.0.0"
        return f"{major + 1}.0.0"
    if bump_type == "minor":
        if pre and patch == 0:
            return f"{major}.{minor}.0"
        return f"{major}.{minor + 1}.0"
    if pre:
        return f"{major}.{minor}.{patch}"
    return f"{major}.{minor}.{patch + 1}"


def validate_version_argument(version_arg: str | None) -> None:
    """Check a release argument without looking at the current version.

    Raises:
        ValidationError: If the argument is neither a bump keyword nor a version
    """
    if version_arg and (is_bump_type(version_arg) or is_valid_version(version_arg)):
        return
    raise ValidationError(
        "Invalid version argument",
        details=f"Got {version_arg!r}",
        fix_hint="Use 'major', 'minor', 'patch', or a version like '2.0.0'",
    )


def resolve_version(current: str | None, version_arg: str, strict: bool = False) -> str:
    """Compute the next version for a release.

    A bump keyword is applied to the current version. Any other argument must
    be a valid semantic version and is returned unchanged, even when it is
    lower than the current version, unless strict is set.

    Args:
        current: Current version read from the manifest
        version_arg: Bump keyword or explicit version
        strict: Reject explicit versions lower than the current one

    Returns:
        The next version

    Raises:
        ValidationError: If the argument is invalid, or lower than the current
            version in strict mode
    """
    validate_version_argument(version_arg)

    if is_bump_type(version_arg):
        return bump_version(current, version_arg)

    if strict and current and compare_versions(version_arg, current) < 0:
        raise ValidationError(
            f"Version {version_arg} is lower than current version {current}",
            fix_hint="Pass a higher version or disable strict_versions",
        )
    return version_arg


__all__ = [
    "BUMP_TYPES",
    "BumpType",
    "SEMVER_PATTERN",
    "SemVer",
    "bump_version",
    "compare_versions",
    "is_bump_type",
    "is_valid_version",
    "parse_version",
    "resolve_version",
    "validate_version_argument",
]
