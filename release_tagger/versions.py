"""Version parsing and bumping utilities.

Handles conversion between tag names and semver objects. Tags may carry a
leading "v" and pre-release/build suffixes; the versions we compute are
always bare MAJOR.MINOR.PATCH.
"""

from __future__ import annotations

import re

import semver

from .models import Increment

TAG_PATTERN = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)(?:-([^+]*))?(?:\+(.*))?$")

# Substituted for a latest tag that can't be parsed.
FALLBACK_VERSION = semver.Version(0, 1, 0)

# Every repository's first release, whatever its commits say.
INITIAL_RELEASE = semver.Version(0, 1, 0)


def parse_tag(tag: str) -> semver.Version | None:
    """Parse a tag name into a semver.Version object.

    Accepts [v]MAJOR.MINOR.PATCH[-pre][+build]:
    - "1.2.3" → 1.2.3
    - "v1.2.3" → 1.2.3
    - "2.3.1-beta+build5" → 2.3.1, prerelease "beta", build "build5"

    Returns None if the tag doesn't look like a version.
    """
    m = TAG_PATTERN.match(tag)
    if not m:
        return None
    major, minor, patch, prerelease, build = m.groups()
    return semver.Version(
        int(major),
        int(minor),
        int(patch),
        prerelease=prerelease or None,
        build=build or None,
    )


def bump(version: semver.Version, increment: Increment) -> semver.Version:
    """Apply an increment, dropping any pre-release/build suffix.

    Examples:
        1.4.2 major → 2.0.0
        1.4.2 minor → 1.5.0
        1.4.2 patch → 1.4.3
    """
    if increment is Increment.MAJOR:
        return version.bump_major()
    if increment is Increment.MINOR:
        return version.bump_minor()
    return version.bump_patch()


def next_version(current: semver.Version | None, increment: Increment) -> str:
    """Compute the next release version as a bare tag string.

    Args:
        current: Version of the latest tag, or None if the repository has
                 never been tagged.
        increment: Which part to bump.

    Returns:
        "0.1.0" for a first release regardless of increment, otherwise the
        bumped version.
    """
    if current is None:
        return str(INITIAL_RELEASE)
    return str(bump(current, increment))


def sort_tags(tags: list[str]) -> list[str]:
    """Order tags newest first by semantic version precedence.

    A pre-release sorts below its release and a "v" prefix is ignored.
    Tags that aren't versions keep their relative order and come after
    every version tag.

    Example:
        ["nightly", "1.0.0-beta", "v1.0.0", "1.0.1"] →
        ["1.0.1", "v1.0.0", "1.0.0-beta", "nightly"]
    """
    versions: list[tuple[semver.Version, str]] = []
    others: list[str] = []
    for tag in tags:
        version = parse_tag(tag)
        if version is None:
            others.append(tag)
        else:
            versions.append((version, tag))
    versions.sort(key=lambda pair: pair[0], reverse=True)
    return [tag for _, tag in versions] + others
