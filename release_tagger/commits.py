"""Conventional-commit classification.

Decides how far a batch of commits moves the version. Rules are checked in
order and the first one that matches any commit in the batch wins, so the
outcome doesn't depend on the order of the commits.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from .models import Increment

BREAKING_SUBJECT = re.compile(r"^[a-zA-Z]+(\([^)]*\))?!:")
BREAKING_FOOTER = "BREAKING CHANGE:"
FEATURE_SUBJECT = re.compile(r"^feat(\([^)]*\))?:")


def subject(message: str) -> str:
    """Return the first line of a commit message."""
    return message.split("\n", 1)[0]


def is_breaking(message: str) -> bool:
    """`type!:`/`type(scope)!:` subject, or a BREAKING CHANGE: marker."""
    return bool(BREAKING_SUBJECT.match(subject(message))) or (
        BREAKING_FOOTER in message
    )


def is_feature(message: str) -> bool:
    """`feat:` or `feat(scope):` subject."""
    return bool(FEATURE_SUBJECT.match(subject(message)))


RULES: list[tuple[Callable[[str], bool], Increment]] = [
    (is_breaking, Increment.MAJOR),
    (is_feature, Increment.MINOR),
]


def classify(messages: Sequence[str]) -> Increment:
    """Pick the increment for a batch of commit messages.

    Examples:
        ["fix: typo", "feat!: drop py2"] → major
        ["fix: typo", "feat(api): add route"] → minor
        ["docs: readme"] → patch
    """
    for matches, increment in RULES:
        if any(matches(m) for m in messages):
            return increment
    return Increment.PATCH
