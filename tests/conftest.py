"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest


class FakeTagStore:
    """In-memory tag history.

    `history` is a list of (revision, message) pairs, oldest first; HEAD is
    the last one. `tags` maps tag name → revision, newest first.
    """

    def __init__(
        self,
        history: list[tuple[str, str]],
        tags: dict[str, str] | None = None,
    ) -> None:
        self.history = list(history)
        self.tags = dict(tags or {})
        self.annotations: dict[str, str] = {}

    def commit(self, revision: str, message: str) -> None:
        self.history.append((revision, message))

    def recent_tags(self, limit: int | None = None) -> list[str]:
        tags = list(self.tags)
        return tags[:limit] if limit is not None else tags

    def revision_of(self, tag: str) -> str | None:
        return self.tags.get(tag)

    def head_revision(self) -> str:
        return self.history[-1][0]

    def commits_since(self, tag: str | None) -> list[str]:
        start = 0
        if tag:
            revisions = [rev for rev, _ in self.history]
            start = revisions.index(self.tags[tag]) + 1
        return [message for _, message in reversed(self.history[start:])]

    def create_annotated(self, tag: str, message: str) -> None:
        self.tags = {tag: self.head_revision(), **self.tags}
        self.annotations[tag] = message


@pytest.fixture
def make_store() -> Callable[..., FakeTagStore]:
    """Factory for in-memory tag stores."""
    return FakeTagStore


@pytest.fixture
def tmp_pyproject(tmp_path: Path) -> Path:
    """Create a pyproject.toml with a [tool.release-tagger] table."""
    content = """\
[project]
name = "service"
version = "1.0.0"

[tool.release-tagger]
remote = "upstream"
push = true

[tool.release-tagger.image]
location = "europe-west1"
project = "acme-prod"
repository = "containers"
name = "api"
dockerfile = "docker/Dockerfile"
build-args = "--build-arg PYTHON=3.12"
"""
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject
