"""Access to the repository's tag history.

The tag history is the only state release-tagger keeps: it's read before
deciding on a version and appended to at most once afterwards. The
TagStore protocol lets the release logic run against git or an in-memory
stand-in.
"""

from __future__ import annotations

from typing import Protocol

from .shell import git
from .versions import sort_tags

# Separates commits in `git log` output; never appears in a message.
RECORD_SEPARATOR = "\x1e"


class TagConflictError(Exception):
    """A computed tag already exists but points at a different commit."""

    def __init__(
        self, tag: str, tag_revision: str, head_revision: str, latest: str | None
    ) -> None:
        self.tag = tag
        self.tag_revision = tag_revision
        self.head_revision = head_revision
        self.latest = latest
        super().__init__(
            f"Tag {tag} exists on a different commit\n"
            f"  Tag commit: {tag_revision}\n"
            f"  Current commit: {head_revision}\n"
            f"Latest tag: {latest or '<none>'}, Calculated: {tag}\n"
            "This suggests a version calculation issue or the tag was created manually"
        )


class TagStore(Protocol):
    def recent_tags(self, limit: int | None = None) -> list[str]:
        """Tags sorted newest first by version precedence."""
        ...

    def revision_of(self, tag: str) -> str | None:
        """Commit a tag points at, or None if the tag doesn't exist."""
        ...

    def head_revision(self) -> str: ...

    def commits_since(self, tag: str | None) -> list[str]:
        """Messages (subject + body) after `tag` up to HEAD, newest first."""
        ...

    def create_annotated(self, tag: str, message: str) -> None: ...


class GitTagStore:
    """TagStore backed by the git repository in the current directory."""

    def recent_tags(self, limit: int | None = None) -> list[str]:
        tags = sort_tags(git("tag", "--list").splitlines())
        return tags[:limit] if limit is not None else tags

    def revision_of(self, tag: str) -> str | None:
        # Missing tag is not an error here
        rev = git(
            "rev-parse", "-q", "--verify", f"refs/tags/{tag}^{{commit}}", check=False
        )
        return rev or None

    def head_revision(self) -> str:
        return git("rev-parse", "HEAD")

    def commits_since(self, tag: str | None) -> list[str]:
        rev_range = f"{tag}..HEAD" if tag else "HEAD"
        out = git("log", f"--format=%s%n%b{RECORD_SEPARATOR}", rev_range)
        return [m.strip() for m in out.split(RECORD_SEPARATOR) if m.strip()]

    def create_annotated(self, tag: str, message: str) -> None:
        git("tag", "-a", tag, "-m", message)
