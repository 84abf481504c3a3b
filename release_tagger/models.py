"""Data models for release-tagger.

These Pydantic models represent the core data structures used throughout
the release step and the image publisher.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _kebab(name: str) -> str:
    return name.replace("_", "-")


class Increment(str, Enum):
    """Which part of the version a release bumps."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


class ReleaseResult(BaseModel):
    """Outcome of a single tagging run.

    Attributes:
        version: The version tag emitted to the caller.
        previous: The latest tag found before this run, or None if the
                  repository had never been tagged.
        increment: The increment decision, or None when nothing was
                   classified (no commits since the latest tag).
        created: True if this run created the tag, False if it already
                 existed or no release was needed.
    """

    version: str
    previous: str | None = None
    increment: Increment | None = None
    created: bool = False

    @model_validator(mode="after")
    def _created_has_increment(self) -> ReleaseResult:
        if self.created and self.increment is None:
            raise ValueError("a created release must record its increment")
        return self


class ImageConfig(BaseModel):
    """Defaults for `release-tagger image`, from [tool.release-tagger.image].

    Every field may be overridden on the command line. Location, project,
    repository and name must be known by one route or the other.
    """

    model_config = ConfigDict(
        alias_generator=_kebab, populate_by_name=True, extra="forbid"
    )

    location: str | None = None
    project: str | None = None
    repository: str | None = None
    name: str | None = None
    dockerfile: str = "Dockerfile"
    context: str = "."
    build_args: str = ""
    environment: str = "development"


class TaggerConfig(BaseModel):
    """Contents of the [tool.release-tagger] table."""

    model_config = ConfigDict(
        alias_generator=_kebab, populate_by_name=True, extra="forbid"
    )

    remote: str = "origin"
    push: bool = False
    image: ImageConfig = Field(default_factory=ImageConfig)
