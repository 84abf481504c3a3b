"""Docker image build and publish for Google Artifact Registry.

Images are tagged with the release version, suffixed with the environment
name everywhere except production:

    europe-west1-docker.pkg.dev/proj/repo/api:1.4.0              (production)
    europe-west1-docker.pkg.dev/proj/repo/api:1.4.0-development  (others)

Registry credentials must already be configured for docker.
"""

from __future__ import annotations

import shlex
from datetime import datetime, timezone
from pathlib import Path

from .models import ImageConfig
from .shell import fatal, run, step

PRODUCTION = "production"


def environment_tag(tag: str, environment: str) -> str:
    """Image tag for an environment: bare for production, suffixed otherwise."""
    if environment == PRODUCTION:
        return tag
    return f"{tag}-{environment}"


def image_ref(config: ImageConfig, tag: str) -> str:
    """Full registry reference for the image built from `config`."""
    env_tag = environment_tag(tag, config.environment)
    return (
        f"{config.location}-docker.pkg.dev/"
        f"{config.project}/{config.repository}/{config.name}:{env_tag}"
    )


def build_labels(tag: str, environment: str, now: datetime | None = None) -> list[str]:
    """docker build --label arguments for environment, build date and version."""
    now = now or datetime.now(timezone.utc)
    labels = {
        "environment": environment,
        "build-date": now.strftime("%Y-%m-%dT%H:%M:%SZ"),
        "version": tag,
    }
    args: list[str] = []
    for key, value in labels.items():
        args.extend(["--label", f"{key}={value}"])
    return args


def publish_image(config: ImageConfig, tag: str, now: datetime | None = None) -> str:
    """Build the image inside the context directory and push it.

    Args:
        config: Registry coordinates and build settings. Location, project,
                repository and name must all be set.
        tag: Release version the image is built for.
        now: Build timestamp for the build-date label (default: now, UTC).

    Returns:
        The pushed image reference.
    """
    ref = image_ref(config, tag)
    if not Path(config.context).is_dir():
        fatal(f"Build context {config.context!r} is not a directory")
    try:
        build_args = shlex.split(config.build_args)
    except ValueError as exc:
        fatal(f"Cannot parse build arguments {config.build_args!r}: {exc}")

    step(f"Building Docker image for environment: {config.environment}")
    print(f"  {ref}")

    result = run(
        "docker",
        "build",
        "-t",
        ref,
        *build_labels(tag, config.environment, now),
        *build_args,
        "-f",
        config.dockerfile,
        ".",
        check=False,
        cwd=config.context,
    )
    if result.returncode != 0:
        fatal(f"Failed to build {ref}")

    step("Publishing Docker image")
    result = run("docker", "push", ref, check=False)
    if result.returncode != 0:
        fatal(f"Failed to push {ref}")

    print(f"  Image tagged as: {ref}")
    return ref
