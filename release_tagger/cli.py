"""CLI entry point for release-tagger."""

from __future__ import annotations

import subprocess
from pathlib import Path

import click
from click.core import ParameterSource
from pydantic import ValidationError
from tomlkit.exceptions import TOMLKitError

from release_tagger.config import load_config
from release_tagger.image import publish_image
from release_tagger.models import TaggerConfig
from release_tagger.pipeline import configure_git, run_release
from release_tagger.tags import TagConflictError

REQUIRED_IMAGE_FIELDS = ("location", "project", "repository", "name")


def _describe_failure(exc: subprocess.CalledProcessError) -> str:
    # Only the subcommand: arguments may carry credentials
    cmd = exc.cmd if isinstance(exc.cmd, (list, tuple)) else [str(exc.cmd)]
    msg = f"`{' '.join(cmd[:2])}` failed with exit code {exc.returncode}"
    stderr = (exc.stderr or "").strip()
    return f"{msg}\n{stderr}" if stderr else msg


@click.group()
@click.version_option(package_name="release-tagger")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="pyproject.toml holding [tool.release-tagger]. [default: ./pyproject.toml]",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None) -> None:
    """Conventional-commit release tagging and image publishing."""
    try:
        ctx.obj = load_config(config_path)
    except TOMLKitError as exc:
        raise click.ClickException(f"Could not parse pyproject.toml: {exc}") from exc
    except ValidationError as exc:
        raise click.ClickException(
            f"Invalid [tool.release-tagger] configuration:\n{exc}"
        ) from exc


@cli.command("next")
@click.option(
    "--github-output",
    envvar="GITHUB_OUTPUT",
    type=click.Path(dir_okay=False),
    default=None,
    help="Step-output file to append version_tag to. [env: GITHUB_OUTPUT]",
)
@click.option(
    "--fetch/--no-fetch", default=True, show_default=True, help="Fetch tags first."
)
@click.option(
    "--push/--no-push",
    default=False,
    help="Push a newly created tag to the remote. [default: from config, else off]",
)
@click.option("--remote", default=None, help="Remote to configure and push to.")
@click.option("--actor", default=None, help="Git user name for the release.")
@click.option("--email", default=None, help="Git user email for the release.")
@click.option("--token", default=None, help="GitHub token for the remote URL.")
@click.option("--repository", default=None, help="GitHub repository (owner/name).")
@click.pass_obj
def next_version(
    config: TaggerConfig,
    github_output: str | None,
    fetch: bool,
    push: bool,
    remote: str | None,
    actor: str | None,
    email: str | None,
    token: str | None,
    repository: str | None,
) -> None:
    """Compute the next version from commits and tag HEAD with it."""
    remote = remote or config.remote
    # Config decides unless --push or --no-push was given
    push_source = click.get_current_context().get_parameter_source("push")
    if push_source is ParameterSource.DEFAULT:
        push = config.push

    credentials = (actor, email, token, repository)
    if any(credentials) and not all(credentials):
        raise click.UsageError(
            "--actor, --email, --token and --repository must be given together."
        )

    try:
        if all(credentials):
            configure_git(actor, email, token, repository, remote)
        result = run_release(
            fetch=fetch, push=push, remote=remote, github_output=github_output
        )
    except TagConflictError as exc:
        raise click.ClickException(str(exc)) from exc
    except subprocess.CalledProcessError as exc:
        raise click.ClickException(_describe_failure(exc)) from exc

    if result.created:
        click.echo(f"✓ Tagged {result.version} ({result.increment.value})")
    else:
        click.echo(f"✓ {result.version} is current, no new tag needed")


@cli.command()
@click.argument("tag")
@click.option("--location", default=None, help="Artifact Registry location.")
@click.option("--project", default=None, help="Google Cloud project id.")
@click.option("--repository", default=None, help="Artifact Registry repository.")
@click.option("--image", "name", default=None, help="Image name.")
@click.option("--dockerfile", default=None, help="Dockerfile, relative to context.")
@click.option(
    "--context",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Build context directory.",
)
@click.option("--build-args", default=None, help="Extra docker build arguments.")
@click.option(
    "--environment", default=None, help="Target environment (e.g. production)."
)
@click.pass_obj
def image(config: TaggerConfig, tag: str, **overrides: str | None) -> None:
    """Build and publish the Docker image for TAG."""
    image_config = config.image.model_copy(
        update={k: v for k, v in overrides.items() if v is not None}
    )
    missing = [f for f in REQUIRED_IMAGE_FIELDS if not getattr(image_config, f)]
    if missing:
        options = ", ".join("--image" if f == "name" else f"--{f}" for f in missing)
        raise click.UsageError(
            f"Missing {options} (or set them in [tool.release-tagger.image])."
        )

    ref = publish_image(image_config, tag)
    click.echo(f"✓ Published {ref}")
