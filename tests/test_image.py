"""Tests for release_tagger.image."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from release_tagger.image import (
    build_labels,
    environment_tag,
    image_ref,
    publish_image,
)
from release_tagger.models import ImageConfig

BUILD_TIME = datetime(2024, 1, 15, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def image_config(tmp_path: Path) -> ImageConfig:
    context = tmp_path / "services" / "api"
    context.mkdir(parents=True)
    return ImageConfig(
        location="europe-west1",
        project="acme-prod",
        repository="containers",
        name="api",
        context=str(context),
        build_args="--build-arg PYTHON=3.12 --no-cache",
    )


class TestEnvironmentTag:
    def test_production_is_bare(self) -> None:
        assert environment_tag("1.4.0", "production") == "1.4.0"

    def test_other_environments_are_suffixed(self) -> None:
        assert environment_tag("1.4.0", "development") == "1.4.0-development"
        assert environment_tag("1.4.0", "staging") == "1.4.0-staging"


class TestImageRef:
    def test_development(self, image_config: ImageConfig) -> None:
        assert (
            image_ref(image_config, "1.4.0")
            == "europe-west1-docker.pkg.dev/acme-prod/containers/api:1.4.0-development"
        )

    def test_production(self, image_config: ImageConfig) -> None:
        config = image_config.model_copy(update={"environment": "production"})

        assert image_ref(config, "1.4.0").endswith("/api:1.4.0")


def test_build_labels() -> None:
    assert build_labels("1.4.0", "staging", BUILD_TIME) == [
        "--label",
        "environment=staging",
        "--label",
        "build-date=2024-01-15T09:30:00Z",
        "--label",
        "version=1.4.0",
    ]


class TestPublishImage:
    @patch("release_tagger.image.step")
    @patch("release_tagger.image.run")
    def test_builds_then_pushes(
        self, mock_run: MagicMock, mock_step: MagicMock, image_config: ImageConfig
    ) -> None:
        mock_run.return_value = MagicMock(returncode=0)
        ref = "europe-west1-docker.pkg.dev/acme-prod/containers/api:1.4.0-development"

        assert publish_image(image_config, "1.4.0", BUILD_TIME) == ref

        build_call, push_call = mock_run.call_args_list
        assert build_call.args == (
            "docker",
            "build",
            "-t",
            ref,
            "--label",
            "environment=development",
            "--label",
            "build-date=2024-01-15T09:30:00Z",
            "--label",
            "version=1.4.0",
            "--build-arg",
            "PYTHON=3.12",
            "--no-cache",
            "-f",
            "Dockerfile",
            ".",
        )
        assert build_call.kwargs == {"check": False, "cwd": image_config.context}
        assert push_call.args == ("docker", "push", ref)

    @patch("release_tagger.image.step")
    @patch("release_tagger.image.run")
    def test_build_failure_is_fatal(
        self, mock_run: MagicMock, mock_step: MagicMock, image_config: ImageConfig
    ) -> None:
        mock_run.return_value = MagicMock(returncode=1)

        with pytest.raises(SystemExit) as excinfo:
            publish_image(image_config, "1.4.0", BUILD_TIME)

        assert excinfo.value.code == 1
        assert mock_run.call_count == 1

    @patch("release_tagger.image.step")
    @patch("release_tagger.image.run")
    def test_push_failure_is_fatal(
        self, mock_run: MagicMock, mock_step: MagicMock, image_config: ImageConfig
    ) -> None:
        mock_run.side_effect = [MagicMock(returncode=0), MagicMock(returncode=1)]

        with pytest.raises(SystemExit):
            publish_image(image_config, "1.4.0", BUILD_TIME)

    @patch("release_tagger.image.step")
    @patch("release_tagger.image.run")
    def test_unbalanced_build_args_are_fatal(
        self,
        mock_run: MagicMock,
        mock_step: MagicMock,
        image_config: ImageConfig,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        config = image_config.model_copy(update={"build_args": '--label "oops'})

        with pytest.raises(SystemExit) as excinfo:
            publish_image(config, "1.4.0", BUILD_TIME)

        assert excinfo.value.code == 1
        assert "Cannot parse build arguments" in capsys.readouterr().err
        mock_run.assert_not_called()

    @patch("release_tagger.image.step")
    @patch("release_tagger.image.run")
    def test_missing_context_is_fatal(
        self,
        mock_run: MagicMock,
        mock_step: MagicMock,
        image_config: ImageConfig,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        missing = str(tmp_path / "nowhere")
        config = image_config.model_copy(update={"context": missing})

        with pytest.raises(SystemExit) as excinfo:
            publish_image(config, "1.4.0", BUILD_TIME)

        assert excinfo.value.code == 1
        assert "is not a directory" in capsys.readouterr().err
        mock_run.assert_not_called()
