"""Tests for the publish pipeline.

Tests cover:
- Container publish command sequence from tag checkout back to master
- npm and custom publish targets
- Validation of publish targets and manifest
- Rollback and exit code on publish failures
"""

import asyncio
import json
from pathlib import Path

import pytest

from release_tasks.config.models import ContainerConfig, RegistryConfig
from release_tasks.config.pipeline import FailurePolicy, PipelineConfig
from release_tasks.exceptions import PublishError
from release_tasks.publishers.docker import login_command
from release_tasks.workflows.publish import run_publish

REGISTRY = RegistryConfig(url="reg.example.com", namespace="ns")


@pytest.fixture
def released_project(demo_project: Path) -> Path:
    """The demo project after releasing 1.3.0."""
    path = demo_project / "package.json"
    data = json.loads(path.read_text())
    data["version"] = "1.3.0"
    path.write_text(json.dumps(data, indent=2) + "\n")
    return demo_project


def publish(config: PipelineConfig, runner):
    return asyncio.run(run_publish(config, runner=runner))


class TestSuccessfulPublish:
    """Tests for a publish that completes."""

    def test_container_publish(self, released_project: Path, runner) -> None:
        """The tagged version is built, retagged, pushed, then master is restored."""
        config = PipelineConfig(
            working_dir=released_project,
            container=ContainerConfig(registry=REGISTRY),
        )

        result = publish(config, runner)

        assert result.success is True
        assert result.exit_code == 0
        assert result.version == "1.3.0"
        assert result.tag == "1.3.0"
        assert runner.commands == [
            "git checkout 1.3.0",
            "docker build -t demo .",
            "docker tag demo:latest reg.example.com/ns/demo:latest",
            login_command(REGISTRY),
            "docker push reg.example.com/ns/demo:latest",
            "git checkout master",
        ]
        output = runner.logger.output
        assert "Publishing version 1.3.0..." in output
        assert "Checking out the tag 1.3.0..." in output
        assert "Version 1.3.0 published with success!" in output

    def test_local_image_only(self, released_project: Path, runner) -> None:
        """Without a registry the image is built but not tagged or pushed."""
        config = PipelineConfig(working_dir=released_project, container=ContainerConfig())

        result = publish(config, runner)

        assert result.success is True
        assert runner.commands == [
            "git checkout 1.3.0",
            "docker build -t demo .",
            "git checkout master",
        ]

    def test_npm_publish_with_name_tag(self, released_project: Path, runner) -> None:
        """npm publishing checks out the name-prefixed tag when configured."""
        config = PipelineConfig(working_dir=released_project, npm=True, tag_with_name=True)

        result = publish(config, runner)

        assert result.tag == "demo-1.3.0"
        assert runner.commands == [
            "git checkout demo-1.3.0",
            "npm publish",
            "git checkout master",
        ]

    def test_hook_order(self, released_project: Path, runner) -> None:
        """Hooks run around the publish commands in pipeline order."""
        events: list[str] = []

        def hook(name: str):
            async def run() -> None:
                events.append(f"{name} after {runner.commands[-1]}")

            return run

        config = PipelineConfig(
            working_dir=released_project,
            container=ContainerConfig(registry=REGISTRY),
            npm=True,
            lint_task=hook("lint"),
            build_task=hook("build"),
            before_publish_task=hook("before"),
            publish_task=hook("custom"),
            after_publish_task=hook("after"),
        )

        result = publish(config, runner)

        assert result.success is True
        assert events == [
            "lint after git checkout 1.3.0",
            "build after git checkout 1.3.0",
            "before after docker tag demo:latest reg.example.com/ns/demo:latest",
            "custom after npm publish",
            "after after npm publish",
        ]
        assert result.completed_steps == [
            "TagCheckedOut",
            "Linted",
            "Built",
            "ImageBuilt",
            "ImageTagged",
            "PreHook",
            "ImagePushed",
            "PackagePublished",
            "CustomPublished",
            "PostHook",
            "Done",
        ]

    def test_custom_publish_only(self, released_project: Path, runner) -> None:
        """A custom publish task alone is a valid publish target."""
        published: list[bool] = []

        async def custom() -> None:
            published.append(True)

        result = publish(PipelineConfig(working_dir=released_project, publish_task=custom), runner)

        assert result.success is True
        assert published == [True]
        assert runner.commands == ["git checkout 1.3.0", "git checkout master"]


class TestValidation:
    """Tests for publish validation."""

    def test_no_publish_target(self, released_project: Path, runner) -> None:
        """Without container, npm or custom task nothing runs and the exit code is 1."""
        result = publish(PipelineConfig(working_dir=released_project), runner)

        assert result.validation_failed is True
        assert result.exit_code == 1
        assert runner.commands == []
        assert "Publish task is required" in runner.logger.output

    def test_missing_working_dir(self, runner) -> None:
        result = publish(PipelineConfig(working_dir=None, npm=True), runner)

        assert result.validation_failed is True
        assert runner.commands == []

    def test_manifest_without_version(self, project_dir: Path, runner) -> None:
        """A manifest without version fails before any checkout of a tag."""
        (project_dir / "package.json").write_text('{"name": "demo"}\n')

        result = publish(PipelineConfig(working_dir=project_dir, npm=True), runner)

        assert result.failed_step == "TagCheckedOut"
        assert runner.commands == ["git checkout master"]
        assert "Manifest has no version" in runner.logger.output

    def test_container_needs_manifest_name(self, project_dir: Path, runner) -> None:
        (project_dir / "package.json").write_text('{"version": "1.0.0"}\n')
        config = PipelineConfig(working_dir=project_dir, container=ContainerConfig())

        result = publish(config, runner)

        assert result.failed_step == "ImageBuilt"
        assert "Manifest name is required" in runner.logger.output


class TestFailureAndRollback:
    """Tests for publish failures."""

    def test_push_failure(self, released_project: Path, failing_runner) -> None:
        """A failing docker push rolls back to master and exits 1."""
        runner = failing_runner("docker push")
        config = PipelineConfig(
            working_dir=released_project,
            container=ContainerConfig(registry=REGISTRY),
            npm=True,
        )

        result = publish(config, runner)

        assert result.success is False
        assert result.failed_step == "ImagePushed"
        assert result.rolled_back is True
        assert result.policy is FailurePolicy.EXIT
        assert result.exit_code == 1
        assert isinstance(result.error, PublishError)
        assert runner.commands[-2:] == [
            "docker push reg.example.com/ns/demo:latest",
            "git checkout master",
        ]
        assert "npm publish" not in runner.commands

    def test_log_only_policy(self, released_project: Path, failing_runner) -> None:
        runner = failing_runner("npm publish")
        config = PipelineConfig(
            working_dir=released_project,
            npm=True,
            failure_policy=FailurePolicy.LOG_ONLY,
        )

        result = publish(config, runner)

        assert result.failed_step == "PackagePublished"
        assert result.exit_code == 0

    def test_missing_tag(self, released_project: Path, failing_runner) -> None:
        """A missing tag fails the checkout and returns to master."""
        runner = failing_runner("git checkout 1.3.0")

        result = publish(PipelineConfig(working_dir=released_project, npm=True), runner)

        assert result.failed_step == "TagCheckedOut"
        assert runner.commands == ["git checkout 1.3.0", "git checkout master"]
