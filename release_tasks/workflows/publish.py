"""Publish pipeline.

Checks out the tag of the manifest's current version and publishes it:

    Validating -> TagCheckedOut -> Linted -> Built -> ImageBuilt
    -> ImageTagged -> PreHook -> ImagePushed -> PackagePublished
    -> CustomPublished -> PostHook -> Done

The main branch is checked out at the end on success, and as rollback on
failure. Failures exit non-zero by default since CI gates deployments on it.
"""

from pathlib import Path
from typing import ClassVar

from release_tasks.config.pipeline import FailurePolicy, PipelineConfig
from release_tasks.exceptions import ValidationError
from release_tasks.git import operations as git_ops
from release_tasks.manifest import read_manifest
from release_tasks.publishers.docker import ContainerPublisher
from release_tasks.publishers.npm import NPMPublisher
from release_tasks.utils.logger import Logger
from release_tasks.utils.shell import CommandRunner
from release_tasks.workflows.base import Pipeline, PipelineResult, Step


class PublishPipeline(Pipeline):
    """Publishes the tagged version to npm and/or a container registry."""

    name: ClassVar[str] = "publish"
    default_policy: ClassVar[FailurePolicy] = FailurePolicy.EXIT

    def __init__(
        self,
        config: PipelineConfig,
        runner: CommandRunner | None = None,
        logger: Logger | None = None,
    ) -> None:
        super().__init__(config, runner=runner, logger=logger)
        self.project_name: str | None = None

    @property
    def cwd(self) -> Path:
        assert self.config.working_dir is not None
        return self.config.working_dir

    @property
    def has_registry(self) -> bool:
        return self.config.container is not None and self.config.container.registry is not None

    def validate(self) -> None:
        self.validate_working_dir()
        if not (self.config.container or self.config.npm or self.config.publish_task):
            raise ValidationError(
                "Publish task is required",
                details="Configure a container, npm publishing, or a custom publish task",
            )

    def steps(self) -> list[Step]:
        container = self.config.container is not None
        return [
            Step("TagCheckedOut", self.checkout_tag),
            Step("Linted", self.config.lint_task),
            Step("Built", self.config.build_task),
            Step("ImageBuilt", self.build_image if container else None),
            Step("ImageTagged", self.tag_image if self.has_registry else None),
            Step("PreHook", self.config.before_publish_task),
            Step("ImagePushed", self.push_image if self.has_registry else None),
            Step("PackagePublished", self.publish_package if self.config.npm else None),
            Step("CustomPublished", self.config.publish_task),
            Step("PostHook", self.config.after_publish_task),
            Step("Done", self.checkout_main),
        ]

    def container_publisher(self) -> ContainerPublisher:
        assert self.config.container is not None
        if not self.project_name:
            raise ValidationError(
                "Manifest name is required to build a container image",
                details=f"No 'name' in {self.config.manifest_path}",
            )
        return ContainerPublisher(self.runner, self.config.container, self.project_name, self.cwd)

    async def checkout_tag(self) -> None:
        manifest = read_manifest(self.config.manifest_path)
        if not manifest.version:
            raise ValidationError(
                "Manifest has no version",
                details=f"No 'version' in {self.config.manifest_path}",
                fix_hint="Run the release pipeline first",
            )
        self.project_name = manifest.name
        self.version = manifest.version
        self.tag = self.config.tag_for(self.project_name, self.version)
        self.logger.info(f"Publishing version {self.version}...")
        self.logger.info(f"Checking out the tag {self.tag}...")
        await git_ops.checkout(self.runner, self.tag, self.cwd)

    async def build_image(self) -> None:
        await self.container_publisher().build()

    async def tag_image(self) -> None:
        await self.container_publisher().tag()

    async def push_image(self) -> None:
        publisher = self.container_publisher()
        await publisher.login()
        await publisher.push()

    async def publish_package(self) -> None:
        await NPMPublisher(self.runner, self.cwd).publish()

    def on_success(self) -> None:
        self.logger.info(f"Version {self.version} published with success!")


async def run_publish(
    config: PipelineConfig,
    runner: CommandRunner | None = None,
    logger: Logger | None = None,
) -> PipelineResult:
    """Run the publish pipeline.

    Args:
        config: Pipeline configuration
        runner: Command runner (defaults to a streaming shell runner)
        logger: Logger (defaults to the runner's logger)

    Returns:
        PipelineResult of the run
    """
    return await PublishPipeline(config, runner=runner, logger=logger).run()
