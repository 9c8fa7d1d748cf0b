"""Release pipeline.

Checks out and updates the main branch, bumps the manifest version, then
commits, pushes and tags the release:

    Validating -> CheckedOutMaster -> Updated -> VersionResolved -> Linted
    -> PreHook -> VersionUpdated -> PostHook -> Built -> Committed -> Pushed
    -> Tagged -> TagPushed -> Done

Any failure after validation rolls back to the main branch. Re-running after
the version was written bumps again; that is left to the operator.
"""

from pathlib import Path
from typing import ClassVar

from release_tasks.config.pipeline import FailurePolicy, PipelineConfig, VersionTask
from release_tasks.git import operations as git_ops
from release_tasks.manifest import read_manifest, write_manifest
from release_tasks.publishers.npm import NPMPublisher
from release_tasks.utils.logger import Logger
from release_tasks.utils.shell import CommandRunner
from release_tasks.utils.version import resolve_version, validate_version_argument
from release_tasks.workflows.base import Pipeline, PipelineResult, Step, StepAction


class ReleasePipeline(Pipeline):
    """Bumps, commits, tags and pushes a new version."""

    name: ClassVar[str] = "release"
    default_policy: ClassVar[FailurePolicy] = FailurePolicy.LOG_ONLY

    def __init__(
        self,
        config: PipelineConfig,
        version_arg: str,
        runner: CommandRunner | None = None,
        logger: Logger | None = None,
    ) -> None:
        super().__init__(config, runner=runner, logger=logger)
        self.version_arg = version_arg
        self.project_name: str | None = None

    @property
    def cwd(self) -> Path:
        assert self.config.working_dir is not None
        return self.config.working_dir

    def validate(self) -> None:
        self.validate_working_dir()
        validate_version_argument(self.version_arg)

    def steps(self) -> list[Step]:
        return [
            Step("CheckedOutMaster", self.checkout_main),
            Step("Updated", self.update_main),
            Step("VersionResolved", self.resolve_next_version),
            Step("Linted", self.config.lint_task),
            Step("PreHook", self._version_hook(self.config.before_version_update_task)),
            Step("VersionUpdated", self.update_version),
            Step("PostHook", self._version_hook(self.config.after_version_update_task)),
            Step("Built", self.config.build_task),
            Step("Committed", self.commit_files),
            Step("Pushed", self.push_files),
            Step("Tagged", self.create_tag),
            Step("TagPushed", self.push_tag),
        ]

    def _version_hook(self, task: VersionTask | None) -> StepAction | None:
        if task is None:
            return None

        async def run_hook() -> None:
            assert self.version is not None
            await task(self.version)

        return run_hook

    async def update_main(self) -> None:
        self.logger.info(f"Updating {self.config.main_branch} branch...")
        await git_ops.pull(self.runner, self.cwd, self.config.remote, self.config.main_branch)

    async def resolve_next_version(self) -> None:
        manifest = read_manifest(self.config.manifest_path)
        self.project_name = manifest.name
        self.version = resolve_version(
            manifest.version,
            self.version_arg,
            strict=self.config.strict_versions,
        )
        self.tag = self.config.tag_for(self.project_name, self.version)

    async def update_version(self) -> None:
        assert self.version is not None
        self.logger.info("Updating version...")
        # Re-read: hooks may have touched the manifest since it was resolved
        manifest = read_manifest(self.config.manifest_path)
        self.logger.info(f"  Current version is {manifest.version}")
        self.logger.info(f"  Next version is {self.version}")
        manifest.version = self.version
        write_manifest(self.config.manifest_path, manifest)
        await NPMPublisher(self.runner, self.cwd).install()

    async def commit_files(self) -> None:
        assert self.tag is not None
        self.logger.info(f"Releasing version {self.version} to remote...")
        self.logger.info("Committing files...")
        await git_ops.add_all(self.runner, self.cwd)
        await git_ops.commit(self.runner, self.tag, self.cwd)

    async def push_files(self) -> None:
        self.logger.info("Pushing files to remote...")
        await git_ops.push(self.runner, self.cwd, self.config.remote, self.config.main_branch)

    async def create_tag(self) -> None:
        assert self.tag is not None
        self.logger.info(f"Creating tag {self.tag}...")
        await git_ops.tag(self.runner, self.tag, self.cwd)

    async def push_tag(self) -> None:
        self.logger.info("Pushing tag to remote...")
        await git_ops.push_tags(self.runner, self.cwd)

    def on_success(self) -> None:
        self.logger.info(f"Version {self.version} released with success!")


async def run_release(
    config: PipelineConfig,
    version_arg: str,
    runner: CommandRunner | None = None,
    logger: Logger | None = None,
) -> PipelineResult:
    """Run the release pipeline.

    Args:
        config: Pipeline configuration
        version_arg: Bump keyword (major, minor, patch) or explicit version
        runner: Command runner (defaults to a streaming shell runner)
        logger: Logger (defaults to the runner's logger)

    Returns:
        PipelineResult of the run
    """
    return await ReleasePipeline(config, version_arg, runner=runner, logger=logger).run()
