"""Runtime configuration passed to the release and publish pipelines.

PipelineConfig is a frozen value object: it is built once (directly, or from
file settings via ``from_settings``) and never mutated while a pipeline runs.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from release_tasks.config.models import ContainerConfig, PipelineSettings, ProjectSettings
from release_tasks.manifest import manifest_path
from release_tasks.utils.shell import CommandRunner, shell_task, shell_version_task

Task = Callable[[], Awaitable[None]]
VersionTask = Callable[[str], Awaitable[None]]


class FailurePolicy(Enum):
    """What the entry point does with the process exit code on failure.

    - LOG_ONLY: log the failure and leave the exit code at 0
    - EXIT: exit with status 1
    """

    LOG_ONLY = "log-only"
    EXIT = "exit"


@dataclass(frozen=True)
class PipelineConfig:
    """Configuration for one pipeline invocation.

    Every hook is optional; a missing hook means its step is skipped.
    """

    working_dir: Path | None
    manifest: Path | str | None = None
    lint_task: Task | None = None
    build_task: Task | None = None
    before_version_update_task: VersionTask | None = None
    after_version_update_task: VersionTask | None = None
    before_publish_task: Task | None = None
    publish_task: Task | None = None
    after_publish_task: Task | None = None
    container: ContainerConfig | None = None
    npm: bool = False
    tag_with_name: bool = False
    strict_versions: bool = False
    main_branch: str = "master"
    remote: str = "origin"
    failure_policy: FailurePolicy | None = None

    @property
    def manifest_path(self) -> Path:
        """Absolute path of the manifest file."""
        if self.working_dir is None:
            raise ValueError("working_dir is not set")
        return manifest_path(self.working_dir, self.manifest)

    def tag_for(self, name: str | None, version: str) -> str:
        """Derive the git tag for a version.

        Returns ``<name>-<version>`` when tag_with_name is set, else ``<version>``.
        """
        if self.tag_with_name and name:
            return f"{name}-{version}"
        return version

    @classmethod
    def from_settings(
        cls,
        settings: ProjectSettings,
        working_dir: Path,
        runner: CommandRunner,
        pipeline: PipelineSettings | None = None,
    ) -> "PipelineConfig":
        """Build a pipeline configuration from file settings.

        Task commands become hooks executed through the given runner in
        working_dir.

        Args:
            settings: Loaded project settings
            working_dir: Project root
            runner: Runner used by the shell-command hooks
            pipeline: Release or publish section deciding the failure policy

        Returns:
            Frozen PipelineConfig
        """
        tasks = settings.tasks

        def task(command: str | None, label: str) -> Task | None:
            if not command:
                return None
            return shell_task(runner, command, working_dir, label)

        def version_task(command: str | None, label: str) -> VersionTask | None:
            if not command:
                return None
            return shell_version_task(runner, command, working_dir, label)

        policy: FailurePolicy | None = None
        if pipeline is not None and pipeline.exit_on_failure is not None:
            policy = FailurePolicy.EXIT if pipeline.exit_on_failure else FailurePolicy.LOG_ONLY

        return cls(
            working_dir=working_dir,
            manifest=settings.manifest,
            lint_task=task(tasks.lint, "Linting project..."),
            build_task=task(tasks.build, "Building project..."),
            before_version_update_task=version_task(
                tasks.before_version_update, "Running before version update task..."
            ),
            after_version_update_task=version_task(
                tasks.after_version_update, "Running after version update task..."
            ),
            before_publish_task=task(tasks.before_publish, "Running before publish task..."),
            publish_task=task(tasks.publish, "Running publish task..."),
            after_publish_task=task(tasks.after_publish, "Running after publish task..."),
            container=settings.container,
            npm=settings.npm,
            tag_with_name=settings.tag_with_name,
            strict_versions=settings.strict_versions,
            main_branch=settings.git.main_branch,
            remote=settings.git.remote,
            failure_policy=policy,
        )
