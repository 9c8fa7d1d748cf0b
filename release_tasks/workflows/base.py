"""Sequential pipeline engine shared by the release and publish workflows.

A pipeline is validated, then runs an ordered list of named steps. Steps
whose action is None are skipped. The first failing step stops the pipeline;
the error is logged and the main branch is checked out once as a best-effort
rollback. Pipelines never exit the process: they return a PipelineResult and
the entry point picks the exit code.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import ClassVar

from release_tasks.config.pipeline import FailurePolicy, PipelineConfig
from release_tasks.exceptions import ValidationError
from release_tasks.git import operations as git_ops
from release_tasks.utils.logger import Logger
from release_tasks.utils.shell import CommandRunner

StepAction = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class Step:
    """A named pipeline step.

    Attributes:
        name: State reached when the step completes (e.g. "Linted")
        action: Coroutine function to await, or None to skip the step
    """

    name: str
    action: StepAction | None

    @property
    def enabled(self) -> bool:
        return self.action is not None


@dataclass
class PipelineResult:
    """Outcome of a pipeline run.

    Attributes:
        pipeline: Pipeline name ("release" or "publish")
        success: Whether every step completed
        policy: Failure policy used to compute the exit code
        version: Version released or published, once known
        tag: Git tag, once known
        completed_steps: Names of the steps that completed, in order
        failed_step: Name of the step that failed
        error: The exception that stopped the pipeline
        rolled_back: Whether a rollback checkout was attempted
        validation_failed: Whether the failure happened during validation
    """

    pipeline: str
    success: bool
    policy: FailurePolicy
    version: str | None = None
    tag: str | None = None
    completed_steps: list[str] = field(default_factory=list)
    failed_step: str | None = None
    error: BaseException | None = None
    rolled_back: bool = False
    validation_failed: bool = False

    @property
    def exit_code(self) -> int:
        """Process exit code the entry point should use."""
        if self.success:
            return 0
        if self.validation_failed or self.policy is FailurePolicy.EXIT:
            return 1
        return 0


class Pipeline(ABC):
    """Base class for release and publish pipelines."""

    name: ClassVar[str]
    default_policy: ClassVar[FailurePolicy]

    def __init__(
        self,
        config: PipelineConfig,
        runner: CommandRunner | None = None,
        logger: Logger | None = None,
    ) -> None:
        if logger is None:
            logger = runner.logger if runner is not None else Logger()
        self.config = config
        self.logger = logger
        self.runner = runner if runner is not None else CommandRunner(logger)
        self.version: str | None = None
        self.tag: str | None = None

    @property
    def policy(self) -> FailurePolicy:
        return self.config.failure_policy or self.default_policy

    def validate_working_dir(self) -> None:
        """Check that working_dir is set and is a directory.

        Raises:
            ValidationError: If it is missing
        """
        working_dir = self.config.working_dir
        if working_dir is None:
            raise ValidationError("Working dir is required")
        if not working_dir.is_dir():
            raise ValidationError(
                "Working dir is required",
                details=f"{working_dir} is not a directory",
            )

    @abstractmethod
    def validate(self) -> None:
        """Check the configuration before any side effect.

        Raises:
            ValidationError: If the configuration is unusable
        """

    @abstractmethod
    def steps(self) -> list[Step]:
        """Ordered steps of the pipeline."""

    def on_success(self) -> None:
        """Log the completion message."""

    async def checkout_main(self) -> None:
        self.logger.info(f"Checking out {self.config.main_branch} branch...")
        assert self.config.working_dir is not None
        await git_ops.checkout(self.runner, self.config.main_branch, self.config.working_dir)

    async def rollback(self) -> None:
        """Checkout the main branch once; failures are logged, not raised."""
        try:
            await self.checkout_main()
        except Exception as e:
            self.logger.error(f"Rollback failed: {e}")

    def _result(self, success: bool, **kwargs: object) -> PipelineResult:
        return PipelineResult(
            pipeline=self.name,
            success=success,
            policy=self.policy,
            version=self.version,
            tag=self.tag,
            **kwargs,  # type: ignore[arg-type]
        )

    async def run(self) -> PipelineResult:
        """Validate the configuration and run every enabled step in order.

        Returns:
            PipelineResult describing the outcome
        """
        try:
            self.validate()
        except ValidationError as e:
            self.logger.error(e)
            return self._result(False, error=e, failed_step="Validating", validation_failed=True)

        completed: list[str] = []
        for step in self.steps():
            if not step.enabled:
                continue
            assert step.action is not None
            try:
                await step.action()
            except Exception as e:
                # Hooks are caller code and may raise anything
                self.logger.error(e)
                await self.rollback()
                return self._result(
                    False,
                    completed_steps=completed,
                    failed_step=step.name,
                    error=e,
                    rolled_back=True,
                )
            completed.append(step.name)

        self.on_success()
        return self._result(True, completed_steps=completed)
