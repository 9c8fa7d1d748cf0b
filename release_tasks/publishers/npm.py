"""npm commands used by the pipelines."""

from pathlib import Path

from release_tasks.exceptions import CommandError, PublishError
from release_tasks.utils.shell import CommandRunner


class NPMPublisher:
    """Runs npm in the project directory."""

    def __init__(self, runner: CommandRunner, cwd: Path) -> None:
        self.runner = runner
        self.cwd = cwd

    async def install(self) -> None:
        """Reinstall dependencies so the lockfile picks up the new version."""
        await self._run(
            "npm install",
            "npm install failed",
            "Check the dependency tree with 'npm install' locally",
        )

    async def publish(self) -> None:
        """Publish the package to the npm registry."""
        self.runner.logger.info("Publishing to npm...")
        await self._run(
            "npm publish",
            "npm publish failed",
            "Ensure you are logged in ('npm whoami') and the version is not already published",
        )

    async def _run(self, command: str, message: str, fix_hint: str) -> None:
        try:
            await self.runner.execute(command, self.cwd)
        except CommandError as e:
            raise PublishError(
                command,
                returncode=e.returncode,
                message=message,
                details=f'Command "{command}" returned error',
                fix_hint=fix_hint,
            ) from e
