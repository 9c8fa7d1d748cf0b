"""Container image publishing.

Builds ``<name>:latest`` from the project Dockerfile, retags it for the
configured registry as ``<url>/<namespace>/<name>:latest``, signs the local
docker client in to the registry and pushes the image.

Registry login flows:
- password-stdin (default): ``aws ecr get-login-password ... | docker login
  --username AWS --password-stdin <url>``
- legacy: ``eval $(aws ecr get-login --no-include-email ...)`` for AWS CLI v1
"""

import shlex
from pathlib import Path

from release_tasks.config.models import ContainerConfig, RegistryConfig
from release_tasks.exceptions import CommandError, PublishError
from release_tasks.utils.shell import CommandRunner


def registry_image(registry: RegistryConfig, name: str, tag: str = "latest") -> str:
    """Full image reference inside the registry."""
    return f"{registry.url}/{registry.namespace}/{name}:{tag}"


def build_command(name: str, dockerfile: Path | None = None) -> str:
    """``docker build -t <name> [-f <dockerfile>] .``"""
    cmd = f"docker build -t {shlex.quote(name)}"
    if dockerfile is not None:
        cmd += f" -f {shlex.quote(str(dockerfile))}"
    return cmd + " ."


def tag_command(name: str, registry: RegistryConfig) -> str:
    """``docker tag <name>:latest <url>/<namespace>/<name>:latest``"""
    return f"docker tag {shlex.quote(f'{name}:latest')} {shlex.quote(registry_image(registry, name))}"


def push_command(name: str, registry: RegistryConfig) -> str:
    """``docker push <url>/<namespace>/<name>:latest``"""
    return f"docker push {shlex.quote(registry_image(registry, name))}"


def login_command(registry: RegistryConfig) -> str:
    """Build the registry login pipeline for the configured flow."""
    options = ""
    if registry.region:
        options += f" --region {shlex.quote(registry.region)}"
    if registry.profile:
        options += f" --profile {shlex.quote(registry.profile)}"

    if registry.login == "legacy":
        return f"eval $(aws ecr get-login --no-include-email{options})"

    return (
        f"aws ecr get-login-password{options}"
        f" | docker login --username AWS --password-stdin {shlex.quote(registry.url)}"
    )


class ContainerPublisher:
    """Runs the docker steps of the publish pipeline for one image.

    Attributes:
        runner: Command runner
        config: Container configuration
        name: Image name (the manifest name)
        cwd: Build context directory
    """

    def __init__(
        self,
        runner: CommandRunner,
        config: ContainerConfig,
        name: str,
        cwd: Path,
    ) -> None:
        self.runner = runner
        self.config = config
        self.name = name
        self.cwd = cwd

    @property
    def registry(self) -> RegistryConfig | None:
        return self.config.registry

    @property
    def dockerfile(self) -> Path | None:
        if not self.config.dockerfile:
            return None
        return self.cwd / self.config.dockerfile

    async def _run(self, command: str, message: str, fix_hint: str | None = None) -> None:
        try:
            await self.runner.execute(command, self.cwd)
        except CommandError as e:
            raise PublishError(
                command,
                returncode=e.returncode,
                message=message,
                details=e.details or f'Command "{command}" returned error',
                fix_hint=fix_hint,
            ) from e

    async def build(self) -> None:
        """Build the image tagged ``<name>:latest``."""
        self.runner.logger.info("Building image...")
        await self._run(
            build_command(self.name, self.dockerfile),
            f"Failed to build image {self.name}",
            "Check the Dockerfile and that the docker daemon is running",
        )

    async def tag(self) -> None:
        """Retag the image for the registry."""
        registry = self._require_registry()
        self.runner.logger.info("Tagging image...")
        await self._run(
            tag_command(self.name, registry),
            f"Failed to tag image {self.name}",
        )

    async def login(self) -> None:
        """Obtain registry credentials and sign the docker client in."""
        registry = self._require_registry()
        self.runner.logger.info(f"Signing in to {registry.url}...")
        await self._run(
            login_command(registry),
            f"Failed to sign in to registry {registry.url}",
            "Check the AWS credentials for the configured profile and region",
        )

    async def push(self) -> None:
        """Push the retagged image."""
        registry = self._require_registry()
        self.runner.logger.info(f"Publishing to {registry.url}...")
        await self._run(
            push_command(self.name, registry),
            f"Failed to push {registry_image(registry, self.name)}",
            "Ensure the repository exists in the registry",
        )

    def _require_registry(self) -> RegistryConfig:
        if self.registry is None:
            raise PublishError(
                "docker",
                message="No container registry configured",
                fix_hint="Add a container.registry section to the configuration",
            )
        return self.registry
