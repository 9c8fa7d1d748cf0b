"""Publishers for the npm registry and container registries."""

from release_tasks.publishers.docker import (
    ContainerPublisher,
    build_command,
    login_command,
    push_command,
    registry_image,
    tag_command,
)
from release_tasks.publishers.npm import NPMPublisher

__all__ = [
    "ContainerPublisher",
    "NPMPublisher",
    "build_command",
    "login_command",
    "push_command",
    "registry_image",
    "tag_command",
]
