"""Configuration management for release-tasks."""

from release_tasks.config.models import (
    ContainerConfig,
    GitConfig,
    PipelineSettings,
    ProjectSettings,
    RegistryConfig,
    TasksConfig,
)
from release_tasks.config.pipeline import FailurePolicy, PipelineConfig, Task, VersionTask

__all__ = [
    "ProjectSettings",
    "GitConfig",
    "TasksConfig",
    "ContainerConfig",
    "RegistryConfig",
    "PipelineSettings",
    "PipelineConfig",
    "FailurePolicy",
    "Task",
    "VersionTask",
]
