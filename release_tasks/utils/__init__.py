"""Utility modules for release-tasks."""

from release_tasks.utils.logger import Logger
from release_tasks.utils.shell import CommandRunner, shell_task, shell_version_task
from release_tasks.utils.version import (
    BUMP_TYPES,
    SEMVER_PATTERN,
    BumpType,
    SemVer,
    bump_version,
    compare_versions,
    is_bump_type,
    is_valid_version,
    parse_version,
    resolve_version,
    validate_version_argument,
)

__all__ = [
    # Console output
    "Logger",
    # Process execution
    "CommandRunner",
    "shell_task",
    "shell_version_task",
    # Version utilities
    "parse_version",
    "is_valid_version",
    "is_bump_type",
    "compare_versions",
    "bump_version",
    "resolve_version",
    "validate_version_argument",
    "BumpType",
    "SemVer",
    "BUMP_TYPES",
    "SEMVER_PATTERN",
]
