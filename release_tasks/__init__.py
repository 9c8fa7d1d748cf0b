"""Release and publish automation for npm and container projects."""

__version__ = "0.1.0"

from release_tasks.exceptions import (
    CommandError,
    ConfigurationError,
    GitError,
    ManifestError,
    ManifestParseError,
    PublishError,
    ReleaseError,
    ValidationError,
)

__all__ = [
    "__version__",
    "ReleaseError",
    "ConfigurationError",
    "ValidationError",
    "CommandError",
    "GitError",
    "PublishError",
    "ManifestError",
    "ManifestParseError",
]
