"""Exception hierarchy for release-tasks.

Every error raised by a pipeline step derives from ReleaseError so the
orchestrators can log it in full before rolling back. The process exit code
is decided by the CLI from the pipeline result, never by the exceptions.
"""


class ReleaseError(Exception):
    """Base exception for all release-tasks errors."""

    def __init__(
        self,
        message: str,
        details: str | None = None,
        fix_hint: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Brief error message
            details: Detailed explanation of what went wrong
            fix_hint: Suggested command or action to fix the issue
        """
        super().__init__(message)
        self.message = message
        self.details = details
        self.fix_hint = fix_hint

    def __str__(self) -> str:
        parts = [self.message]
        if self.details:
            parts.append(f"\nDetails: {self.details}")
        if self.fix_hint:
            parts.append(f"\nFix: {self.fix_hint}")
        return "".join(parts)


class ConfigurationError(ReleaseError):
    """Configuration file errors.

    Raised when:
    - An explicitly requested config file does not exist
    - Config file has invalid syntax (YAML/TOML)
    - Config values fail pydantic validation
    """


class ValidationError(ReleaseError):
    """Invalid pipeline configuration or version argument.

    Raised before any side effect when:
    - The working directory is missing
    - The version argument is neither a bump keyword nor a semantic version
    - The publish pipeline has no publish target configured
    - A strict-mode explicit version is lower than the current one
    """


class CommandError(ReleaseError):
    """An external command exited with a non-zero status.

    Carries the original command string. The command's stderr is not part of
    the error: it has already been streamed to the logger.
    """

    def __init__(
        self,
        command: str,
        returncode: int | None = None,
        message: str | None = None,
        details: str | None = None,
        fix_hint: str | None = None,
    ) -> None:
        super().__init__(
            message or f'Command "{command}" returned error',
            details=details,
            fix_hint=fix_hint,
        )
        self.command = command
        self.returncode = returncode


class GitError(CommandError):
    """A git command failed (checkout, pull, commit, push, tag)."""


class PublishError(CommandError):
    """A publishing command failed (npm, docker, registry login)."""


class ManifestError(ReleaseError):
    """The manifest file could not be read or written."""


class ManifestParseError(ManifestError):
    """The manifest file is not a JSON object."""
