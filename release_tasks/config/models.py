"""Pydantic v2 models for release_tasks.yml.

These models provide:
- Type-safe configuration loading
- Automatic validation
- Default values
- Environment variable override support
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class GitConfig(BaseModel):
    """Git workflow configuration."""

    main_branch: str = Field(
        default="master",
        description="Branch releases are committed to and rolled back to",
    )
    remote: str = Field(
        default="origin",
        description="Git remote name",
    )


class RegistryConfig(BaseModel):
    """Container registry the image is pushed to."""

    url: str = Field(description="Registry host (e.g., 1234.dkr.ecr.us-west-1.amazonaws.com)")
    namespace: str = Field(description="Repository namespace inside the registry")
    region: str | None = Field(default=None, description="Registry region")
    profile: str | None = Field(default=None, description="Credential profile name")
    login: Literal["password-stdin", "legacy"] = Field(
        default="password-stdin",
        description="Login flow: password piped to docker login, or legacy eval login",
    )

    @field_validator("url")
    @classmethod
    def strip_scheme(cls, v: str) -> str:
        v = v.strip()
        for scheme in ("https://", "http://"):
            if v.startswith(scheme):
                v = v[len(scheme) :]
        v = v.rstrip("/")
        if not v:
            raise ValueError("registry url must not be empty")
        return v

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        v = v.strip().strip("/")
        if not v:
            raise ValueError("registry namespace must not be empty")
        return v


class ContainerConfig(BaseModel):
    """Container image publishing configuration.

    Presence of this section enables the image build step.
    """

    dockerfile: str | None = Field(
        default=None,
        description="Dockerfile path relative to the working directory",
    )
    registry: RegistryConfig | None = Field(
        default=None,
        description="Registry to tag and push the image to",
    )


class TasksConfig(BaseModel):
    """Shell commands run as pipeline hooks.

    ``{version}`` is replaced with the release version in the
    before/after version update commands.
    """

    lint: str | None = Field(default=None, description="Lint command")
    build: str | None = Field(default=None, description="Build command")
    before_version_update: str | None = Field(default=None)
    after_version_update: str | None = Field(default=None)
    before_publish: str | None = Field(default=None)
    publish: str | None = Field(default=None, description="Custom publish command")
    after_publish: str | None = Field(default=None)


class PipelineSettings(BaseModel):
    """Per-pipeline failure behavior."""

    exit_on_failure: bool | None = Field(
        default=None,
        description="Exit non-zero when the pipeline fails (None = pipeline default)",
    )


class ProjectSettings(BaseSettings):
    """Root configuration model for release_tasks.yml.

    Supports environment variable overrides with RELEASE_TASKS_ prefix.
    Example: RELEASE_TASKS_GIT__MAIN_BRANCH=main
    """

    manifest: str | None = Field(
        default=None,
        description="Manifest path (defaults to package.json)",
    )
    tag_with_name: bool = Field(
        default=False,
        description="Prefix tags with the manifest name (<name>-<version>)",
    )
    strict_versions: bool = Field(
        default=False,
        description="Reject explicit versions lower than the current one",
    )
    npm: bool = Field(default=False, description="Publish to the npm registry")
    git: GitConfig = Field(default_factory=GitConfig)
    tasks: TasksConfig = Field(default_factory=TasksConfig)
    container: ContainerConfig | None = Field(default=None)
    release: PipelineSettings = Field(default_factory=PipelineSettings)
    publish: PipelineSettings = Field(default_factory=PipelineSettings)

    model_config = {
        "env_prefix": "RELEASE_TASKS_",
        "env_nested_delimiter": "__",
    }
