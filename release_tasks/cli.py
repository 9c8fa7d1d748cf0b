"""Command-line interface for release-tasks.

Provides commands for:
- release: Bump, commit, tag and push a new version
- publish: Publish the current version to npm and/or a container registry
- status: Show the manifest version and configured publish targets
- init-config: Generate configuration
"""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from release_tasks import __version__
from release_tasks.config.defaults import write_default_config
from release_tasks.config.loader import load_config
from release_tasks.config.models import ProjectSettings
from release_tasks.config.pipeline import PipelineConfig
from release_tasks.exceptions import ReleaseError
from release_tasks.manifest import manifest_path, read_manifest
from release_tasks.utils.logger import Logger
from release_tasks.utils.shell import CommandRunner
from release_tasks.workflows.base import PipelineResult
from release_tasks.workflows.publish import run_publish
from release_tasks.workflows.release import run_release

app = typer.Typer(
    name="release-tasks",
    help="Release and publish automation for npm and container projects",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

# Release steps reached after the manifest was rewritten
MANIFEST_WRITTEN_STEPS = (
    "VersionUpdated",
    "PostHook",
    "Built",
    "Committed",
    "Pushed",
    "Tagged",
    "TagPushed",
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"release-tasks version {__version__}")
        raise typer.Exit()


def load_settings(working_dir: Path, config: Path | None, manifest: Path | None) -> ProjectSettings:
    """Load settings, letting --manifest override the configured manifest."""
    settings = load_config(config, project_root=working_dir)
    if manifest is not None:
        settings = settings.model_copy(update={"manifest": str(manifest)})
    return settings


def finish(result: PipelineResult, logger: Logger) -> None:
    """Print the closing banner and exit with the pipeline's exit code."""
    label = f"{result.pipeline.capitalize()} {result.version or ''}".strip()
    if result.success:
        logger.banner(f"[bold green]{label} completed successfully![/bold green]", "Done", "green")
    else:
        hint = ""
        if result.pipeline == "release" and result.failed_step in MANIFEST_WRITTEN_STEPS:
            hint = "\nThe manifest may already contain the new version; check before rerunning."
        logger.banner(
            f"[bold red]{label} failed at {result.failed_step}[/bold red]{hint}",
            "Failed",
            "red",
        )
    raise typer.Exit(code=result.exit_code)


@app.callback()
def main(
    version: bool = typer.Option(  # noqa: B008
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Release and publish automation.

    Sequences version bumping, git tagging, linting, building and publishing
    to npm and container registries.
    """
    pass


@app.command()
def release(
    version: str = typer.Argument(  # noqa: B008
        ...,
        help="Version to release (semver or bump type: major, minor, patch)",
    ),
    working_dir: Path = typer.Option(  # noqa: B008
        Path("."),
        "--dir",
        "-C",
        help="Project root",
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
    manifest: Path | None = typer.Option(  # noqa: B008
        None,
        "--manifest",
        "-m",
        help="Manifest path (defaults to package.json)",
    ),
) -> None:
    """Release a new version: bump, commit, tag and push.

    VERSION can be:
    - A bump type: major, minor, patch
    - An explicit version: 1.2.3

    Examples:
        release-tasks release patch    # 1.0.0 -> 1.0.1
        release-tasks release minor    # 1.0.0 -> 1.1.0
        release-tasks release 2.0.0    # Set specific version
    """
    working_dir = working_dir.resolve()
    logger = Logger()
    try:
        settings = load_settings(working_dir, config, manifest)
    except ReleaseError as e:
        logger.error(f"Error: {e}")
        raise typer.Exit(code=1) from None

    runner = CommandRunner(logger)
    pipeline_config = PipelineConfig.from_settings(settings, working_dir, runner, settings.release)
    logger.banner(f"[bold]Release {version}[/bold]\nDirectory: {working_dir}", "Starting Release")
    result = asyncio.run(run_release(pipeline_config, version, runner=runner))
    finish(result, logger)


@app.command()
def publish(
    working_dir: Path = typer.Option(  # noqa: B008
        Path("."),
        "--dir",
        "-C",
        help="Project root",
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
    manifest: Path | None = typer.Option(  # noqa: B008
        None,
        "--manifest",
        "-m",
        help="Manifest path (defaults to package.json)",
    ),
) -> None:
    """Publish the manifest's current version.

    Checks out the version tag, builds, publishes to the configured targets
    and returns to the main branch.
    """
    working_dir = working_dir.resolve()
    logger = Logger()
    try:
        settings = load_settings(working_dir, config, manifest)
    except ReleaseError as e:
        logger.error(f"Error: {e}")
        raise typer.Exit(code=1) from None

    runner = CommandRunner(logger)
    pipeline_config = PipelineConfig.from_settings(settings, working_dir, runner, settings.publish)
    logger.banner(f"[bold]Publish[/bold]\nDirectory: {working_dir}", "Starting Publish")
    result = asyncio.run(run_publish(pipeline_config, runner=runner))
    finish(result, logger)


@app.command()
def status(
    working_dir: Path = typer.Option(  # noqa: B008
        Path("."),
        "--dir",
        "-C",
        help="Project root",
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
    manifest: Path | None = typer.Option(  # noqa: B008
        None,
        "--manifest",
        "-m",
        help="Manifest path (defaults to package.json)",
    ),
) -> None:
    """Show current release status.

    Displays:
    - Manifest name and version
    - Tag of the current version
    - Main branch and publish targets
    """
    working_dir = working_dir.resolve()
    try:
        settings = load_settings(working_dir, config, manifest)
        path = manifest_path(working_dir, settings.manifest)
        data = read_manifest(path)
    except ReleaseError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from None

    targets = []
    if settings.container is not None:
        registry = settings.container.registry
        targets.append(f"container ({registry.url})" if registry else "container (local)")
    if settings.npm:
        targets.append("npm")
    if settings.tasks.publish:
        targets.append("custom")

    pipeline_config = PipelineConfig(working_dir=working_dir, tag_with_name=settings.tag_with_name)

    table = Table(title="Release Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Manifest", str(path))
    table.add_row("Name", data.name or "Unknown")
    table.add_row("Current Version", data.version or "Unknown")
    table.add_row("Tag", pipeline_config.tag_for(data.name, data.version) if data.version else "-")
    table.add_row("Main Branch", settings.git.main_branch)
    table.add_row("Publish Targets", ", ".join(targets) or "none")

    console.print(table)


@app.command(name="init-config")
def init_config(
    output: Path = typer.Option(  # noqa: B008
        Path("release_tasks.yml"),
        "--output",
        "-o",
        help="Output path for configuration file",
    ),
    force: bool = typer.Option(  # noqa: B008
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration",
    ),
) -> None:
    """Generate a release-tasks configuration file.

    Detects lint/build scripts, Dockerfile and main branch.

    Examples:
        release-tasks init-config
        release-tasks init-config -o config/release_tasks.yml
    """
    if output.exists() and not force:
        console.print(f"[red]Configuration already exists:[/red] {output}")
        console.print("Use --force to overwrite")
        raise typer.Exit(code=1)

    try:
        write_default_config(output, project_root=Path.cwd())
        console.print(f"[green]Configuration written to:[/green] {output}")
    except ReleaseError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from None


if __name__ == "__main__":
    app()
