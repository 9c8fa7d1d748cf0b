"""Pytest fixtures for release-tasks tests.

Provides common fixtures for:
- Temporary project directories with a package.json manifest
- A logger writing to an in-memory console
- A command runner that records commands instead of executing them
"""

import io
import json
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

from release_tasks.exceptions import CommandError
from release_tasks.utils.logger import Logger
from release_tasks.utils.shell import CommandRunner


class CapturedLogger(Logger):
    """Logger writing both streams to one in-memory console."""

    def __init__(self) -> None:
        self.buffer = io.StringIO()
        super().__init__(console=Console(file=self.buffer, width=200, color_system=None))

    @property
    def output(self) -> str:
        return self.buffer.getvalue()


class RecordingRunner(CommandRunner):
    """Records executed commands; fails commands containing a given substring.

    Attributes:
        commands: Command strings in execution order
        calls: (command, cwd) pairs in execution order
        fail_on: Substrings making a command fail with exit status 1
    """

    def __init__(self, logger: Logger | None = None, fail_on: tuple[str, ...] = ()) -> None:
        super().__init__(logger if logger is not None else CapturedLogger())
        self.commands: list[str] = []
        self.calls: list[tuple[str, Path]] = []
        self.fail_on = fail_on

    async def execute(self, command: str, cwd: Path) -> None:
        self.commands.append(command)
        self.calls.append((command, cwd))
        if any(pattern in command for pattern in self.fail_on):
            raise CommandError(command, returncode=1)


def write_package_json(directory: Path, data: dict[str, Any]) -> Path:
    """Write a package.json with 2-space indentation and a trailing newline."""
    path = directory / "package.json"
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create a temporary project directory.

    Returns:
        Path to project directory
    """
    project = tmp_path / "demo"
    project.mkdir()
    return project


@pytest.fixture
def demo_project(project_dir: Path) -> Path:
    """Project with a package.json named demo at version 1.2.3.

    Returns:
        Path to project directory
    """
    write_package_json(
        project_dir,
        {
            "name": "demo",
            "version": "1.2.3",
            "description": "Demo package",
            "scripts": {"lint": "eslint .", "build": "tsc"},
        },
    )
    return project_dir


@pytest.fixture
def logger() -> CapturedLogger:
    """Logger capturing output in memory."""
    return CapturedLogger()


@pytest.fixture
def runner(logger: CapturedLogger) -> RecordingRunner:
    """Runner recording commands without executing them."""
    return RecordingRunner(logger)


@pytest.fixture
def failing_runner(logger: CapturedLogger):
    """Factory for runners failing commands that contain any given substring."""

    def make(*fail_on: str) -> RecordingRunner:
        return RecordingRunner(logger, fail_on=fail_on)

    return make
