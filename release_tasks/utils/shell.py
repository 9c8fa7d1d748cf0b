"""Streaming shell command execution.

Commands are spawned through the shell in a given working directory. Their
stdout and stderr are read as independent byte streams and forwarded to the
logger line by line while the process runs, so long builds show live
progress. A partial trailing line is held back until the rest of it arrives
or the stream ends.

No timeout is applied: a hanging command blocks the pipeline.
"""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path

from release_tasks.exceptions import CommandError
from release_tasks.utils.logger import Logger

# Size of each read from a child process pipe
CHUNK_SIZE = 4096


class LineBuffer:
    """Splits a byte stream into lines, keeping the unterminated remainder.

    Bytes are split before decoding so a multi-byte character cut across two
    reads is never corrupted.
    """

    def __init__(self, emit: Callable[[str], None]) -> None:
        self._emit = emit
        self._pending = b""

    def feed(self, data: bytes) -> None:
        """Append data and emit every complete line."""
        lines = (self._pending + data).split(b"\n")
        self._pending = lines.pop()
        for line in lines:
            self._emit(_decode(line))

    def flush(self) -> None:
        """Emit the unterminated remainder, if any."""
        if self._pending:
            self._emit(_decode(self._pending))
            self._pending = b""


def _decode(line: bytes) -> str:
    return line.rstrip(b"\r").decode("utf-8", errors="replace")


async def _pump(stream: asyncio.StreamReader | None, buffer: LineBuffer) -> None:
    if stream is None:
        return
    while True:
        chunk = await stream.read(CHUNK_SIZE)
        if not chunk:
            break
        buffer.feed(chunk)
    buffer.flush()


class CommandRunner:
    """Runs shell commands and streams their output to a Logger."""

    def __init__(self, logger: Logger | None = None) -> None:
        self.logger = logger if logger is not None else Logger()

    def _log_line(self, line: str) -> None:
        self.logger.info(line, plain=True)

    async def execute(self, command: str, cwd: Path) -> None:
        """Execute a command through the shell.

        Args:
            command: Shell command line
            cwd: Working directory for the command

        Raises:
            CommandError: If the command cannot be started or exits non-zero
        """
        try:
            process = await asyncio.create_subprocess_shell(
                command,
                cwd=cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise CommandError(
                command,
                details=str(e),
                fix_hint=f"Ensure the directory {cwd} exists",
            ) from e

        await asyncio.gather(
            _pump(process.stdout, LineBuffer(self._log_line)),
            _pump(process.stderr, LineBuffer(self._log_line)),
        )
        returncode = await process.wait()
        if returncode != 0:
            raise CommandError(command, returncode=returncode)


def shell_task(
    runner: CommandRunner,
    command: str,
    cwd: Path,
    label: str | None = None,
) -> Callable[[], Awaitable[None]]:
    """Wrap a shell command as a zero-argument pipeline hook.

    Args:
        runner: Runner used to execute the command
        command: Shell command line
        cwd: Working directory
        label: Optional progress line logged before the command runs

    Returns:
        Async callable running the command
    """

    async def task() -> None:
        if label:
            runner.logger.info(label)
        await runner.execute(command, cwd)

    return task


def shell_version_task(
    runner: CommandRunner,
    command: str,
    cwd: Path,
    label: str | None = None,
) -> Callable[[str], Awaitable[None]]:
    """Wrap a shell command as a hook receiving the release version.

    ``{version}`` in the command is replaced with the version.
    """

    async def task(version: str) -> None:
        if label:
            runner.logger.info(label)
        await runner.execute(command.replace("{version}", version), cwd)

    return task
