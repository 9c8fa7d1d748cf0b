"""Git state modification operations.

Every function runs a single git command through the CommandRunner and
raises GitError on failure. The command strings are kept exactly in the
form other tooling expects (``git push --tags``, ``git commit -am ...``).
"""

import shlex
from pathlib import Path

from release_tasks.exceptions import CommandError, GitError
from release_tasks.utils.shell import CommandRunner


async def _git(
    runner: CommandRunner,
    command: str,
    cwd: Path,
    message: str,
    fix_hint: str,
) -> None:
    try:
        await runner.execute(command, cwd)
    except CommandError as e:
        raise GitError(
            command,
            returncode=e.returncode,
            message=message,
            details=e.details or f'Command "{command}" returned error',
            fix_hint=fix_hint,
        ) from e


async def checkout(runner: CommandRunner, ref: str, cwd: Path) -> None:
    """Checkout a branch, tag, or commit.

    Raises:
        GitError: If checkout fails
    """
    await _git(
        runner,
        f"git checkout {shlex.quote(ref)}",
        cwd,
        f"Failed to checkout '{ref}'",
        "Ensure the reference exists and the working directory is clean",
    )


async def pull(runner: CommandRunner, cwd: Path, remote: str = "origin", branch: str = "master") -> None:
    """Pull a branch from a remote.

    Raises:
        GitError: If pull fails
    """
    await _git(
        runner,
        f"git pull {shlex.quote(remote)} {shlex.quote(branch)}",
        cwd,
        f"Failed to pull {branch} from '{remote}'",
        "Resolve conflicts or network issues, then rerun",
    )


async def add_all(runner: CommandRunner, cwd: Path) -> None:
    """Stage every change in the working tree."""
    await _git(
        runner,
        "git add --all",
        cwd,
        "Failed to stage changes",
        "Run 'git status' to check the working tree",
    )


async def commit(runner: CommandRunner, message: str, cwd: Path) -> None:
    """Commit all tracked changes with a release message.

    Args:
        runner: Command runner
        message: Text appended to ``Release`` in the commit message
        cwd: Working directory

    Raises:
        GitError: If commit fails or there is nothing to commit
    """
    safe_message = message.replace("\\", "\\\\").replace('"', '\\"')
    await _git(
        runner,
        f'git commit -am "Release {safe_message}"',
        cwd,
        "Failed to create git commit",
        "Ensure there are changes to commit. Run 'git status' to check.",
    )


async def push(runner: CommandRunner, cwd: Path, remote: str = "origin", branch: str = "master") -> None:
    """Push a branch to a remote.

    Raises:
        GitError: If push fails
    """
    await _git(
        runner,
        f"git push {shlex.quote(remote)} {shlex.quote(branch)}",
        cwd,
        f"Failed to push {branch} to remote '{remote}'",
        "Ensure remote exists and you have push access. Check network connectivity.",
    )


async def tag(runner: CommandRunner, name: str, cwd: Path) -> None:
    """Create a tag on the current commit.

    Raises:
        GitError: If tag creation fails or the tag already exists
    """
    await _git(
        runner,
        f"git tag {shlex.quote(name)}",
        cwd,
        f"Failed to create git tag '{name}'",
        f"Ensure tag '{name}' doesn't already exist. Run 'git tag -d {name}' to delete it first.",
    )


async def push_tags(runner: CommandRunner, cwd: Path) -> None:
    """Push all local tags to the default remote.

    Raises:
        GitError: If push fails
    """
    await _git(
        runner,
        "git push --tags",
        cwd,
        "Failed to push tags",
        "Ensure you have push access and the tags do not already exist remotely",
    )
