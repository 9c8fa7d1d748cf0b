"""Allow running as ``python -m release_tasks``."""

from release_tasks.cli import app

app()
