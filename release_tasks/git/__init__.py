"""Git operations used by the release and publish pipelines."""

from release_tasks.git.operations import (
    add_all,
    checkout,
    commit,
    pull,
    push,
    push_tags,
    tag,
)

__all__ = [
    "add_all",
    "checkout",
    "commit",
    "pull",
    "push",
    "push_tags",
    "tag",
]
