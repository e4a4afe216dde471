"""Waiting for another git process to release the index before a checkout.

git takes `index.lock` next to the index it is about to rewrite. Each linked
worktree and each submodule has its own index inside its admin directory,
named by the "gitdir:" line of the `.git` file in its working tree.
"""

from __future__ import annotations

from pathlib import Path

from treeswitch.gateway.time.abc import Time

INDEX_LOCK_NAME = "index.lock"
GITDIR_PREFIX = "gitdir:"

INDEX_LOCK_TIMEOUT_SECONDS = 5.0
INDEX_LOCK_POLL_SECONDS = 0.5


def resolve_admin_dir(working_tree: Path) -> Path:
    """Return the git admin directory that owns the working tree's index.

    A plain repository uses `<working_tree>/.git`. For a linked worktree or a
    submodule, `.git` is a file pointing at the admin directory; relative
    targets are resolved against the working tree.
    """
    dot_git = working_tree / ".git"
    if not dot_git.is_file():
        return dot_git

    first_line = dot_git.read_text(encoding="utf-8").splitlines()[:1]
    if not first_line or not first_line[0].startswith(GITDIR_PREFIX):
        return dot_git
    target = Path(first_line[0][len(GITDIR_PREFIX) :].strip())
    if not target.is_absolute():
        target = working_tree / target
    return target


def index_lock_path(working_tree: Path) -> Path:
    return resolve_admin_dir(working_tree) / INDEX_LOCK_NAME


def wait_for_index_lock(
    working_tree: Path,
    time: Time,
    *,
    timeout_seconds: float = INDEX_LOCK_TIMEOUT_SECONDS,
    poll_seconds: float = INDEX_LOCK_POLL_SECONDS,
) -> bool:
    """Sleep in poll_seconds steps while the working tree's index is locked.

    Args:
        working_tree: Checkout whose index git is about to rewrite
        time: Time provider used for sleeping
        timeout_seconds: Give up after sleeping this long in total
        poll_seconds: Interval between checks

    Returns:
        True once no lock is present, False if it was still held at the timeout
    """
    lock = index_lock_path(working_tree)
    waited = 0.0
    while lock.exists():
        if waited >= timeout_seconds:
            return False
        time.sleep(poll_seconds)
        waited += poll_seconds
    return True
