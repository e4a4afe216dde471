"""Repository, branch and account models used by checkout operations.

These are the boundary types callers hand to the checkout core. They carry
no behavior beyond construction helpers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class BranchType(Enum):
    """Where a branch ref lives."""

    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class Branch:
    """A branch to check out.

    Attributes:
        name: Full ref name as git knows it (e.g. "main", "origin/feature-x")
        type: Whether this is a local branch or a remote-tracking branch
        name_without_remote: Local branch name for a remote-tracking branch
            (e.g. "feature-x"). Only used when type is REMOTE.
    """

    name: str
    type: BranchType
    name_without_remote: str = ""

    @staticmethod
    def local(name: str) -> Branch:
        """Create a local branch."""
        return Branch(name=name, type=BranchType.LOCAL, name_without_remote=name)

    @staticmethod
    def remote(name: str) -> Branch:
        """Create a remote-tracking branch from "<remote>/<branch>".

        Everything after the first "/" becomes the local branch name, so
        "origin/user/feature" maps to "user/feature".
        """
        _remote, sep, rest = name.partition("/")
        if not sep or not rest:
            raise ValueError(f"Remote branch name must look like '<remote>/<branch>': {name!r}")
        return Branch(name=name, type=BranchType.REMOTE, name_without_remote=rest)


@dataclass(frozen=True)
class Repository:
    """A working tree on disk."""

    path: Path
    name: str

    @staticmethod
    def at(path: Path) -> Repository:
        return Repository(path=path, name=path.name)


@dataclass(frozen=True)
class GitAccount:
    """Identity to use when git authenticates against a remote.

    No secret is carried. The login is handed to the user's credential
    helpers as the username for URLs under endpoint (e.g. "https://github.com").
    """

    login: str
    endpoint: str
