"""Fake submodule updater for testing."""

from pathlib import Path

from treeswitch.gateway.submodules.abc import SubmoduleUpdater
from treeswitch.gateway.submodules.types import SubmoduleError, SubmodulesUpdated


class FakeSubmoduleUpdater(SubmoduleUpdater):
    """In-memory fake implementation of submodule synchronization.

    Constructor Injection:
    ---------------------
    - error: SubmoduleError to return from init_and_update() instead of succeeding

    Mutation Tracking:
    -----------------
    - updated_roots: Repository roots passed to init_and_update(), in call order
    """

    def __init__(self, *, error: SubmoduleError | None = None) -> None:
        self._error = error
        self._updated_roots: list[Path] = []

    def init_and_update(self, repo_root: Path) -> SubmodulesUpdated | SubmoduleError:
        self._updated_roots.append(repo_root)
        if self._error is not None:
            return self._error
        return SubmodulesUpdated()

    @property
    def updated_roots(self) -> list[Path]:
        """Read-only access to updated repository roots for test assertions."""
        return list(self._updated_roots)
