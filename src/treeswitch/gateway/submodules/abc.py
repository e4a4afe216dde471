"""Abstract base class for submodule synchronization."""

from abc import ABC, abstractmethod
from pathlib import Path

from treeswitch.gateway.submodules.types import SubmoduleError, SubmodulesUpdated


class SubmoduleUpdater(ABC):
    """Abstract interface for bringing submodules in line with the checked-out commit.

    All implementations (real, fake) must implement this interface.
    """

    @abstractmethod
    def init_and_update(self, repo_root: Path) -> SubmodulesUpdated | SubmoduleError:
        """Initialize and recursively update every submodule.

        Args:
            repo_root: Path to the repository whose submodules to update

        Returns:
            SubmodulesUpdated on success, SubmoduleError if git failed
        """
        ...
