"""Abstract base class for running git as a subprocess.

Every git command the checkout core issues goes through this gateway, so
tests can substitute FakeGitExecutor and assert on the exact invocations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator

from treeswitch.gateway.git_executor.types import GitInvocation, GitResult, GitStreamEvent


class GitExecutor(ABC):
    """Abstract interface for git process execution.

    All implementations (real, fake, dry-run, printing) must implement this interface.
    """

    @abstractmethod
    def stream(self, invocation: GitInvocation) -> Iterator[GitStreamEvent]:
        """Run git and yield its output as it is produced.

        Yields StatusLineEvent and LfsProgressEvent items in the order their
        lines were produced, followed by exactly one ProcessExitedEvent.
        LfsProgressEvent items only appear when invocation.track_lfs_progress
        is set.

        Args:
            invocation: Command, working directory and environment to use

        Returns:
            Iterator of stream events ending with ProcessExitedEvent
        """
        ...

    @abstractmethod
    def run(self, invocation: GitInvocation) -> GitResult:
        """Run git to completion and return its result.

        Args:
            invocation: Command, working directory and environment to use

        Returns:
            GitResult with exit code, captured output and the first matching
            expected error signature (only when the exit code is nonzero)
        """
        ...
