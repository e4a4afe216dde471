"""No-op git executor for dry-run mode.

Every git command treeswitch issues mutates the working tree, so this
executor has nothing to delegate to: each invocation reports success without
running.
"""

from collections.abc import Iterator

from treeswitch.gateway.git_executor.abc import GitExecutor
from treeswitch.gateway.git_executor.types import (
    GitInvocation,
    GitResult,
    GitStreamEvent,
    ProcessExitedEvent,
)


class DryRunGitExecutor(GitExecutor):
    """Executor that never starts git.

    Usage:
        # Combine with PrintingGitExecutor to show what would have run
        executor = PrintingGitExecutor(DryRunGitExecutor(), dry_run=True)
    """

    def stream(self, invocation: GitInvocation) -> Iterator[GitStreamEvent]:
        """No-op stream that exits successfully."""
        yield ProcessExitedEvent(result=GitResult(exit_code=0, stdout="", stderr=""))

    def run(self, invocation: GitInvocation) -> GitResult:
        """No-op run that exits successfully."""
        return GitResult(exit_code=0, stdout="", stderr="")
