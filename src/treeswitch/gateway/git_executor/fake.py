"""Fake git executor for testing."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from treeswitch.auth import match_expected_error
from treeswitch.gateway.git_executor.abc import GitExecutor
from treeswitch.gateway.git_executor.types import (
    GitInvocation,
    GitOutputEvent,
    GitResult,
    GitStreamEvent,
    LfsProgressEvent,
    ProcessExitedEvent,
)


@dataclass(frozen=True)
class FakeGitOutcome:
    """Scripted behavior of one fake git process.

    Attributes:
        exit_code: Exit code the process reports
        stdout: Captured standard output
        stderr: Captured standard error
        output: Stream events yielded before the process exits. LfsProgressEvent
            items are dropped unless the invocation tracks LFS progress.
    """

    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""
    output: tuple[GitOutputEvent, ...] = ()

    @staticmethod
    def failure(exit_code: int, stderr: str) -> FakeGitOutcome:
        return FakeGitOutcome(exit_code=exit_code, stderr=stderr)


class FakeGitExecutor(GitExecutor):
    """In-memory fake implementation of git process execution.

    Constructor Injection:
    ---------------------
    - outcomes: Mapping of operation label -> FakeGitOutcome. Operations
      without an entry succeed with no output.

    Mutation Tracking:
    -----------------
    This fake tracks invocations for test assertions via read-only properties:
    - invocations: Every GitInvocation passed to stream() or run(), in order
    """

    def __init__(self, *, outcomes: dict[str, FakeGitOutcome] | None = None) -> None:
        """Create FakeGitExecutor with pre-configured outcomes.

        Args:
            outcomes: Mapping of operation label (e.g. "checkoutBranch") -> outcome
        """
        self._outcomes = outcomes if outcomes is not None else {}
        self._invocations: list[GitInvocation] = []

    def stream(self, invocation: GitInvocation) -> Iterator[GitStreamEvent]:
        self._invocations.append(invocation)
        outcome = self._outcome_for(invocation)
        for event in outcome.output:
            if isinstance(event, LfsProgressEvent) and not invocation.track_lfs_progress:
                continue
            yield event
        yield ProcessExitedEvent(result=self._result_for(invocation, outcome))

    def run(self, invocation: GitInvocation) -> GitResult:
        self._invocations.append(invocation)
        return self._result_for(invocation, self._outcome_for(invocation))

    def _outcome_for(self, invocation: GitInvocation) -> FakeGitOutcome:
        return self._outcomes.get(invocation.operation, FakeGitOutcome())

    def _result_for(self, invocation: GitInvocation, outcome: FakeGitOutcome) -> GitResult:
        matched_error = None
        if outcome.exit_code != 0:
            matched_error = match_expected_error(outcome.stderr, invocation.expected_errors)
        return GitResult(
            exit_code=outcome.exit_code,
            stdout=outcome.stdout,
            stderr=outcome.stderr,
            matched_error=matched_error,
        )

    # ============================================================================
    # Mutation Tracking Properties
    # ============================================================================

    @property
    def invocations(self) -> list[GitInvocation]:
        """Read-only access to recorded invocations for test assertions."""
        return list(self._invocations)

    def invocations_for(self, operation: str) -> list[GitInvocation]:
        """Recorded invocations with the given operation label."""
        return [inv for inv in self._invocations if inv.operation == operation]
