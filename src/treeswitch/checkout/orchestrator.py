"""Branch and path checkout against a git working tree.

A branch checkout moves through these states, each logged at DEBUG:

    idle -> args-built -> process-running -> succeeded | failed
         -> cascade-running (succeeded only, when enabled) -> done

The checkout is all-or-nothing from the caller's point of view: if the
submodule cascade fails after git switched branches, the whole operation is
reported as failed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import closing

from treeswitch.auth import AUTHENTICATION_ERRORS, git_network_arguments, noninteractive_env
from treeswitch.checkout.args import build_checkout_args, build_checkout_paths_args
from treeswitch.checkout.cascade import run_submodule_cascade_if_enabled
from treeswitch.checkout.types import (
    AuthenticationError,
    CheckoutBranchResult,
    CheckoutError,
    CheckoutEvent,
    CheckoutFinished,
    CheckoutPathsResult,
    GitCommandError,
)
from treeswitch.context import TreeswitchContext
from treeswitch.gateway.git_executor.types import (
    GitInvocation,
    GitResult,
    LfsProgressEvent,
    ProcessExitedEvent,
    StatusLineEvent,
)
from treeswitch.gateway.submodules.types import SubmoduleError
from treeswitch.lock import wait_for_index_lock
from treeswitch.progress.checkout_parser import CheckoutProgressParser
from treeswitch.progress.git_progress import parse_git_progress_line
from treeswitch.progress.types import (
    CheckoutContextEvent,
    CheckoutProgressEvent,
    GitProgress,
    ProgressEvent,
)
from treeswitch.types import Branch, GitAccount, Repository

ProgressCallback = Callable[[ProgressEvent], None]

logger = logging.getLogger(__name__)


def stream_checkout_branch(
    ctx: TreeswitchContext,
    repository: Repository,
    account: GitAccount | None,
    branch: Branch,
    *,
    wants_progress: bool,
) -> Iterator[CheckoutEvent]:
    """Check out a branch, yielding progress as git reports it.

    When wants_progress is set, the stream starts with a CheckoutContextEvent
    (value 0) before git is launched, followed by CheckoutProgressEvent items
    with non-decreasing values. Every stream ends with exactly one
    CheckoutFinished carrying the overall result.

    Args:
        ctx: Context with the git executor, submodule updater and config
        repository: Working tree to switch
        account: Credentials for the remote, or None
        branch: Branch to check out
        wants_progress: Request git's progress output and emit progress events
    """
    title = f"Checking out branch {branch.name}"
    track_lfs_progress = wants_progress and ctx.global_config.lfs_progress
    parser = CheckoutProgressParser(track_lfs_progress=track_lfs_progress)

    if wants_progress:
        yield CheckoutContextEvent(title=title, target_branch=branch.name)

    args = build_checkout_args(
        branch,
        network_args=git_network_arguments(account),
        wants_progress=wants_progress,
    )
    invocation = GitInvocation(
        args=tuple(args),
        cwd=repository.path,
        operation="checkoutBranch",
        env=noninteractive_env(),
        expected_errors=AUTHENTICATION_ERRORS,
        track_lfs_progress=track_lfs_progress,
    )
    _log_state(branch, "args-built")

    if not wait_for_index_lock(repository.path, ctx.time):
        logger.debug("index.lock still held in %s, running checkout anyway", repository.path)

    _log_state(branch, "process-running")
    git_result: GitResult | None = None
    # Closing the git stream kills git if our consumer stops early
    with closing(ctx.git.stream(invocation)) as git_events:
        for event in git_events:
            if isinstance(event, ProcessExitedEvent):
                git_result = event.result
                continue
            if not wants_progress:
                continue

            progress: GitProgress | None
            if isinstance(event, StatusLineEvent):
                progress = parser.parse(event.text)
            elif isinstance(event, LfsProgressEvent):
                progress = parser.parse_lfs(event.text)
            else:
                progress = None
            if progress is not None:
                yield CheckoutProgressEvent(
                    title=title,
                    description=progress.text,
                    value=progress.value,
                    target_branch=branch.name,
                )

    if git_result is None:
        raise RuntimeError(f"git stream for {invocation.operation} ended without an exit event")

    outcome = _classify_checkout_result(git_result, branch)
    if not isinstance(outcome, CheckoutBranchResult):
        _log_state(branch, f"failed ({outcome.error_type})")
        yield CheckoutFinished(result=outcome)
        return

    _log_state(branch, "succeeded")
    if ctx.global_config.recurse_submodules:
        _log_state(branch, "cascade-running")
    cascade = run_submodule_cascade_if_enabled(ctx, repository)
    if isinstance(cascade, SubmoduleError):
        _log_state(branch, f"failed ({cascade.error_type})")
        yield CheckoutFinished(result=cascade)
        return

    _log_state(branch, "done")
    yield CheckoutFinished(result=outcome)


def checkout_branch(
    ctx: TreeswitchContext,
    repository: Repository,
    account: GitAccount | None,
    branch: Branch,
    progress_callback: ProgressCallback | None = None,
) -> CheckoutBranchResult | CheckoutError:
    """Check out the given branch.

    Args:
        ctx: Context with the git executor, submodule updater and config
        repository: Working tree in which the checkout takes place
        account: Credentials for the remote, or None
        branch: Branch to check out
        progress_callback: Optional function invoked with progress events.
            When provided this enables git's --progress flag, and the first
            call always carries a zero-value context event.

    Returns:
        CheckoutBranchResult on success, otherwise the classified error
    """
    events = stream_checkout_branch(
        ctx,
        repository,
        account,
        branch,
        wants_progress=progress_callback is not None,
    )
    with closing(events):
        for event in events:
            if isinstance(event, CheckoutFinished):
                return event.result
            if progress_callback is not None:
                progress_callback(event)
    raise RuntimeError(f"checkout of {branch.name} ended without a result")


def checkout_paths(
    ctx: TreeswitchContext, repository: Repository, paths: Sequence[str]
) -> CheckoutPathsResult | GitCommandError:
    """Check out the paths at HEAD, discarding working tree changes to them."""
    if not paths:
        return CheckoutPathsResult(paths=())

    result = ctx.git.run(
        GitInvocation(
            args=tuple(build_checkout_paths_args(paths)),
            cwd=repository.path,
            operation="checkoutPaths",
        )
    )
    if not result.succeeded:
        return GitCommandError(
            message=(
                f"Failed to restore {len(paths)} path(s) at HEAD "
                f"(exit code {result.exit_code}): {_summarize_stderr(result.stderr)}"
            ),
            exit_code=result.exit_code,
            stderr=result.stderr,
        )
    return CheckoutPathsResult(paths=tuple(paths))


def _classify_checkout_result(
    result: GitResult, branch: Branch
) -> CheckoutBranchResult | AuthenticationError | GitCommandError:
    if result.succeeded:
        return CheckoutBranchResult(branch_name=branch.name)

    if result.matched_error is not None:
        return AuthenticationError(
            message=(
                f"Authentication failed while checking out '{branch.name}': "
                f"{result.matched_error.description}"
            ),
            reason=result.matched_error.name,
            exit_code=result.exit_code,
            stderr=result.stderr,
        )

    return GitCommandError(
        message=(
            f"git checkout of '{branch.name}' failed (exit code {result.exit_code}): "
            f"{_summarize_stderr(result.stderr)}"
        ),
        exit_code=result.exit_code,
        stderr=result.stderr,
    )


def _summarize_stderr(stderr: str) -> str:
    """Pick the diagnostic lines out of stderr, skipping progress chatter."""
    lines = [line.strip() for line in stderr.splitlines() if line.strip()]
    diagnostics = [line for line in lines if parse_git_progress_line(line) is None]
    errors = [line for line in diagnostics if line.startswith(("error:", "fatal:"))]
    if errors:
        return "\n".join(errors)
    if diagnostics:
        return diagnostics[-1]
    return "no error output"


def _log_state(branch: Branch, state: str) -> None:
    logger.debug("checkoutBranch %s: %s", branch.name, state)
