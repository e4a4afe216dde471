"""Tests for branch and path checkout orchestration."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from treeswitch.auth import AUTHENTICATION_ERRORS
from treeswitch.checkout.orchestrator import (
    checkout_branch,
    checkout_paths,
    stream_checkout_branch,
)
from treeswitch.checkout.types import (
    AuthenticationError,
    CheckoutBranchResult,
    CheckoutError,
    CheckoutFinished,
    CheckoutPathsResult,
    GitCommandError,
)
from treeswitch.config import GlobalConfig
from treeswitch.context import TreeswitchContext
from treeswitch.gateway.git_executor.fake import FakeGitExecutor, FakeGitOutcome
from treeswitch.gateway.git_executor.types import (
    GitInvocation,
    GitStreamEvent,
    LfsProgressEvent,
    StatusLineEvent,
)
from treeswitch.gateway.submodules.fake import FakeSubmoduleUpdater
from treeswitch.gateway.submodules.types import SubmoduleError
from treeswitch.gateway.time.fake import FakeTime
from treeswitch.progress.types import CheckoutContextEvent, CheckoutProgressEvent, ProgressEvent
from treeswitch.types import Branch, GitAccount, Repository

REPO = Repository(path=Path("/work/app"), name="app")
ACCOUNT = GitAccount(login="octocat", endpoint="https://github.com/")

CHECKOUT_OUTPUT = (
    StatusLineEvent("Checking out files:  25% (1/4)"),
    StatusLineEvent("Checking out files:  50% (2/4)"),
    StatusLineEvent("Checking out files: 100% (4/4), done."),
    StatusLineEvent("Switched to branch 'main'"),
)


def _collect(
    ctx: TreeswitchContext, branch: Branch, account: GitAccount | None = None
) -> tuple[CheckoutBranchResult | CheckoutError, list[ProgressEvent]]:
    events: list[ProgressEvent] = []
    result = checkout_branch(ctx, REPO, account, branch, progress_callback=events.append)
    return result, events


class TestCheckoutBranchSuccess:
    """Tests for successful branch checkouts."""

    def test_returns_result_with_branch_name(self) -> None:
        ctx = TreeswitchContext.for_test()
        result = checkout_branch(ctx, REPO, None, Branch.local("main"))
        assert result == CheckoutBranchResult(branch_name="main")

    def test_first_event_is_zero_value_context(self) -> None:
        git = FakeGitExecutor(outcomes={"checkoutBranch": FakeGitOutcome(output=CHECKOUT_OUTPUT)})
        ctx = TreeswitchContext.for_test(git=git)

        _, events = _collect(ctx, Branch.local("main"))

        assert events[0] == CheckoutContextEvent(
            title="Checking out branch main", target_branch="main"
        )
        assert events[0].value == 0.0

    def test_progress_events_follow_git_output(self) -> None:
        git = FakeGitExecutor(outcomes={"checkoutBranch": FakeGitOutcome(output=CHECKOUT_OUTPUT)})
        ctx = TreeswitchContext.for_test(
            git=git, global_config=GlobalConfig.test(lfs_progress=False)
        )

        _, events = _collect(ctx, Branch.local("main"))

        progress = events[1:]
        assert all(isinstance(event, CheckoutProgressEvent) for event in progress)
        assert [event.value for event in progress] == [0.25, 0.5, 1.0]
        assert progress[0].title == "Checking out branch main"
        assert progress[0].description == "Checking out files:  25% (1/4)"
        assert all(event.target_branch == "main" for event in progress)
        assert all(event.kind == "checkout" for event in progress)

    def test_values_never_decrease(self) -> None:
        output = (
            StatusLineEvent("Checking out files:  60% (3/5)"),
            StatusLineEvent("Checking out files:  20% (1/5)"),
            LfsProgressEvent("download 1/2 50/100 a.bin"),
            StatusLineEvent("Checking out files: 100% (5/5), done."),
        )
        git = FakeGitExecutor(outcomes={"checkoutBranch": FakeGitOutcome(output=output)})
        ctx = TreeswitchContext.for_test(git=git)

        _, events = _collect(ctx, Branch.local("main"))

        values = [event.value for event in events]
        assert values == sorted(values)
        assert values[-1] == 1.0
        assert all(0.0 <= value <= 1.0 for value in values)

    def test_unrecognized_lines_do_not_emit(self) -> None:
        output = (
            StatusLineEvent("Your branch is up to date with 'origin/main'."),
            StatusLineEvent("Switched to branch 'main'"),
        )
        git = FakeGitExecutor(outcomes={"checkoutBranch": FakeGitOutcome(output=output)})
        ctx = TreeswitchContext.for_test(git=git)

        _, events = _collect(ctx, Branch.local("main"))

        assert len(events) == 1
        assert isinstance(events[0], CheckoutContextEvent)

    def test_remote_branch_result_uses_full_name(self) -> None:
        ctx = TreeswitchContext.for_test()
        result = checkout_branch(ctx, REPO, None, Branch.remote("origin/feature/x"))
        assert result == CheckoutBranchResult(branch_name="origin/feature/x")


class TestCheckoutBranchInvocation:
    """Tests for the git invocation a branch checkout issues."""

    def test_progress_flag_only_with_callback(self) -> None:
        git = FakeGitExecutor()
        ctx = TreeswitchContext.for_test(git=git)

        checkout_branch(ctx, REPO, None, Branch.local("main"))
        checkout_branch(ctx, REPO, None, Branch.local("main"), progress_callback=lambda e: None)

        without, with_progress = git.invocations_for("checkoutBranch")
        assert "--progress" not in without.args
        assert "--progress" in with_progress.args

    def test_args_env_and_expected_errors(self) -> None:
        git = FakeGitExecutor()
        ctx = TreeswitchContext.for_test(git=git)

        checkout_branch(ctx, REPO, ACCOUNT, Branch.local("main"))

        (invocation,) = git.invocations
        assert invocation.args == (
            "-c",
            "credential.https://github.com.username=octocat",
            "checkout",
            "main",
            "--",
        )
        assert invocation.cwd == REPO.path
        assert invocation.env == {"GIT_TERMINAL_PROMPT": "0"}
        assert invocation.expected_errors == AUTHENTICATION_ERRORS

    def test_without_account_keeps_credential_helpers(self) -> None:
        git = FakeGitExecutor()
        ctx = TreeswitchContext.for_test(git=git)

        checkout_branch(ctx, REPO, None, Branch.local("main"))

        (invocation,) = git.invocations
        assert invocation.args == ("checkout", "main", "--")
        assert not any(arg.startswith("credential.") for arg in invocation.args)

    def test_remote_branch_creates_local_branch(self) -> None:
        git = FakeGitExecutor()
        ctx = TreeswitchContext.for_test(git=git)

        checkout_branch(ctx, REPO, None, Branch.remote("origin/feature"))

        (invocation,) = git.invocations
        assert invocation.args[-4:] == ("origin/feature", "-b", "feature", "--")

    def test_lfs_tracking_requires_progress_and_config(self) -> None:
        git = FakeGitExecutor()
        enabled = TreeswitchContext.for_test(git=git)
        disabled = TreeswitchContext.for_test(
            git=git, global_config=GlobalConfig.test(lfs_progress=False)
        )

        checkout_branch(enabled, REPO, None, Branch.local("main"))
        checkout_branch(enabled, REPO, None, Branch.local("main"), progress_callback=lambda e: None)
        checkout_branch(
            disabled, REPO, None, Branch.local("main"), progress_callback=lambda e: None
        )

        tracked = [inv.track_lfs_progress for inv in git.invocations]
        assert tracked == [False, True, False]

    def test_waits_for_index_lock(self, tmp_path: Path) -> None:
        git_dir = tmp_path / ".git"
        git_dir.mkdir()
        (git_dir / "index.lock").touch()
        time = FakeTime()
        ctx = TreeswitchContext.for_test(time=time)

        result = checkout_branch(ctx, Repository.at(tmp_path), None, Branch.local("main"))

        assert isinstance(result, CheckoutBranchResult)
        assert len(time.sleep_calls) == 10


class TestCheckoutBranchFailure:
    """Tests for failed branch checkouts."""

    def test_ssh_permission_denied_is_authentication_error(self) -> None:
        stderr = "git@github.com: Permission denied (publickey).\nfatal: Could not read from remote"
        git = FakeGitExecutor(
            outcomes={"checkoutBranch": FakeGitOutcome.failure(exit_code=128, stderr=stderr)}
        )
        ctx = TreeswitchContext.for_test(git=git)

        result = checkout_branch(ctx, REPO, None, Branch.local("main"))

        assert isinstance(result, AuthenticationError)
        assert result.reason == "ssh-permission-denied"
        assert result.exit_code == 128
        assert result.error_type == "authentication-failed"
        assert "main" in result.message

    def test_https_authentication_failure(self) -> None:
        stderr = "fatal: Authentication failed for 'https://github.com/o/r.git/'"
        git = FakeGitExecutor(
            outcomes={"checkoutBranch": FakeGitOutcome.failure(exit_code=128, stderr=stderr)}
        )
        ctx = TreeswitchContext.for_test(git=git)

        result = checkout_branch(ctx, REPO, ACCOUNT, Branch.local("main"))

        assert isinstance(result, AuthenticationError)
        assert result.reason == "https-authentication-failed"

    def test_other_failure_is_git_command_error(self) -> None:
        stderr = (
            "error: Your local changes to the following files would be overwritten by checkout:\n"
            "\tREADME.md\n"
            "Aborting\n"
        )
        git = FakeGitExecutor(
            outcomes={"checkoutBranch": FakeGitOutcome.failure(exit_code=1, stderr=stderr)}
        )
        ctx = TreeswitchContext.for_test(git=git)

        result = checkout_branch(ctx, REPO, None, Branch.local("main"))

        assert isinstance(result, GitCommandError)
        assert result.exit_code == 1
        assert result.stderr == stderr
        assert "would be overwritten by checkout" in result.message

    def test_failure_message_skips_progress_lines(self) -> None:
        stderr = (
            "Checking out files:  50% (2/4)\n"
            "fatal: unable to write new index file\n"
        )
        git = FakeGitExecutor(
            outcomes={"checkoutBranch": FakeGitOutcome.failure(exit_code=128, stderr=stderr)}
        )
        ctx = TreeswitchContext.for_test(git=git)

        result = checkout_branch(ctx, REPO, None, Branch.local("main"))

        assert isinstance(result, GitCommandError)
        assert "fatal: unable to write new index file" in result.message
        assert "Checking out files" not in result.message

    def test_failed_checkout_skips_cascade(self) -> None:
        git = FakeGitExecutor(
            outcomes={"checkoutBranch": FakeGitOutcome.failure(exit_code=1, stderr="error: x")}
        )
        submodules = FakeSubmoduleUpdater()
        ctx = TreeswitchContext.for_test(
            git=git,
            submodules=submodules,
            global_config=GlobalConfig.test(recurse_submodules=True),
        )

        checkout_branch(ctx, REPO, None, Branch.local("main"))

        assert submodules.updated_roots == []


class TestCheckoutBranchCascade:
    """Tests for the submodule cascade after a checkout."""

    def test_cascade_disabled_never_touches_submodules(self) -> None:
        submodules = FakeSubmoduleUpdater()
        ctx = TreeswitchContext.for_test(submodules=submodules)

        result = checkout_branch(ctx, REPO, None, Branch.local("main"))

        assert isinstance(result, CheckoutBranchResult)
        assert submodules.updated_roots == []

    def test_cascade_enabled_updates_submodules(self) -> None:
        submodules = FakeSubmoduleUpdater()
        ctx = TreeswitchContext.for_test(
            submodules=submodules, global_config=GlobalConfig.test(recurse_submodules=True)
        )

        result = checkout_branch(ctx, REPO, None, Branch.local("main"))

        assert result == CheckoutBranchResult(branch_name="main")
        assert submodules.updated_roots == [REPO.path]

    def test_cascade_failure_fails_checkout(self) -> None:
        error = SubmoduleError(
            message="Failed to update submodules", exit_code=1, stderr="fatal: no url"
        )
        ctx = TreeswitchContext.for_test(
            submodules=FakeSubmoduleUpdater(error=error),
            global_config=GlobalConfig.test(recurse_submodules=True),
        )

        result = checkout_branch(ctx, REPO, None, Branch.local("main"))

        assert result == error


class TestStreamCheckoutBranch:
    """Tests for the event stream form of a branch checkout."""

    def test_stream_ends_with_single_finished_event(self) -> None:
        git = FakeGitExecutor(outcomes={"checkoutBranch": FakeGitOutcome(output=CHECKOUT_OUTPUT)})
        ctx = TreeswitchContext.for_test(git=git)

        events = list(
            stream_checkout_branch(ctx, REPO, None, Branch.local("main"), wants_progress=True)
        )

        finished = [event for event in events if isinstance(event, CheckoutFinished)]
        assert len(finished) == 1
        assert events[-1] == CheckoutFinished(result=CheckoutBranchResult(branch_name="main"))

    def test_stream_without_progress_yields_only_result(self) -> None:
        git = FakeGitExecutor(outcomes={"checkoutBranch": FakeGitOutcome(output=CHECKOUT_OUTPUT)})
        ctx = TreeswitchContext.for_test(git=git)

        events = list(
            stream_checkout_branch(ctx, REPO, None, Branch.local("main"), wants_progress=False)
        )

        assert events == [CheckoutFinished(result=CheckoutBranchResult(branch_name="main"))]


class TestCheckoutPaths:
    """Tests for checkout_paths()."""

    def test_restores_paths_at_head(self) -> None:
        git = FakeGitExecutor()
        ctx = TreeswitchContext.for_test(git=git)

        result = checkout_paths(ctx, REPO, ["a.txt", "dir/b.txt"])

        assert result == CheckoutPathsResult(paths=("a.txt", "dir/b.txt"))
        (invocation,) = git.invocations_for("checkoutPaths")
        assert invocation.args == ("checkout", "HEAD", "--", "a.txt", "dir/b.txt")
        assert invocation.cwd == REPO.path

    def test_empty_paths_is_noop(self) -> None:
        git = FakeGitExecutor()
        ctx = TreeswitchContext.for_test(git=git)

        result = checkout_paths(ctx, REPO, [])

        assert result == CheckoutPathsResult(paths=())
        assert git.invocations == []

    @pytest.mark.parametrize("exit_code", [1, 128])
    def test_failure_is_git_command_error(self, exit_code: int) -> None:
        stderr = "error: pathspec 'missing.txt' did not match any file(s) known to git"
        git = FakeGitExecutor(
            outcomes={"checkoutPaths": FakeGitOutcome.failure(exit_code=exit_code, stderr=stderr)}
        )
        ctx = TreeswitchContext.for_test(git=git)

        result = checkout_paths(ctx, REPO, ["missing.txt"])

        assert isinstance(result, GitCommandError)
        assert result.exit_code == exit_code
        assert "pathspec 'missing.txt'" in result.message


class _ClosableGitExecutor(FakeGitExecutor):
    """FakeGitExecutor whose streams record whether they were closed early."""

    def __init__(self, *, outcomes: dict[str, FakeGitOutcome]) -> None:
        super().__init__(outcomes=outcomes)
        self.closed_streams = 0

    def stream(self, invocation: GitInvocation) -> Iterator[GitStreamEvent]:
        try:
            yield from super().stream(invocation)
        except GeneratorExit:
            self.closed_streams += 1
            raise


class TestStreamCleanup:
    """Tests that an abandoned checkout stops the git stream."""

    def test_callback_error_closes_git_stream(self) -> None:
        git = _ClosableGitExecutor(
            outcomes={"checkoutBranch": FakeGitOutcome(output=CHECKOUT_OUTPUT)}
        )
        ctx = TreeswitchContext.for_test(git=git)
        delivered: list[ProgressEvent] = []

        def fail_on_progress(event: ProgressEvent) -> None:
            delivered.append(event)
            if isinstance(event, CheckoutProgressEvent):
                raise RuntimeError("display went away")

        with pytest.raises(RuntimeError, match="display went away"):
            checkout_branch(ctx, REPO, None, Branch.local("main"), fail_on_progress)

        assert git.closed_streams == 1
        assert len(delivered) == 2

    def test_closing_checkout_stream_closes_git_stream(self) -> None:
        git = _ClosableGitExecutor(
            outcomes={"checkoutBranch": FakeGitOutcome(output=CHECKOUT_OUTPUT)}
        )
        ctx = TreeswitchContext.for_test(git=git)

        events = stream_checkout_branch(ctx, REPO, None, Branch.local("main"), wants_progress=True)
        next(events)
        next(events)
        events.close()

        assert git.closed_streams == 1
