"""Dependency container passed to every checkout operation."""

from __future__ import annotations

from dataclasses import dataclass

from treeswitch.config import GlobalConfig, default_config_dir, load_global_config
from treeswitch.gateway.git_executor.abc import GitExecutor
from treeswitch.gateway.git_executor.dry_run import DryRunGitExecutor
from treeswitch.gateway.git_executor.fake import FakeGitExecutor
from treeswitch.gateway.git_executor.printing import PrintingGitExecutor
from treeswitch.gateway.git_executor.real import RealGitExecutor
from treeswitch.gateway.submodules.abc import SubmoduleUpdater
from treeswitch.gateway.submodules.fake import FakeSubmoduleUpdater
from treeswitch.gateway.submodules.real import RealSubmoduleUpdater
from treeswitch.gateway.time.abc import Time
from treeswitch.gateway.time.fake import FakeTime
from treeswitch.gateway.time.real import RealTime


@dataclass(frozen=True)
class TreeswitchContext:
    """Immutable context holding all dependencies for checkout operations.

    Created once at the CLI entry point and threaded through the core.
    Tests build one with `TreeswitchContext.for_test()`.
    """

    git: GitExecutor
    submodules: SubmoduleUpdater
    time: Time
    global_config: GlobalConfig
    dry_run: bool

    @staticmethod
    def for_test(
        *,
        git: GitExecutor | None = None,
        submodules: SubmoduleUpdater | None = None,
        time: Time | None = None,
        global_config: GlobalConfig | None = None,
        dry_run: bool = False,
    ) -> TreeswitchContext:
        """Create a context wired with fakes, overriding any given dependency."""
        return TreeswitchContext(
            git=git if git is not None else FakeGitExecutor(),
            submodules=submodules if submodules is not None else FakeSubmoduleUpdater(),
            time=time if time is not None else FakeTime(),
            global_config=global_config if global_config is not None else GlobalConfig.test(),
            dry_run=dry_run,
        )


def create_context(*, dry_run: bool, verbose: bool) -> TreeswitchContext:
    """Create production context with real implementations.

    Dry-run mode swaps git execution for a no-op; verbose and dry-run modes
    print each git command before it would run.
    """
    global_config = load_global_config(default_config_dir())
    time = RealTime()

    git: GitExecutor
    if dry_run:
        git = DryRunGitExecutor()
    else:
        git = RealGitExecutor(
            git_executable=global_config.git_executable,
            timeout_seconds=global_config.git_timeout_seconds,
            time=time,
        )
    if dry_run or verbose:
        git = PrintingGitExecutor(git, dry_run=dry_run)

    return TreeswitchContext(
        git=git,
        submodules=RealSubmoduleUpdater(git),
        time=time,
        global_config=global_config,
        dry_run=dry_run,
    )
