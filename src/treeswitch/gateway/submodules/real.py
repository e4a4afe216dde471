"""Production implementation of submodule synchronization via the git executor."""

from pathlib import Path

from treeswitch.auth import noninteractive_env
from treeswitch.gateway.git_executor.abc import GitExecutor
from treeswitch.gateway.git_executor.types import GitInvocation
from treeswitch.gateway.submodules.abc import SubmoduleUpdater
from treeswitch.gateway.submodules.types import SubmoduleError, SubmodulesUpdated


class RealSubmoduleUpdater(SubmoduleUpdater):
    """Runs `git submodule update --init --recursive`."""

    def __init__(self, git: GitExecutor) -> None:
        self._git = git

    def init_and_update(self, repo_root: Path) -> SubmodulesUpdated | SubmoduleError:
        result = self._git.run(
            GitInvocation(
                args=("submodule", "update", "--init", "--recursive"),
                cwd=repo_root,
                operation="updateSubmodules",
                env=noninteractive_env(),
            )
        )
        if not result.succeeded:
            return SubmoduleError(
                message=f"Failed to update submodules in {repo_root}: {result.stderr.strip()}",
                exit_code=result.exit_code,
                stderr=result.stderr,
            )
        return SubmodulesUpdated()
