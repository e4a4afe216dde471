"""Command-line construction for git checkout."""

from collections.abc import Sequence

from treeswitch.types import Branch, BranchType


def build_checkout_args(
    branch: Branch,
    *,
    network_args: Sequence[str],
    wants_progress: bool,
) -> list[str]:
    """Build the git arguments that switch the working tree to a branch.

    Checking out a remote-tracking branch creates a local branch tracking it
    in the same step. The trailing "--" keeps git from reading the branch
    name as a path.

    Args:
        branch: Branch to check out
        network_args: Arguments required by the account context, placed first
        wants_progress: Ask git for a machine-parseable progress stream

    Returns:
        Arguments to pass after the git executable
    """
    args = [*network_args, "checkout"]
    if wants_progress:
        args.append("--progress")

    if branch.type is BranchType.REMOTE:
        args.extend([branch.name, "-b", branch.name_without_remote, "--"])
    else:
        args.extend([branch.name, "--"])
    return args


def build_checkout_paths_args(paths: Sequence[str]) -> list[str]:
    """Build the git arguments that restore paths from HEAD."""
    return ["checkout", "HEAD", "--", *paths]
