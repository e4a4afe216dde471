"""Checkout command - switch a working tree to a branch."""

from pathlib import Path

import click
from rich.console import Console

from treeswitch.checkout.orchestrator import checkout_branch
from treeswitch.cli.ensure_ideal import EnsureIdeal
from treeswitch.cli.progress_display import CheckoutProgressDisplay
from treeswitch.context import TreeswitchContext
from treeswitch.output import user_output
from treeswitch.types import Branch, GitAccount, Repository


def _resolve_account(login: str | None, endpoint: str | None) -> GitAccount | None:
    if login is None and endpoint is None:
        return None
    if login is None or endpoint is None:
        raise click.UsageError("--login and --endpoint must be given together")
    return GitAccount(login=login, endpoint=endpoint)


def _resolve_branch(branch_name: str, remote: bool) -> Branch:
    if not remote:
        return Branch.local(branch_name)
    try:
        return Branch.remote(branch_name)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="BRANCH") from e


@click.command("checkout")
@click.argument("branch_name", metavar="BRANCH")
@click.option(
    "--repo",
    "repo_path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Working tree to switch",
)
@click.option(
    "--remote",
    is_flag=True,
    help="BRANCH is a remote-tracking branch (e.g. origin/feature); create a local branch for it",
)
@click.option("--no-progress", is_flag=True, help="Do not request or render progress")
@click.option("--login", help="Username credential helpers should use for the remote")
@click.option("--endpoint", help="Remote URL the login applies to (e.g. https://github.com)")
@click.pass_obj
def checkout_cmd(
    ctx: TreeswitchContext,
    branch_name: str,
    repo_path: Path,
    remote: bool,
    no_progress: bool,
    login: str | None,
    endpoint: str | None,
) -> None:
    """Switch the working tree to BRANCH."""
    repository = Repository.at(repo_path.resolve())
    branch = _resolve_branch(branch_name, remote)
    account = _resolve_account(login, endpoint)

    if no_progress:
        result = checkout_branch(ctx, repository, account, branch)
    else:
        with CheckoutProgressDisplay(Console(stderr=True)) as display:
            result = checkout_branch(
                ctx, repository, account, branch, progress_callback=display.update
            )

    checked_out = EnsureIdeal.ideal_state(result)
    target = branch.name_without_remote if remote else checked_out.branch_name
    user_output(click.style("✓ ", fg="green") + f"Switched {repository.name} to '{target}'")
