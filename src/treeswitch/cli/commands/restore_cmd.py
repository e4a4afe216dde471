"""Restore command - discard working tree changes to paths."""

from pathlib import Path

import click

from treeswitch.checkout.orchestrator import checkout_paths
from treeswitch.cli.ensure_ideal import EnsureIdeal
from treeswitch.context import TreeswitchContext
from treeswitch.output import user_output
from treeswitch.types import Repository


@click.command("restore")
@click.argument("paths", nargs=-1, required=True)
@click.option(
    "--repo",
    "repo_path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Working tree containing the paths",
)
@click.pass_obj
def restore_cmd(ctx: TreeswitchContext, paths: tuple[str, ...], repo_path: Path) -> None:
    """Restore PATHS to their state at HEAD."""
    repository = Repository.at(repo_path.resolve())
    restored = EnsureIdeal.ideal_state(checkout_paths(ctx, repository, list(paths)))
    user_output(click.style("✓ ", fg="green") + f"Restored {len(restored.paths)} path(s)")
