import logging

import click

from treeswitch.cli.commands.checkout_cmd import checkout_cmd
from treeswitch.cli.commands.restore_cmd import restore_cmd
from treeswitch.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="treeswitch")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--dry-run", is_flag=True, help="Print git commands instead of running them")
@click.option("--verbose", "-v", is_flag=True, help="Print git commands as they run")
@click.pass_context
def cli(ctx: click.Context, debug: bool, dry_run: bool, verbose: bool) -> None:
    """Switch git working trees between branches."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(dry_run=dry_run, verbose=verbose)


cli.add_command(checkout_cmd)
cli.add_command(restore_cmd)


def main() -> None:
    cli()
