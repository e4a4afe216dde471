"""Printing git executor wrapper for verbose output.

Prints each git command line before delegating to the wrapped
implementation (which could be Real or DryRun).
"""

import sys
from collections.abc import Iterator

import click

from treeswitch.gateway.git_executor.abc import GitExecutor
from treeswitch.gateway.git_executor.types import GitInvocation, GitResult, GitStreamEvent


class PrintingGitExecutor(GitExecutor):
    """Wrapper that prints git commands before delegating to inner implementation.

    Usage:
        # For production
        printing = PrintingGitExecutor(real_executor, dry_run=False)

        # For dry-run
        noop_inner = DryRunGitExecutor()
        printing = PrintingGitExecutor(noop_inner, dry_run=True)
    """

    def __init__(self, wrapped: GitExecutor, *, dry_run: bool) -> None:
        self._wrapped = wrapped
        self._dry_run = dry_run

    def stream(self, invocation: GitInvocation) -> Iterator[GitStreamEvent]:
        self._emit(self._format_command(invocation))
        yield from self._wrapped.stream(invocation)

    def run(self, invocation: GitInvocation) -> GitResult:
        self._emit(self._format_command(invocation))
        return self._wrapped.run(invocation)

    def _format_command(self, invocation: GitInvocation) -> str:
        prefix = "[dry-run] " if self._dry_run else ""
        return click.style(f"{prefix}$ {invocation.command_line}", dim=True)

    def _emit(self, message: str) -> None:
        click.echo(message, file=sys.stderr)
