"""Output helpers for human-facing messages.

user_output goes to stderr so stdout stays clean for anything a script
might consume.
"""

import click


def user_output(message: str = "") -> None:
    click.echo(message, err=True)
