"""Quit command."""

import click

from ..errors import ShellExit
from ..library import CONTEXT_SETTINGS


@click.command(context_settings=CONTEXT_SETTINGS)
def quit():
    """Exit jqsh."""
    raise ShellExit()
