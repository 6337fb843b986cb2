"""Write commands - send output to the pager or a file."""

import click

from ..errors import NoInput
from ..library import CONTEXT_SETTINGS


@click.command(context_settings=CONTEXT_SETTINGS)
@click.argument("filename", required=False)
@click.pass_obj
def write(session, filename):
    """Write filter output to a file or the pager.

    Without FILENAME the output is paged.
    """
    session.write(filename)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.argument("filename", required=False)
@click.pass_obj
def raw(session, filename):
    """Write input to a file or the pager without applying the filter."""
    if not session.has_input():
        raise NoInput()
    if filename:
        session.copy_input_to_file(filename)
    else:
        session.page(copy=True)
