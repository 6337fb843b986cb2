"""Load command - read input from a file."""

import click

from ..library import CONTEXT_SETTINGS


def finish_input(session, quiet: bool, keep: bool) -> None:
    """Reset the stack (unless keep) and write, unless quiet, after new input."""
    if not keep:
        session.stack.pop_all()
    if not quiet:
        session.write()


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option(
    "-q", "--quiet", is_flag=True, help="No implicit write after setting input."
)
@click.option(
    "-k",
    "--keep",
    is_flag=True,
    help="Keep the current filter stack after setting input.",
)
@click.argument(
    "filename", type=click.Path(exists=True, dir_okay=False, readable=True)
)
@click.pass_obj
def load(session, quiet, keep, filename):
    """Set the input to the contents of a file.

    FILENAME is a file containing json data.
    """
    session.set_input_file(filename)
    finish_input(session, quiet, keep)
