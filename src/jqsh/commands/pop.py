"""Pop commands - remove filters from the stack."""

import click

from ..library import CONTEXT_SETTINGS


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option("-q", "--quiet", is_flag=True, help="No implicit write after pop.")
@click.argument("n", type=int, default=1, required=False)
@click.pass_obj
def pop(session, quiet, n):
    """Remove the last filter(s) pushed on the stack.

    N is the number of filters to pop (default 1). Popping more filters than
    the stack holds empties it.
    """
    if n < 0:
        raise click.UsageError("argument must be positive")
    session.stack.pop(n)
    if not quiet:
        session.write()


@click.command(context_settings=CONTEXT_SETTINGS)
@click.pass_obj
def popall(session):
    """Remove all filters from the stack."""
    session.stack.pop_all()
