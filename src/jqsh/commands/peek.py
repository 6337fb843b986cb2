"""Peek command - apply filters without keeping them."""

import click

from ..errors import JqshError
from ..library import CONTEXT_SETTINGS, FilterCommand
from .push import push_filters


@click.command(cls=FilterCommand, context_settings=CONTEXT_SETTINGS)
@click.argument("filters", nargs=-1)
@click.pass_obj
def peek(session, filters):
    """Apply filters without pushing them on the stack.

    Each FILTER is a jq filter (it may contain pipes '|').
    """
    pushed = push_filters(session, filters)
    try:
        session.test_filter()
        session.write()
    except JqshError as e:
        raise JqshError(f"invalid filter: {e}") from e
    finally:
        if pushed:
            session.stack.pop(pushed)
