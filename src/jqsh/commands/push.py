"""Push command - add filters to the stack."""

import logging

import click

from ..errors import JqshError
from ..library import CONTEXT_SETTINGS, FilterCommand
from ..stack import FilterString

logger = logging.getLogger(__name__)


def push_filters(session, filters) -> int:
    """Push the non-empty filters and return how many were pushed."""
    pushed = 0
    for f in filters:
        if not f:
            continue
        session.stack.push(FilterString(f))
        pushed += 1
    return pushed


@click.command(cls=FilterCommand, context_settings=CONTEXT_SETTINGS)
@click.option("-q", "--quiet", is_flag=True, help="No implicit write after push.")
@click.argument("filters", nargs=-1, required=True)
@click.pass_obj
def push(session, quiet, filters):
    """Add a filter to the stack.

    Each FILTER is a jq filter (it may contain pipes '|'). The new stack is
    checked by jq before anything is written and is reverted when jq rejects
    it, or when writing the output fails.
    """
    pushed = push_filters(session, filters)
    if not pushed:
        return
    try:
        session.test_filter()
    except JqshError:
        session.stack.pop(pushed)
        raise
    if quiet:
        return
    try:
        session.write()
    except JqshError:
        logger.info("reverting push operation")
        try:
            session.stack.pop(pushed)
        except JqshError as e:
            logger.error("%s", e)
        raise
