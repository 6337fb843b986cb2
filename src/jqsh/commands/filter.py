"""Filter command - show the filter stack."""

import click

from ..library import CONTEXT_SETTINGS
from .script import shell_escape


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option("--jq", "jq_syntax", is_flag=True, help="Print the filter with jq syntax.")
@click.option(
    "--quote",
    default="",
    help="Quote and escaped quote for the --jq filter string (e.g. \"'\\'\").",
)
@click.pass_obj
def filter(session, jq_syntax, quote):
    """Print the current filter stack."""
    if jq_syntax:
        q, escaped = quote[:1], quote[1:]
        if q and not escaped:
            raise click.UsageError(f"missing escape for quote character {q!r}")
        click.echo(shell_escape(session.stack.joined(), q, escaped))
        return

    fragments = session.stack.fragments()
    if not fragments:
        click.echo("no filter", err=True)
        return
    for i, piece in enumerate(fragments):
        click.echo(f"[{i:02d}] {piece}")
