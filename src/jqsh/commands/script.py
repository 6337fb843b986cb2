"""Script command - turn the current filter into a shell script."""

import logging
import os
import shlex

import click

from ..library import CONTEXT_SETTINGS

logger = logging.getLogger(__name__)


def shell_escape(s: str, quote: str, escaped: str) -> str:
    """Wrap s in quote, replacing any quote inside it with escaped."""
    if not quote:
        return s
    return quote + s.replace(quote, escaped) + quote


def build_script(filter_expr: str, path=None, oneline: bool = False) -> str:
    lines = [] if oneline else ["#!/usr/bin/env sh", ""]
    argument = shlex.quote(path) if path else '"${@}"'
    lines.append(f"jq {shlex.quote(filter_expr)} {argument}")
    return "\n".join(lines) + "\n"


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option("--oneline", is_flag=True, help="Do not print a hash-bang (#!) line.")
@click.option(
    "-F",
    "use_file",
    is_flag=True,
    help="Use the current input file as the argument to jq.",
)
@click.option(
    "-o",
    "output",
    type=click.Path(dir_okay=False),
    help="Path to write an executable script.",
)
@click.pass_obj
def script(session, oneline, use_file, output):
    """Generate a shell script from the current filter."""
    path = None
    if use_file:
        path = session.input_path()
        if path is None:
            raise click.UsageError("the current input is not a file")
    text = build_script(session.stack.joined(), path=path, oneline=oneline)
    if not output:
        click.echo(text, nl=False)
        return
    with open(output, "w") as f:
        f.write(text)
    os.chmod(output, 0o755)
    logger.info("script written to %r", output)
