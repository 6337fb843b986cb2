"""Pipe and exec commands - connect the shell to other programs."""

import click

from ..library import CONTEXT_SETTINGS
from .load import finish_input

_quiet = click.option(
    "-q", "--quiet", is_flag=True, help="No implicit write after setting input."
)
_keep = click.option(
    "-k",
    "--keep",
    is_flag=True,
    help="Keep the current filter stack after setting input.",
)
_ignore = click.option(
    "--ignore", is_flag=True, help="Ignore process exit status when setting input."
)
_no_cache = click.option(
    "-c",
    "--no-cache",
    is_flag=True,
    help="Re-run the command each time the input is read.",
)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option("--in", "pipe_in", is_flag=True, help="Set filter input to the script's stdout (default).")
@click.option("--out", "pipe_out", is_flag=True, help="Write filter output to the script's stdin.")
@_quiet
@_keep
@_ignore
@_no_cache
@click.option(
    "-o",
    "produced",
    help="A json file produced by the script to use as input (deleted later).",
)
@click.option("-O", "kept", help="Like -o but the file is never deleted.")
@click.option("--color", is_flag=True, help="Allow escape codes in filter output.")
@click.argument("script")
@click.pass_obj
def pipe(session, pipe_in, pipe_out, quiet, keep, ignore, no_cache, produced, kept, color, script):
    """Run a shell script that produces input or consumes output.

    SCRIPT runs under $SHELL -c. It is invalid for both --in and --out to be
    given. -c has no effect with -o or -O.
    """
    if pipe_in and pipe_out:
        raise click.UsageError("command cannot be both input and output")
    if produced and kept:
        raise click.UsageError("both -o and -O given")
    if pipe_out:
        session.pipe_to(script, color=color)
        return
    session.capture(
        [session.config.shell, "-c", script],
        ignore=ignore,
        filename=produced or kept,
        delete=bool(produced),
        no_cache=no_cache and not (produced or kept),
    )
    finish_input(session, quiet, keep)


@click.command(
    "exec",
    context_settings=dict(
        CONTEXT_SETTINGS, ignore_unknown_options=True, allow_interspersed_args=False
    ),
)
@_quiet
@_keep
@_ignore
@_no_cache
@click.argument("argv", nargs=-1, required=True)
@click.pass_obj
def exec_(session, quiet, keep, ignore, no_cache, argv):
    """Run a program and use its output as input.

    ARGV is the program name followed by its arguments.
    """
    session.capture(list(argv), ignore=ignore, no_cache=no_cache)
    finish_input(session, quiet, keep)
