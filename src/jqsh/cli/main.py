"""jqsh CLI main entry point."""

import logging
import platform
import shlex
import signal
import sys
import threading

import click

from .. import __version__
from ..context import resolve_config, resolve_jq_option
from ..errors import JqNotFound, JqshError
from ..jq import check_jq_version, locate_jq
from ..reader import InitShellReader, ShellReader
from ..session import Session

LOG_FORMAT = "jqsh: %(message)s"

BANNER = """Welcome to jqsh!

To learn more about the environment type ":help"
"""


def configure_logging(verbose: bool = False) -> None:
    """Send jqsh log records to stderr, tagged with the program name."""
    logger = logging.getLogger("jqsh")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False


def initial_commands(files):
    """Commands replayed before reading input.

    A single file is loaded. Several files are concatenated by the shell.
    """
    if len(files) == 1:
        return [["load", files[0]]]
    if len(files) > 1:
        # uncached: the files are re-read by cat on every write
        return [["pipe", "-c", shlex.join(["cat", *files])]]
    return []


def _jq_missing() -> None:
    click.echo("Unable to locate the jq executable. Make sure it's installed.", err=True)
    click.echo("", err=True)
    if platform.system() == "Darwin":
        click.echo("The easiest way to install jq on macOS is with homebrew.", err=True)
        click.echo("", err=True)
        click.echo("\tbrew install jq", err=True)
    else:
        click.echo("See the jq homepage for download and install instructions", err=True)
        click.echo("", err=True)
        click.echo("\thttps://jqlang.github.io/jq/", err=True)


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("files", nargs=-1, type=click.Path())
@click.option("--jq", "jq_option", help="Path of the jq executable (overrides $JQSH_JQ).")
@click.option("--pager", help="Pager command (overrides $JQSH_PAGER and $PAGER).")
@click.option("--no-color", is_flag=True, help="Do not color paged output.")
@click.option("-q", "--quiet", is_flag=True, help="Do not print the welcome banner.")
@click.option("-v", "--verbose", is_flag=True, help="Log debugging information.")
@click.version_option(__version__, prog_name="jqsh", message="%(prog)s %(version)s")
def cli(files, jq_option, pager, no_color, quiet, verbose):
    """Interactive shell for exploring JSON with jq.

    With one FILE, it is loaded as input. With several, their
    concatenation is the input.

    \b
    Examples:
        jqsh data.json
        jqsh a.json b.json
        curl -s https://example.com/api | jqsh /dev/stdin
    """
    configure_logging(verbose)

    try:
        jq = locate_jq(resolve_jq_option(jq_option))
        version = check_jq_version(jq)
    except JqNotFound:
        _jq_missing()
        sys.exit(1)
    except JqshError as e:
        click.echo(f"jqsh: locating jq: {e}", err=True)
        sys.exit(1)
    logging.getLogger("jqsh").debug("using %s (%s)", jq, version.text)

    config = resolve_config(jq, pager_option=pager, no_color=no_color)
    if not quiet:
        click.echo(BANNER)

    reader = InitShellReader(
        ShellReader(sys.stdin, prompt=config.prompt, output=sys.stdout),
        initial_commands(files),
    )
    session = Session(config, reader)
    previous = signal.signal(
        signal.SIGTERM,
        lambda *_: threading.Thread(target=session.shutdown, daemon=True).start(),
    )

    try:
        session.run()
    except KeyboardInterrupt:
        sys.exit(130)
    except (OSError, ValueError) as e:
        click.echo(f"jqsh: {e}", err=True)
        sys.exit(1)
    finally:
        signal.signal(signal.SIGTERM, previous)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
