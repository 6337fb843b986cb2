"""Command library: maps command names to click commands and help topics."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Sequence

import click

from .errors import ExecutionFailure, JqshError, RegistrationError, UnknownCommand

if TYPE_CHECKING:
    from .session import Session

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


class FilterCommand(click.Command):
    """A command whose positional arguments are jq filters.

    Leading arguments spelled exactly like one of the command's flags are
    options. The first other argument ends option parsing, so a filter such
    as ``-.price`` is never split into short flags.
    """

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        flags = set()
        for param in self.get_params(ctx):
            if isinstance(param, click.Option):
                flags.update(param.opts)
                flags.update(param.secondary_opts)
        i = 0
        while i < len(args) and args[i] in flags:
            i += 1
        if i < len(args) and args[i] != "--":
            args = [*args[:i], "--", *args[i:]]
        return super().parse_args(ctx, args)


class Library:
    """Registry of shell commands and static help topics.

    Names are unique across commands and topics. ``help`` is always
    registered.
    """

    def __init__(self):
        self._commands: Dict[str, click.Command] = {}
        self._topics: Dict[str, str] = {}
        self.register("help", self._help_command())

    def _taken(self, name: str) -> None:
        if name in self._commands:
            raise RegistrationError(f"{name!r} command already registered")
        if name in self._topics:
            raise RegistrationError(f"{name!r} help topic already registered")

    def register(self, name: str, command: click.Command) -> None:
        self._taken(name)
        self._commands[name] = command

    def register_topic(self, name: str, text: str) -> None:
        self._taken(name)
        self._topics[name] = text

    def commands(self) -> List[str]:
        return sorted(self._commands)

    def topics(self) -> List[str]:
        return sorted(self._topics)

    def __contains__(self, name: str) -> bool:
        return name in self._commands or name in self._topics

    def execute(self, session: "Session", name: str, args: Sequence[str] = ()) -> None:
        """Run the named command with args.

        Raises:
            UnknownCommand: If name is not a registered command
            ExecutionFailure: Wrapping any error raised by the command
        """
        command = self._commands.get(name)
        if command is None:
            raise UnknownCommand(name)
        try:
            command.main(
                args=list(args),
                prog_name=name,
                standalone_mode=False,
                obj=session,
            )
        except (JqshError, click.ClickException, OSError) as e:
            raise ExecutionFailure([name, *args], e) from e

    def _help_command(self) -> click.Command:
        @click.command("help", context_settings=CONTEXT_SETTINGS)
        @click.argument("topic", nargs=-1)
        @click.pass_obj
        def help(session, topic):
            """Browse documentation for commands and other topics.

            TOPIC is a command name or other help topic.
            """
            if len(topic) > 1:
                raise click.UsageError("at most one help topic is allowed")
            if topic:
                self._help_name(session, topic[0])
            else:
                self._help_list()

        return help

    def _help_name(self, session: "Session", name: str) -> None:
        if name in self._commands:
            self.execute(session, name, ["-h"])
            return
        if name in self._topics:
            click.echo(self._topics[name].rstrip())
            return
        raise JqshError(f"unknown topic {name!r}")

    def _help_list(self) -> None:
        names = self.commands()
        width = max(len(n) for n in names + self.topics()) + 2
        click.echo("commands:")
        for name in names:
            synopsis = self._commands[name].get_short_help_str(limit=60)
            click.echo(f"  {name.ljust(width)}{synopsis}")
        if self._topics:
            click.echo("other topics:")
            for name in self.topics():
                synopsis = self._topics[name].strip().splitlines()[0]
                click.echo(f"  {name.ljust(width)}{synopsis}")
        click.echo("for information on a topic run `help <topic>`")
