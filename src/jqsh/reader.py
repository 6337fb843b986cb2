"""Line reader: turns lines of interactive input into shell commands."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import IO, List, Optional, Sequence, Tuple

from .errors import MalformedCommand

SYNTAX_DOCS = """Topic syntax describes the shell syntax.

Lines prefixed with a colon ':' are commands, other lines are shorthand for
specific commands.

    :<cmd> <arg1> <arg2> ...    execute cmd with the given arguments
    :<cmd> ... +<argN>          execute cmd with an argument containing spaces (argN)
    :<cmd> 'arg 1' "arg 2"      quoted arguments, backslash escapes the quote
    (blank line)                shorthand for ":write"
    .                           shorthand for ":write"
    ..                          shorthand for ":pop"
    ?<filter>                   shorthand for ":peek +<filter>"
    <filter>                    shorthand for ":push +<filter>"

Note that "." is a valid jq filter but pushing it on the filter stack lacks
semantic value. So "." alone on a line is used as a shorthand for ":write".
"""

QUOTES = "'\""
ESCAPE = "\\"
SLURP = "+"


@dataclass
class Command:
    """A parsed command name and its arguments."""

    name: str
    args: List[str] = field(default_factory=list)

    @property
    def argv(self) -> List[str]:
        return [self.name, *self.args]


def parse_line(line: str) -> Command:
    """Parse one line of input into a Command.

    Raises:
        MalformedCommand: If an explicit command cannot be tokenized
    """
    line = line.strip()
    if not line or line == ".":
        return Command("write")
    if line == "..":
        return Command("pop")
    if line.startswith("?"):
        return Command("peek", [line[1:]])
    if not line.startswith(":"):
        return Command("push", [line])

    words = tokenize(line[1:])
    if not words:
        return Command("write")
    return Command(words[0], words[1:])


def tokenize(text: str) -> List[str]:
    """Split an explicit command into words.

    Examples:
        >>> tokenize("push .items .[]")
        ['push', '.items', '.[]']
        >>> tokenize("push +.items | .[]")
        ['push', '.items | .[]']
        >>> tokenize("write 'my file.json'")
        ['write', 'my file.json']
    """
    words: List[str] = []
    i, n = 0, len(text)
    while True:
        while i < n and text[i].isspace():
            i += 1
        if i >= n:
            return words
        c = text[i]
        if c == SLURP:
            words.append(text[i + 1 :])
            return words
        if c in QUOTES:
            word, i = _quoted(text, i)
        else:
            start = i
            while i < n and not text[i].isspace():
                i += 1
            word = text[start:i]
        words.append(word)


def _quoted(text: str, i: int) -> Tuple[str, int]:
    quote = text[i]
    i += 1
    buf: List[str] = []
    n = len(text)
    while i < n:
        c = text[i]
        if c == ESCAPE:
            if i + 1 >= n:
                raise MalformedCommand("unexpected end of input following escape")
            nxt = text[i + 1]
            if nxt == quote or nxt == ESCAPE:
                buf.append(nxt)
            else:
                buf.append(c + nxt)
            i += 2
            continue
        if c == quote:
            i += 1
            if i < n and not text[i].isspace():
                raise MalformedCommand(
                    f"string not followed by space or end of input {text[i]!r}"
                )
            return "".join(buf), i
        buf.append(c)
        i += 1
    raise MalformedCommand(f"unterminated string (missing {quote})")


class ShellReader:
    """Read commands from a line-oriented stream, printing a prompt first."""

    def __init__(
        self,
        stream: Optional[IO[str]] = None,
        prompt: str = "> ",
        output: Optional[IO[str]] = None,
    ):
        self.stream = stream if stream is not None else sys.stdin
        self.prompt = prompt
        self.output = output if output is not None else sys.stdout

    def _print(self, text: str) -> None:
        if self.output is not None:
            self.output.write(text)
            self.output.flush()

    def read_command(self) -> Tuple[Optional[Command], bool]:
        """Read the next command.

        Returns a (command, final) pair. When final is True the stream is
        exhausted and read_command must not be called again. The command is
        None when the stream ended without any text to process.

        Raises:
            MalformedCommand: If the line cannot be tokenized; its ``final``
                attribute reports whether the stream is exhausted.
        """
        self._print(self.prompt)
        line = self.stream.readline()
        final = not line.endswith("\n")
        if final:
            self._print("\n")
            if not line.strip():
                return None, True
        try:
            return parse_line(line), final
        except MalformedCommand as e:
            e.final = final
            raise


class InitShellReader:
    """Replay a fixed list of commands before reading from another reader."""

    def __init__(self, reader: ShellReader, init: Sequence[Sequence[str]] = ()):
        self.reader = reader
        self.init = [list(argv) for argv in init]

    def read_command(self) -> Tuple[Optional[Command], bool]:
        if self.init:
            argv = self.init.pop(0)
            return Command(argv[0], argv[1:]), False
        return self.reader.read_command()
