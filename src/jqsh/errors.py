"""Error types raised by the shell, its commands and the jq wrapper."""

from __future__ import annotations

from collections.abc import Sequence


class JqshError(Exception):
    """Base class for recoverable shell errors."""


class MalformedCommand(JqshError):
    """A line of input could not be tokenized."""

    def __init__(self, message: str, final: bool = False):
        super().__init__(message)
        self.final = final


class UnknownCommand(JqshError):
    def __init__(self, name: str):
        super().__init__(f"{name}: unknown command")
        self.name = name


class StackEmpty(JqshError):
    def __init__(self):
        super().__init__("the stack is empty")


class NoInput(JqshError):
    def __init__(self):
        super().__init__("no input has been declared")


class LaunchFailure(JqshError):
    """A subprocess could not be started at all."""


class Cancelled(JqshError):
    """A subprocess was killed before it finished."""


class JqNotFound(JqshError):
    def __init__(self):
        super().__init__("jq executable not found")


class JqVersionError(JqshError):
    pass


class ShellExit(JqshError):
    """Raised by the quit command to stop the session loop."""

    def __init__(self):
        super().__init__("exit")


class ExecutionFailure(JqshError):
    """Wraps an error with the command (name and arguments) that caused it."""

    def __init__(self, argv: Sequence[str], cause: BaseException):
        super().__init__(f"{argv[0]}: {cause}")
        self.argv = list(argv)
        self.cause = cause


class RegistrationError(RuntimeError):
    """A command or help topic name was registered twice."""


def is_shell_exit(err: BaseException | None) -> bool:
    """Return True if err is, or wraps, a ShellExit."""
    while isinstance(err, ExecutionFailure):
        err = err.cause
    return isinstance(err, ShellExit)


__all__ = [
    "Cancelled",
    "ExecutionFailure",
    "JqNotFound",
    "JqVersionError",
    "JqshError",
    "LaunchFailure",
    "MalformedCommand",
    "NoInput",
    "RegistrationError",
    "ShellExit",
    "StackEmpty",
    "UnknownCommand",
    "is_shell_exit",
]
