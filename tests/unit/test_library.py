"""Tests for the command library and help."""

import click
import pytest

from jqsh.commands import build_library
from jqsh.errors import (
    ExecutionFailure,
    RegistrationError,
    UnknownCommand,
    is_shell_exit,
)
from jqsh.library import Library


@click.command()
def noop():
    """Do nothing."""


def test_builtin_commands_registered():
    lib = build_library()
    for name in (
        "help",
        "push",
        "pop",
        "popall",
        "peek",
        "filter",
        "script",
        "load",
        "exec",
        "pipe",
        "write",
        "raw",
        "quit",
    ):
        assert name in lib
    assert lib.topics() == ["syntax"]


def test_duplicate_names_rejected():
    lib = Library()
    lib.register("noop", noop)
    with pytest.raises(RegistrationError):
        lib.register("noop", noop)
    with pytest.raises(RegistrationError):
        lib.register_topic("noop", "text")
    with pytest.raises(RegistrationError):
        lib.register("help", noop)


def test_unknown_command(make_session):
    session = make_session()
    with pytest.raises(UnknownCommand, match="frobnicate: unknown command"):
        session.execute("frobnicate")


def test_help_lists_commands_and_topics(make_session, capsys):
    make_session().execute("help")
    out = capsys.readouterr().out
    assert out.startswith("commands:\n")
    assert "  push" in out
    assert "Add a filter to the stack" in out
    assert "other topics:\n  syntax" in out
    assert "run `help <topic>`" in out


def test_help_for_command(make_session, capsys):
    make_session().execute("help", ["pop"])
    out = capsys.readouterr().out
    assert "Usage: pop" in out
    assert "--quiet" in out


def test_help_option(make_session, capsys):
    make_session().execute("load", ["-h"])
    assert "Usage: load" in capsys.readouterr().out


def test_help_for_topic(make_session, capsys):
    make_session().execute("help", ["syntax"])
    assert "shorthand for" in capsys.readouterr().out


def test_help_unknown_topic(make_session):
    with pytest.raises(ExecutionFailure, match="unknown topic"):
        make_session().execute("help", ["nothing"])


def test_help_single_topic_only(make_session):
    with pytest.raises(ExecutionFailure) as exc:
        make_session().execute("help", ["push", "pop"])
    assert isinstance(exc.value.cause, click.UsageError)
    assert exc.value.argv == ["help", "push", "pop"]


def test_usage_error_wrapped(make_session):
    with pytest.raises(ExecutionFailure) as exc:
        make_session().execute("pop", ["--bogus"])
    assert isinstance(exc.value.cause, click.UsageError)
    assert str(exc.value).startswith("pop: ")


def test_quit_is_shell_exit(make_session):
    with pytest.raises(ExecutionFailure) as exc:
        make_session().execute("quit")
    assert is_shell_exit(exc.value)
    assert not is_shell_exit(ExecutionFailure(["x"], ValueError("y")))
