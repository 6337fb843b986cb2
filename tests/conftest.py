"""Pytest configuration and shared fixtures."""

import io
import json
import logging
import shutil
import stat
from pathlib import Path

import pytest
from click.testing import CliRunner

from jqsh.cli import cli
from jqsh.context import ShellConfig
from jqsh.session import Session


@pytest.fixture(autouse=True)
def reset_jqsh_logger():
    """Undo CLI logging setup so caplog sees jqsh records in every test.

    The CLI attaches its own stderr handler to the ``jqsh`` logger and stops
    propagation, which would hide records from caplog in later tests.
    """
    logger = logging.getLogger("jqsh")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def cli_runner():
    """Provide Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(cli_runner):
    """Helper to invoke the CLI with args and optional input.

    Usage:
        result = invoke(["--version"])
        result = invoke(["--jq", jq, "data.json"], input_data=":quit\\n")
    """

    def _invoke(args, input_data=None, env=None):
        return cli_runner.invoke(cli, args, input=input_data, env=env)

    return _invoke


@pytest.fixture
def make_script(tmp_path):
    """Create an executable shell script in tmp_path and return its path."""

    def _make(name: str, body: str) -> str:
        path = tmp_path / name
        path.write_text("#!/bin/sh\n" + body + "\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(path)

    return _make


@pytest.fixture
def fake_jq(make_script):
    """A stand-in for jq that answers --version and echoes its input."""
    return make_script(
        "fake-jq",
        'if [ "$1" = "--version" ]; then echo "jq-1.6"; exit 0; fi\nexec cat',
    )


@pytest.fixture
def jq_bin():
    """Path of the real jq executable (skips the test when missing)."""
    path = shutil.which("jq")
    if path is None:
        pytest.skip("jq not available")
    return path


@pytest.fixture
def make_session():
    """Build a Session with test-friendly defaults."""

    def _make(reader=None, library=None, **config):
        config.setdefault("pager", ["cat"])
        config.setdefault("shell", "/bin/sh")
        config.setdefault("color", False)
        return Session(
            ShellConfig(**config),
            reader=reader,
            library=library,
            stderr=io.BytesIO(),
        )

    return _make


@pytest.fixture
def sample_data():
    return {
        "items": [
            {"name": "Alice", "age": 30},
            {"name": "Bob", "age": 25},
        ]
    }


@pytest.fixture
def data_json(tmp_path, sample_data) -> Path:
    """Write sample JSON data to a file."""
    path = tmp_path / "data.json"
    path.write_text(json.dumps(sample_data))
    return path
