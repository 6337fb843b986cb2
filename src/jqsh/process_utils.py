"""Subprocess wrappers used by the jq runner, the pager and shell pipes.

Every child process jqsh starts goes through ``popen_with_validation`` or
``run_with_validation`` so start-up failures surface as LaunchFailure.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Sequence
from typing import Any

from .errors import LaunchFailure

CommandArg = str | os.PathLike[str]


def _normalize_command(cmd: Sequence[CommandArg]) -> list[str]:
    """Return cmd as a list of strings.

    Raises:
        LaunchFailure: If there is no program name to run
    """
    argv = [os.fspath(arg) for arg in cmd]
    if not argv or not argv[0].strip():
        raise LaunchFailure("missing program name")
    return argv


def popen_with_validation(
    cmd: Sequence[CommandArg], **kwargs: Any
) -> subprocess.Popen[Any]:
    """Run subprocess.Popen, reporting start-up failures as LaunchFailure."""
    normalized_cmd = _normalize_command(cmd)
    try:
        return subprocess.Popen(normalized_cmd, **kwargs)  # noqa: S603
    except OSError as e:
        raise LaunchFailure(f"{normalized_cmd[0]}: {e.strerror or e}") from e


def run_with_validation(
    cmd: Sequence[CommandArg], **kwargs: Any
) -> subprocess.CompletedProcess[Any]:
    """Run subprocess.run with validation to satisfy security lint checks."""
    normalized_cmd = _normalize_command(cmd)
    try:
        return subprocess.run(normalized_cmd, **kwargs)  # noqa: S603
    except OSError as e:
        raise LaunchFailure(f"{normalized_cmd[0]}: {e.strerror or e}") from e


def has_fileno(stream: Any) -> bool:
    """Return True if stream is backed by a real file descriptor."""
    try:
        stream.fileno()
    except (AttributeError, OSError, ValueError):
        return False
    return True
