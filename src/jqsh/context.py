"""Shell configuration resolved from CLI options and the environment."""

import os
import shlex
from dataclasses import dataclass, field
from typing import List, Optional

from .sinks import DEFAULT_PAGER

DEFAULT_PROMPT = "> "
DEFAULT_FILTER_TIMEOUT = 10.0


@dataclass(frozen=True)
class ShellConfig:
    """Settings shared by every command of a session."""

    jq: str = "jq"
    pager: List[str] = field(default_factory=lambda: list(DEFAULT_PAGER))
    shell: str = "bash"
    color: bool = True
    prompt: str = DEFAULT_PROMPT
    filter_timeout: float = DEFAULT_FILTER_TIMEOUT


def resolve_pager(pager_option: Optional[str] = None) -> List[str]:
    """Resolve the pager command line.

    Resolution order:
    1. --pager CLI flag
    2. $JQSH_PAGER environment variable
    3. $PAGER environment variable
    4. less -X -r
    """
    for value in (
        pager_option,
        os.environ.get("JQSH_PAGER"),
        os.environ.get("PAGER"),
    ):
        if value and value.strip():
            return shlex.split(value)
    return list(DEFAULT_PAGER)


def resolve_config(
    jq: str,
    pager_option: Optional[str] = None,
    no_color: bool = False,
) -> ShellConfig:
    """Build the session configuration.

    Reads fresh from environment each time.

    Args:
        jq: Path of the located jq executable
        pager_option: Value of --pager CLI option if provided
        no_color: Value of --no-color CLI flag

    Returns:
        ShellConfig for the session
    """
    color = not no_color and not os.environ.get("NO_COLOR")
    timeout = os.environ.get("JQSH_FILTER_TIMEOUT")
    return ShellConfig(
        jq=jq,
        pager=resolve_pager(pager_option),
        shell=os.environ.get("SHELL") or "bash",
        color=color,
        filter_timeout=float(timeout) if timeout else DEFAULT_FILTER_TIMEOUT,
    )


def resolve_jq_option(jq_option: Optional[str] = None) -> Optional[str]:
    """Return the explicit jq path from --jq or $JQSH_JQ, if any."""
    return jq_option or os.environ.get("JQSH_JQ") or None
