"""Output sinks fed by a subprocess: the pager and shell pipes."""

from __future__ import annotations

import subprocess
import sys
import threading
from typing import List, Optional, Sequence

from .cancel import CancelToken
from .process_utils import popen_with_validation

DEFAULT_PAGER = ["less", "-X", "-r"]
RESET_COLOR = "\033[0m"


class ProcessSink:
    """Write to the stdin of a process whose output goes to the terminal.

    ``exited`` is cancelled once the process exits, so an upstream producer
    can stop as soon as nobody reads its output. The sink must be closed on
    every path; ``wait`` closes it and returns the exit status.

    Raises:
        LaunchFailure: If the process cannot be started
    """

    reset_color = False

    def __init__(self, argv: Sequence[str]):
        self.argv: List[str] = list(argv)
        self.proc = popen_with_validation(self.argv, stdin=subprocess.PIPE)
        self.exited = CancelToken()
        self.returncode: Optional[int] = None
        self._waiter = threading.Thread(target=self._wait, daemon=True)
        self._waiter.start()

    def _wait(self) -> None:
        self.returncode = self.proc.wait()
        if self.reset_color:
            # leave the terminal out of any color mode the process left behind
            sys.stdout.write(RESET_COLOR)
            sys.stdout.flush()
        self.exited.cancel()

    def write(self, data: bytes) -> int:
        return self.proc.stdin.write(data)

    def flush(self) -> None:
        self.proc.stdin.flush()

    def close(self) -> None:
        try:
            self.proc.stdin.close()
        except BrokenPipeError:
            pass

    def wait(self) -> int:
        self.close()
        self._waiter.join()
        return self.returncode

    def __enter__(self) -> "ProcessSink":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class Pager(ProcessSink):
    """The interactive pager."""

    reset_color = True

    def __init__(self, argv: Optional[Sequence[str]] = None):
        super().__init__(argv or DEFAULT_PAGER)
