"""Input sources: the data the filter stack is applied to."""

from __future__ import annotations

import logging
import os
import subprocess
import threading
from dataclasses import dataclass, field
from typing import IO, Callable, List, Union

from .process_utils import popen_with_validation

logger = logging.getLogger(__name__)

Producer = Callable[[], IO[bytes]]


@dataclass
class FileInput:
    """A file on disk, deleted on release when it is temporary."""

    path: str
    temporary: bool = False
    released: bool = field(default=False, repr=False)

    def open(self) -> IO[bytes]:
        logger.debug("open %s", self.path)
        return open(self.path, "rb")

    def release(self) -> None:
        if self.released:
            return
        self.released = True
        if not self.temporary:
            return
        try:
            os.remove(self.path)
        except OSError as e:
            # not a critical error
            logger.warning("removing temporary file %s: %s", self.path, e)
        else:
            logger.debug("removed temporary file %s", self.path)


@dataclass
class ProducerInput:
    """A function producing a fresh input stream each time it is opened."""

    producer: Producer
    released: bool = field(default=False, repr=False)

    def open(self) -> IO[bytes]:
        return self.producer()

    def release(self) -> None:
        self.released = True


InputSource = Union[FileInput, ProducerInput]


def command_producer(argv: List[str]) -> Producer:
    """Return a producer that runs argv and streams its stdout.

    The process is reaped in the background and its exit status logged.
    """
    name = argv[0]

    def produce() -> IO[bytes]:
        proc = popen_with_validation(argv, stdout=subprocess.PIPE)

        def reap() -> None:
            code = proc.wait()
            logger.info("%s: exit status %d", name, code)

        threading.Thread(target=reap, daemon=True).start()
        return proc.stdout

    return produce
