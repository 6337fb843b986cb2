"""Locating and running the jq executable."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
import threading
from typing import IO, Any, List, NamedTuple, Optional

from .cancel import CancelToken
from .errors import JqNotFound, JqVersionError, LaunchFailure
from .models import ExecResult, ExecStatus
from .process_utils import has_fileno, popen_with_validation, run_with_validation
from .stack import Filter, join_filter

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

JQ_VERSION_PREFIX = "jq-"
_VERSION_RE = re.compile(r"^jq(?:-| version )(\d+)\.(\d+)(.*)$")


class JqVersion(NamedTuple):
    text: str
    major: int
    minor: int
    suffix: str


def locate_jq(path: Optional[str] = None) -> str:
    """Find the jq executable.

    With no path, jq is looked up on $PATH. An explicit path must answer
    ``--version`` like jq does.

    Raises:
        JqNotFound: If jq is not on $PATH
        JqVersionError: If the explicit path does not look like jq
    """
    if not path:
        found = shutil.which("jq")
        if found is None:
            raise JqNotFound()
        return found
    proc = run_with_validation(
        [path, "--version"],
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        check=False,
    )
    if proc.returncode != 0:
        raise JqVersionError(f"{path} --version: exit status {proc.returncode}")
    if not proc.stdout.decode(errors="replace").startswith(JQ_VERSION_PREFIX):
        raise JqVersionError("executable doesn't look like jq")
    return path


def parse_jq_version(text: str) -> JqVersion:
    """Parse the output of ``jq --version``.

    Examples:
        >>> parse_jq_version("jq-1.6")
        JqVersion(text='jq-1.6', major=1, minor=6, suffix='')
        >>> parse_jq_version("jq version 1.3")
        JqVersion(text='jq version 1.3', major=1, minor=3, suffix='')
    """
    text = text.strip()
    match = _VERSION_RE.match(text)
    if match is None:
        raise JqVersionError(f"not a jq version: {text!r}")
    major, minor, suffix = match.groups()
    return JqVersion(text, int(major), int(minor), suffix)


def check_jq_version(path: Optional[str] = None) -> JqVersion:
    """Locate jq and return its parsed version."""
    path = locate_jq(path)
    proc = run_with_validation(
        [path, "--version"],
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        check=False,
    )
    return parse_jq_version(proc.stdout.decode(errors="replace"))


class CountingWriter:
    """Pass writes through to a binary stream while counting bytes."""

    def __init__(self, stream: IO[bytes]):
        self.stream = stream
        self.count = 0
        self.error: Optional[OSError] = None
        self._lock = threading.Lock()

    def write(self, data: bytes) -> int:
        n = self.stream.write(data)
        if n is None:
            n = len(data)
        if n > 0:
            with self._lock:
                self.count += n
        return n

    def flush(self) -> None:
        flush = getattr(self.stream, "flush", None)
        if flush is not None:
            flush()


def _pump(src: IO[bytes], dst: CountingWriter) -> None:
    """Copy src to dst until EOF. A failed write closes src."""
    try:
        while True:
            chunk = src.read1(CHUNK_SIZE)
            if not chunk:
                break
            dst.write(chunk)
            dst.flush()
    except OSError as e:
        dst.error = e
    finally:
        src.close()


def _feed(src: IO[bytes], dst: IO[bytes]) -> None:
    """Copy an in-memory input stream into the stdin of a process."""
    try:
        while True:
            chunk = src.read(CHUNK_SIZE)
            if not chunk:
                break
            dst.write(chunk)
    except BrokenPipeError:
        pass
    finally:
        try:
            dst.close()
        except BrokenPipeError:
            pass


def _start(target, *args: Any) -> threading.Thread:
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


def execute(
    out: IO[bytes],
    err: IO[bytes],
    stdin: Optional[IO[bytes]],
    cancel: Optional[CancelToken],
    filter: Filter | str,
    jq: str = "jq",
    color: bool = False,
) -> ExecResult:
    """Run jq with filter over stdin, streaming its output to out and err.

    The process races against cancel: if the token fires first the process is
    killed and the result status is CANCELLED. Launch failures are reported
    with status LAUNCH_FAILED rather than raised.
    """
    args: List[str] = [jq or "jq"]
    if color:
        args.append("--color-output")
    args.append(filter if isinstance(filter, str) else join_filter(filter))

    feed = stdin is not None and not has_fileno(stdin)
    if stdin is None:
        proc_stdin: Any = subprocess.DEVNULL
    elif feed:
        proc_stdin = subprocess.PIPE
    else:
        proc_stdin = stdin

    try:
        proc = popen_with_validation(
            args,
            stdin=proc_stdin,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except LaunchFailure as e:
        return ExecResult(status=ExecStatus.LAUNCH_FAILED, error=str(e))

    outw = CountingWriter(out)
    errw = CountingWriter(err)
    threads = [_start(_pump, proc.stdout, outw), _start(_pump, proc.stderr, errw)]
    if feed:
        threads.append(_start(_feed, stdin, proc.stdin))

    killed = threading.Event()

    def kill() -> None:
        killed.set()
        try:
            proc.kill()
        except OSError:
            logger.warning("unable to kill process %d", proc.pid)

    release = cancel.on_cancel(kill) if cancel is not None else (lambda: None)
    try:
        returncode = proc.wait()
    finally:
        release()
    for thread in threads:
        thread.join()

    broken = isinstance(outw.error, BrokenPipeError)
    if (killed.is_set() or broken) and returncode != 0:
        # killed, or the reader of its output went away
        status = ExecStatus.CANCELLED
    elif returncode != 0:
        status = ExecStatus.EXITED
    else:
        status = ExecStatus.SUCCESS

    error = None if broken else outw.error
    return ExecResult(
        bytes_out=outw.count,
        bytes_err=errw.count,
        status=status,
        returncode=returncode,
        error=str(error) if error is not None else None,
    )
