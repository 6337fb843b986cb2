"""The shell session: filter stack, current input and the command loop."""

from __future__ import annotations

import io
import logging
import os
import queue
import subprocess
import sys
import tempfile
import threading
from dataclasses import dataclass
from typing import IO, List, Optional, Sequence

from .cancel import CancelToken
from .context import ShellConfig
from .errors import (
    Cancelled,
    ExecutionFailure,
    JqshError,
    LaunchFailure,
    MalformedCommand,
    NoInput,
    is_shell_exit,
)
from .jq import execute
from .library import Library
from .models import ExecResult, ExecStatus
from .process_utils import popen_with_validation
from .reader import Command
from .sinks import Pager, ProcessSink
from .source import FileInput, InputSource, Producer, ProducerInput, command_producer
from .stack import Filter, FilterStack

logger = logging.getLogger(__name__)

TEMP_PREFIX = "jqsh-exec-"


@dataclass
class _Read:
    """A command (or read failure) delivered by the reader thread."""

    command: Optional[Command]
    final: bool
    error: Optional[BaseException] = None


class _Shutdown:
    pass


class Session:
    """One running shell.

    The session owns its filter stack and input source. Commands are
    executed strictly one at a time by ``run``; only ``shutdown`` may be
    called from another thread.
    """

    def __init__(
        self,
        config: ShellConfig,
        reader=None,
        library: Optional[Library] = None,
        stderr: Optional[IO[bytes]] = None,
    ):
        if library is None:
            from .commands import build_library

            library = build_library()
        self.config = config
        self.reader = reader
        self.library = library
        self.stack = FilterStack()
        self.input: Optional[InputSource] = None
        self.stderr = stderr if stderr is not None else sys.stderr.buffer
        self.cancel = CancelToken()
        self.alive = True
        self._mailbox: "queue.Queue[_Read | _Shutdown]" = queue.Queue()

    # input source management

    def set_input_source(self, source: Optional[InputSource]) -> None:
        old, self.input = self.input, source
        if old is not None and old is not source:
            old.release()

    def set_input_file(self, path: str, temporary: bool = False) -> None:
        self.set_input_source(FileInput(path, temporary))

    def set_input(self, producer: Producer) -> None:
        self.set_input_source(ProducerInput(producer))

    def has_input(self) -> bool:
        return self.input is not None

    def open_input(self) -> IO[bytes]:
        if self.input is None:
            raise NoInput()
        return self.input.open()

    def input_path(self) -> Optional[str]:
        if isinstance(self.input, FileInput):
            return self.input.path
        return None

    # commands

    def execute(self, name: str, args: Sequence[str] = ()) -> None:
        self.library.execute(self, name, args)

    def test_filter(self, filter: Optional[Filter] = None) -> None:
        """Check that jq accepts the filter (default: the whole stack).

        jq runs over empty input and is killed after
        ``config.filter_timeout`` seconds.
        """
        cancel = self.cancel.child()
        timer = threading.Timer(self.config.filter_timeout, cancel.cancel)
        timer.daemon = True
        timer.start()
        errbuf = io.BytesIO()
        try:
            result = execute(
                io.BytesIO(),
                errbuf,
                None,
                cancel,
                filter if filter is not None else self.stack,
                jq=self.config.jq,
            )
        finally:
            timer.cancel()
            cancel.detach()
        if result.status is ExecStatus.CANCELLED:
            raise Cancelled("jq timed out processing the filter")
        if result.status is ExecStatus.LAUNCH_FAILED:
            raise LaunchFailure(result.error)
        if not result.ok:
            message = errbuf.getvalue().decode(errors="replace").strip()
            raise JqshError(f"{message} ({result.describe()})")

    def write_to(
        self,
        sink: IO[bytes],
        color: bool = False,
        cancel: Optional[CancelToken] = None,
    ) -> ExecResult:
        """Apply the filter stack to the input, streaming output to sink.

        With no input declared a warning is logged and nothing is written.

        Raises:
            ExecutionFailure: If jq could not start or exited nonzero
        """
        if self.input is None:
            logger.warning("%s", NoInput())
            return ExecResult()
        with self.open_input() as stdin:
            result = execute(
                sink,
                self.stderr,
                stdin,
                cancel if cancel is not None else self.cancel,
                self.stack,
                jq=self.config.jq,
                color=color,
            )
        if result.status is ExecStatus.LAUNCH_FAILED:
            raise ExecutionFailure(["jq"], LaunchFailure(result.error))
        if result.status is ExecStatus.EXITED:
            raise ExecutionFailure(["jq"], JqshError(result.describe()))
        if result.error:
            raise ExecutionFailure(["jq"], JqshError(result.error))
        if result.status is ExecStatus.CANCELLED:
            logger.debug("jq: %s", result.describe())
        return result

    def page(self, copy: bool = False) -> None:
        """Send filtered output (or the raw input when copy is set) to the pager.

        Pager failures are logged, not raised. When the pager cannot be
        started the output goes to stdout instead.
        """
        try:
            pager = Pager(self.config.pager)
        except LaunchFailure as e:
            logger.error("pager: %s", e)
            self._write_stdout(copy)
            return
        cancel = self.cancel.child()
        pager.exited.on_cancel(cancel.cancel)
        try:
            if copy:
                self._copy_input(pager)
            else:
                self.write_to(pager, color=self.config.color, cancel=cancel)
        finally:
            cancel.detach()
            code = pager.wait()
            if code:
                logger.error("pager: exit status %d", code)

    def _write_stdout(self, copy: bool) -> None:
        out = sys.stdout.buffer
        if copy:
            self._copy_input(out)
        else:
            self.write_to(out)
        out.flush()

    def write_file(self, filename: str) -> ExecResult:
        with open(filename, "wb") as f:
            result = self.write_to(f, color=False)
        logger.info("%d bytes written to %r", result.bytes_out, filename)
        return result

    def write(self, filename: Optional[str] = None) -> None:
        if filename:
            self.write_file(filename)
        else:
            self.page()

    def copy_input_to_file(self, filename: str) -> int:
        with open(filename, "wb") as f:
            n = self._copy_input(f)
        logger.info("%d bytes written to %r", n, filename)
        return n

    def _copy_input(self, sink: IO[bytes]) -> int:
        n = 0
        with self.open_input() as src:
            try:
                while True:
                    chunk = src.read(64 * 1024)
                    if not chunk:
                        break
                    sink.write(chunk)
                    n += len(chunk)
            except BrokenPipeError:
                logger.debug("broken pipe")
        return n

    def pipe_to(self, script: str, color: bool = False) -> None:
        """Feed filtered output into a shell script's stdin."""
        if self.input is None:
            logger.warning("%s", NoInput())
        argv = [self.config.shell, "-c", script]
        sink = ProcessSink(argv)
        try:
            self.write_to(sink, color=color)
        finally:
            code = sink.wait()
        if code:
            raise ExecutionFailure(argv, JqshError(f"exit status {code}"))

    def capture(
        self,
        argv: List[str],
        *,
        ignore: bool = False,
        filename: Optional[str] = None,
        delete: bool = False,
        no_cache: bool = False,
    ) -> None:
        """Make the output of argv the session input.

        By default stdout is captured to a temporary file. With filename, the
        command is expected to produce that file itself. With no_cache, the
        command is re-run each time the input is read.
        """
        if no_cache:
            self.set_input(command_producer(argv))
            return

        if filename:
            path, temporary, out = filename, delete, None
        else:
            fd, path = tempfile.mkstemp(prefix=TEMP_PREFIX)
            temporary = True
            out = os.fdopen(fd, "wb")
        try:
            code = self._run(argv, stdout=out)
        except JqshError:
            if out is not None:
                out.close()
                os.remove(path)
            raise
        if out is not None:
            out.close()
        if code != 0 and not ignore:
            if out is not None:
                os.remove(path)
            raise ExecutionFailure(argv, JqshError(f"exit status {code}"))
        self.set_input_file(path, temporary)

    def _run(self, argv: List[str], stdout: Optional[IO[bytes]]) -> int:
        proc = popen_with_validation(argv, stdin=subprocess.DEVNULL, stdout=stdout)
        release = self.cancel.on_cancel(proc.kill)
        try:
            code = proc.wait()
        finally:
            release()
        if self.cancel.cancelled:
            raise Cancelled(f"{argv[0]}: killed")
        return code

    # the loop

    def shutdown(self) -> None:
        """Stop the loop and cancel any running subprocess."""
        self._mailbox.put(_Shutdown())
        self.cancel.cancel()

    def _request(self) -> None:
        threading.Thread(target=self._read, daemon=True).start()

    def _read(self) -> None:
        try:
            command, final = self.reader.read_command()
        except MalformedCommand as e:
            self._mailbox.put(_Read(None, e.final, e))
        except (OSError, ValueError) as e:
            self._mailbox.put(_Read(None, True, e))
        else:
            self._mailbox.put(_Read(command, final))

    def run(self) -> None:
        """Read and execute commands until quit, end of input or shutdown.

        Raises:
            OSError, ValueError: If input cannot be read at all
        """
        try:
            self._loop()
        finally:
            self.alive = False
            self.cancel.cancel()
            if self.input is not None:
                self.input.release()

    def _loop(self) -> None:
        self._request()
        while True:
            event = self._mailbox.get()
            if isinstance(event, _Shutdown):
                return
            if isinstance(event.error, MalformedCommand):
                logger.error("%s", event.error)
            elif event.error is not None:
                raise event.error
            elif event.command is not None:
                try:
                    self.execute(event.command.name, event.command.args)
                except JqshError as e:
                    if is_shell_exit(e):
                        return
                    logger.error("%s", e)
            if event.final or self.cancel.cancelled:
                return
            self._request()
