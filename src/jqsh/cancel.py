"""Cancellation signals shared between the session loop and subprocesses."""

from __future__ import annotations

import threading
from typing import Callable, List, Optional


class CancelToken:
    """A one-shot cancellation signal.

    Callbacks registered with ``on_cancel`` run exactly once, either when the
    token is cancelled or immediately if it already was. Child tokens are
    cancelled with their parent but can also be cancelled on their own.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._callbacks: List[Callable[[], None]] = []
        self._detach: Optional[Callable[[], None]] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for fn in callbacks:
            fn()

    def on_cancel(self, fn: Callable[[], None]) -> Callable[[], None]:
        """Register fn and return a function that unregisters it."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(fn)
                return lambda: self._discard(fn)
        fn()
        return lambda: None

    def _discard(self, fn: Callable[[], None]) -> None:
        with self._lock:
            if fn in self._callbacks:
                self._callbacks.remove(fn)

    def child(self) -> "CancelToken":
        token = CancelToken()
        token._detach = self.on_cancel(token.cancel)
        return token

    def detach(self) -> None:
        """Stop following the parent token (no-op for root tokens)."""
        if self._detach is not None:
            self._detach()
            self._detach = None

    def wait(self, timeout: float | None = None) -> bool:
        return self._event.wait(timeout)
