"""Cooperative cancellation for cascade walks."""
from __future__ import annotations

import signal
import threading
from contextlib import contextmanager
from typing import Iterator


class CancellationToken:
    """Thread-safe flag checked at the top of each project iteration.

    A project that already started always runs its phases to completion.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason = ""

    def cancel(self, reason: str = "cancelled") -> None:
        self.reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@contextmanager
def cancel_on_sigint(token: CancellationToken) -> Iterator[CancellationToken]:
    """Route the first Ctrl+C to ``token``; a second one interrupts as usual."""
    if threading.current_thread() is not threading.main_thread():
        yield token
        return

    previous = signal.getsignal(signal.SIGINT)

    def _handler(signum, frame):  # type: ignore[no-untyped-def]
        if token.cancelled:
            signal.signal(signal.SIGINT, previous)
            raise KeyboardInterrupt
        token.cancel("cancelled")

    signal.signal(signal.SIGINT, _handler)
    try:
        yield token
    finally:
        signal.signal(signal.SIGINT, previous)


__all__ = ["CancellationToken", "cancel_on_sigint"]
