"""Tests for cooperative cancellation."""
from __future__ import annotations

import os
import signal
import threading

import pytest


class TestCancellationToken:
    def test_starts_uncancelled(self) -> None:
        """A new token is not cancelled and has no reason."""
        from gitvendor.core.cascade import CancellationToken

        token = CancellationToken()

        assert token.cancelled is False
        assert token.reason == ""

    def test_cancel_records_reason(self) -> None:
        """cancel() flips the flag and keeps the reason."""
        from gitvendor.core.cascade import CancellationToken

        token = CancellationToken()
        token.cancel("deadline exceeded")

        assert token.cancelled is True
        assert token.reason == "deadline exceeded"

    def test_cancel_from_another_thread(self) -> None:
        """A token cancelled on another thread is seen here."""
        from gitvendor.core.cascade import CancellationToken

        token = CancellationToken()
        worker = threading.Thread(target=token.cancel)
        worker.start()
        worker.join()

        assert token.cancelled


@pytest.mark.skipif(os.name == "nt", reason="POSIX signals")
class TestCancelOnSigint:
    def test_first_sigint_cancels_token(self) -> None:
        """The first SIGINT cancels and the old handler comes back."""
        from gitvendor.core.cascade import CancellationToken, cancel_on_sigint

        previous = signal.getsignal(signal.SIGINT)
        with cancel_on_sigint(CancellationToken()) as token:
            os.kill(os.getpid(), signal.SIGINT)

        assert token.cancelled
        assert signal.getsignal(signal.SIGINT) is previous

    def test_second_sigint_interrupts(self) -> None:
        """A second SIGINT raises KeyboardInterrupt."""
        from gitvendor.core.cascade import CancellationToken, cancel_on_sigint

        with pytest.raises(KeyboardInterrupt):
            with cancel_on_sigint(CancellationToken()):
                os.kill(os.getpid(), signal.SIGINT)
                os.kill(os.getpid(), signal.SIGINT)

    def test_noop_off_main_thread(self) -> None:
        """Off the main thread no handler is installed."""
        from gitvendor.core.cascade import CancellationToken, cancel_on_sigint

        seen: list = []

        def _worker() -> None:
            with cancel_on_sigint(CancellationToken()) as token:
                seen.append(token)

        worker = threading.Thread(target=_worker)
        worker.start()
        worker.join()

        assert len(seen) == 1 and not seen[0].cancelled
