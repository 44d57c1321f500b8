"""A looping background thread that can sleep and be woken early."""

from __future__ import annotations

import threading
import time
from typing import Callable


class SleeperThread:
    """Runs ``func`` over and over until stopped.

    ``func`` is expected to pause with :meth:`sleep_for` or :meth:`sleep_until`;
    :meth:`wake_up` and :meth:`stop` cut such a pause short.
    """

    def __init__(self, func: Callable[[], None] | None = None) -> None:
        self._cond = threading.Condition()
        self._do_run = True
        self._signal = False
        self._thread: threading.Thread | None = None
        if func is not None:
            self.start(func)

    def start(self, func: Callable[[], None]) -> None:
        """Start the loop running ``func`` on a new thread."""
        self._thread = threading.Thread(target=self._run, args=(func,), daemon=True)
        self._thread.start()

    def _run(self, func: Callable[[], None]) -> None:
        while self._do_run:
            with self._cond:
                self._signal = False
            func()

    def _woken(self) -> bool:
        return self._signal or not self._do_run

    def is_running(self) -> bool:
        """Whether the loop has not been stopped."""
        return self._do_run

    def sleep_for(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; True if woken or stopped, False on timeout."""
        with self._cond:
            return self._cond.wait_for(self._woken, max(0.0, seconds))

    def sleep_until(self, deadline: float) -> bool:
        """Sleep until the epoch time ``deadline``; same result as :meth:`sleep_for`."""
        with self._cond:
            return self._cond.wait_for(self._woken, max(0.0, deadline - time.time()))

    def wake_up(self) -> None:
        """End the current or next sleep early."""
        with self._cond:
            self._signal = True
            self._cond.notify_all()

    def stop(self) -> None:
        """Stop the loop after the current call and end any sleep."""
        with self._cond:
            self._signal = True
            self._do_run = False
            self._cond.notify_all()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the thread to end; True if it has ended."""
        if self._thread is None:
            return True
        if self._thread is not threading.current_thread():
            self._thread.join(timeout)
        return not self._thread.is_alive()

    def __enter__(self) -> SleeperThread:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
        self.join()