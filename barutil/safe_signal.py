"""A signal that delivers events from any thread on its owner thread."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Callable


class SafeSignal:
    """Thread-safe signal.

    Emitting on the thread that created the signal calls the slots at once.
    Emitting from any other thread queues the arguments; the owner thread
    delivers them with :meth:`process_pending` or :meth:`wait_pending`.
    """

    def __init__(self) -> None:
        self._slots: list[Callable[..., Any]] = []
        self._slots_lock = threading.Lock()
        self._cond = threading.Condition()
        self._queue: deque[tuple[Any, ...]] = deque()
        self._owner = threading.get_ident()

    def connect(self, slot: Callable[..., Any]) -> Callable[..., Any]:
        """Add ``slot`` to the callables run on each event and return it."""
        with self._slots_lock:
            self._slots.append(slot)
        return slot

    def _dispatch(self, args: tuple[Any, ...]) -> None:
        with self._slots_lock:
            slots = list(self._slots)
        for slot in slots:
            slot(*args)

    def emit(self, *args: Any) -> None:
        """Deliver ``args`` to the slots, now or via the owner thread's queue."""
        if threading.get_ident() == self._owner:
            self._dispatch(args)
            return
        with self._cond:
            self._queue.append(args)
            self._cond.notify_all()

    def __call__(self, *args: Any) -> None:
        self.emit(*args)

    def process_pending(self) -> int:
        """Deliver every queued event in order; return how many were delivered."""
        delivered = 0
        while True:
            with self._cond:
                if not self._queue:
                    return delivered
                args = self._queue.popleft()
            self._dispatch(args)
            delivered += 1

    def wait_pending(self, timeout: float | None = None) -> int:
        """Wait up to ``timeout`` for an event, then deliver all that are queued."""
        with self._cond:
            self._cond.wait_for(lambda: bool(self._queue), timeout)
        return self.process_pending()