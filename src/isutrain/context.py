"""
Cancellable run context with optional deadline.

The benchmark supervisor owns the root context.  Each simulated user gets a
child; cancelling a context cancels every descendant, so one call to
``cancel()`` on the root aborts all in-flight requests of the run.
"""

from __future__ import annotations

import threading
import time

from src.bencherror.errors import ContextDone, DeadlineExceeded, RequestCancelled


class RunContext:
    """Cancellation and deadline scope propagated through every client call."""

    def __init__(self, parent: RunContext | None = None, timeout: float | None = None) -> None:
        self._parent = parent
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._children: list[RunContext] = []
        self._cancelled_explicitly = False

        deadline = None if timeout is None else time.monotonic() + timeout
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self._deadline = deadline

        if parent is not None:
            parent._attach(self)

    @classmethod
    def background(cls) -> RunContext:
        """Root context: never cancelled unless ``cancel()`` is called."""
        return cls()

    def with_cancel(self) -> RunContext:
        return RunContext(parent=self)

    def with_timeout(self, seconds: float) -> RunContext:
        return RunContext(parent=self, timeout=seconds)

    @property
    def deadline(self) -> float | None:
        """Absolute ``time.monotonic()`` deadline, or ``None``."""
        return self._deadline

    def _attach(self, child: RunContext) -> None:
        with self._lock:
            cancelled = self._event.is_set()
            if not cancelled:
                self._children.append(child)
        if cancelled:
            child.cancel()

    def cancel(self) -> None:
        """Cancel this context and all of its descendants. Idempotent."""
        with self._lock:
            if self._event.is_set():
                return
            self._cancelled_explicitly = True
            self._event.set()
            children, self._children = self._children, []
        for child in children:
            child.cancel()

    def remaining(self) -> float | None:
        """Seconds until the deadline (may be negative), or ``None``."""
        if self._deadline is None:
            return None
        return self._deadline - time.monotonic()

    def done(self) -> bool:
        if self._event.is_set():
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def error(self) -> ContextDone | None:
        """The reason the context ended, or ``None`` while it is live."""
        if self._event.is_set() and self._cancelled_explicitly:
            return RequestCancelled("context cancelled")
        if self.done():
            return DeadlineExceeded("context deadline exceeded")
        return None

    def raise_if_done(self) -> None:
        err = self.error()
        if err is not None:
            raise err

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the context ends or ``timeout`` elapses; return ``done()``."""
        remaining = self.remaining()
        if remaining is not None:
            timeout = remaining if timeout is None else min(timeout, remaining)
        if timeout is None or timeout > 0:
            self._event.wait(timeout)
        return self.done()
