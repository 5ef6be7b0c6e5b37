"""
Authenticated transport for one simulated user.

A Session owns one ``requests.Session``: its cookie jar carries whatever
authentication state earlier calls (login) accumulated.  Sends run on a
private worker thread so a cancelled RunContext releases the caller
promptly even while the socket is still blocked.

Design notes:
- No automatic retry anywhere; a failed send is reported once.
- Redirects are not followed; the status validator sees the 3xx.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout

import requests

from src.bencherror.errors import DeadlineExceeded

from .config import TargetConfig
from .context import RunContext

logger = logging.getLogger(__name__)

# How often a pending send re-checks its context
CANCEL_POLL_SECONDS: float = 0.05


def _close_response(future: Future) -> None:
    if future.cancelled() or future.exception() is not None:
        return
    future.result().close()


def _raise_if_ended(ctx: RunContext, cause: BaseException, deadline_bound: bool) -> None:
    """Raise the context's end in place of ``cause`` once the context is over."""
    err = ctx.error()
    if err is None and deadline_bound and isinstance(cause, (requests.Timeout, TimeoutError)):
        err = DeadlineExceeded("context deadline exceeded")
    if err is not None:
        raise err from cause


class Session:
    """Builds and sends requests carrying this user's authentication state."""

    def __init__(self, timeout: float, user_agent: str | None = None) -> None:
        if timeout <= 0:
            raise ValueError(f"session timeout must be positive, got {timeout!r}")
        self.timeout = timeout
        self.http = requests.Session()
        if user_agent:
            self.http.headers["User-Agent"] = user_agent
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="isutrain-session")

    @classmethod
    def for_target(cls, target: TargetConfig) -> Session:
        return cls(timeout=target.request_timeout, user_agent=target.user_agent)

    @classmethod
    def for_initialize(cls, target: TargetConfig) -> Session:
        """Session bounded by the shorter initialize timeout."""
        return cls(timeout=target.initialize_timeout, user_agent=target.user_agent)

    def new_request(
        self,
        ctx: RunContext,
        method: str,
        url: str,
        body: bytes | None = None,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.PreparedRequest:
        """
        Build a request with the session's cookies and default headers.

        Raises:
            ContextDone: ``ctx`` already ended.
            requests.RequestException: The URL is invalid.
            ValueError: The body or parameters cannot be encoded.
        """
        ctx.raise_if_done()
        request = requests.Request(method, url, data=body, params=params, headers=headers)
        return self.http.prepare_request(request)

    def do(
        self,
        ctx: RunContext,
        request: requests.PreparedRequest,
        timeout: float | None = None,
    ) -> requests.Response:
        """
        Send ``request`` and wait for the full response.

        The effective timeout is ``timeout`` (default: the session timeout),
        shortened to whatever remains of the context deadline.  A send that
        fails after the context ended reports the context's end, not the
        transport failure; a timeout that was set by the deadline counts as
        the deadline passing.

        Raises:
            ContextDone: ``ctx`` ended before the response arrived.
            requests.RequestException: Connection, timeout, or TLS failure.
        """
        ctx.raise_if_done()
        if timeout is None:
            timeout = self.timeout
        remaining = ctx.remaining()
        deadline_bound = remaining is not None and remaining <= timeout
        if remaining is not None:
            timeout = max(min(timeout, remaining), 0.001)

        logger.debug("%s %s (timeout=%.2fs)", request.method, request.url, timeout)
        future = self._executor.submit(
            self.http.send, request, timeout=timeout, allow_redirects=False
        )
        while True:
            try:
                return future.result(timeout=CANCEL_POLL_SECONDS)
            except FutureTimeout as exc:
                if future.done():
                    _raise_if_ended(ctx, exc, deadline_bound)
                    raise
                err = ctx.error()
                if err is not None:
                    future.cancel()
                    future.add_done_callback(_close_response)
                    raise err from None
            except (requests.RequestException, OSError) as exc:
                _raise_if_ended(ctx, exc, deadline_bound)
                raise

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
        self.http.close()

    def __enter__(self) -> Session:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
