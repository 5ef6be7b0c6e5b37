"""Status code validation for executed requests."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

import requests

from src.bencherror.errors import StatusCodeError

DEFAULT_WANT_STATUS_CODE: int = 200


@dataclass(frozen=True)
class ClientOption:
    """Per-call override of the status code the caller expects."""
    want_status_code: int


def resolve_want_status(opts: ClientOption | None, default: int = DEFAULT_WANT_STATUS_CODE) -> int:
    if opts is None:
        return default
    return opts.want_status_code


def check_status_code(
    request: requests.PreparedRequest,
    response: requests.Response,
    want: int,
) -> StatusCodeError | None:
    """
    Compare the observed status code against ``want``.

    Returns:
        ``None`` on match, otherwise a StatusCodeError carrying method,
        path, observed and expected codes.
    """
    if response.status_code == want:
        return None
    return StatusCodeError(
        method=request.method or "",
        path=urlsplit(request.url or "").path,
        got=response.status_code,
        want=want,
    )
