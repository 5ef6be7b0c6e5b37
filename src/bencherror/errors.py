"""
Failure tiers, classified errors, and the error classifier.

Every failure the client raises is a :class:`ClassifiedError` carrying
exactly one :class:`Tier`.  The tier decides what the harness does with it:

  CRITICAL   : client or target configuration unusable; abort the run now
  INITIALIZE : POST /initialize failed; abort before any scenario runs
  PRETEST    : static assets not servable; abort before load starts
  BENCHMARK  : request/status/decode failure under load; scored penalty
  APPLICATION: logic-level problem or clean shutdown; reported only

No I/O occurs here; :func:`classify` only builds values.
"""

from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Any, Mapping


class Tier(str, enum.Enum):
    """Severity tier of a classified failure."""

    CRITICAL = "critical"
    INITIALIZE = "initialize"
    PRETEST = "pretest"
    BENCHMARK = "benchmark"
    APPLICATION = "application"

    @property
    def is_fatal(self) -> bool:
        """True when any error of this tier fails the whole run."""
        return self in FATAL_TIERS


FATAL_TIERS: frozenset[Tier] = frozenset({Tier.CRITICAL, Tier.INITIALIZE, Tier.PRETEST})


# ---------------------------------------------------------------------------
# Run context termination
# ---------------------------------------------------------------------------

class ContextDone(Exception):
    """The run context ended before the operation completed."""


class RequestCancelled(ContextDone):
    """The run context, or one of its ancestors, was cancelled."""


class DeadlineExceeded(ContextDone):
    """The run context deadline passed."""


# ---------------------------------------------------------------------------
# Status validation descriptor
# ---------------------------------------------------------------------------

class StatusCodeError(Exception):
    """The observed status code did not match the expected one."""

    def __init__(self, method: str, path: str, got: int, want: int) -> None:
        super().__init__(f"{method} {path}: got={got}, want={want}")
        self.method = method
        self.path = path
        self.got = got
        self.want = want


class TrainSeatsNotFound(Exception):
    """
    Seat listing came back 404/400: there are no seats for the query.

    This is an expected business outcome, not a service defect, so it is
    intentionally not a ClassifiedError and cannot be deposited in a sink.
    """

    def __init__(self, path: str, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(f"GET {path}: no seats found")
        self.path = path
        self.context = MappingProxyType(dict(context or {}))


# ---------------------------------------------------------------------------
# Classified errors
# ---------------------------------------------------------------------------

def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


class ClassifiedError(Exception):
    """
    A failure wrapped with its tier, message, and call-site context.

    Frozen once constructed: every attribute write other than the
    interpreter-managed dunders (``__cause__``, ``__traceback__``, ...)
    raises AttributeError, and the context is an immutable mapping.  The
    wrapped cause is also chained as ``__cause__``.
    """

    def __init__(
        self,
        cause: BaseException | None,
        template: str,
        *args: Any,
        tier: Tier,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        message = template % args if args else template
        super().__init__(message)
        self._cause = cause
        self._template = template
        self._message = message
        self._tier = Tier(tier)
        self._context = MappingProxyType({k: str(v) for k, v in (context or {}).items()})
        self.__cause__ = cause
        self._frozen = True

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, "_frozen", False) and not _is_dunder(name):
            raise AttributeError(f"{type(self).__name__} is immutable; cannot set {name!r}")
        super().__setattr__(name, value)

    def __delattr__(self, name: str) -> None:
        if getattr(self, "_frozen", False) and not _is_dunder(name):
            raise AttributeError(f"{type(self).__name__} is immutable; cannot delete {name!r}")
        super().__delattr__(name)

    @property
    def cause(self) -> BaseException | None:
        return self._cause

    @property
    def template(self) -> str:
        return self._template

    @property
    def message(self) -> str:
        return self._message

    @property
    def tier(self) -> Tier:
        return self._tier

    @property
    def context(self) -> Mapping[str, str]:
        return self._context

    def __str__(self) -> str:
        if self._cause is None:
            return self._message
        return f"{self._message}: {self._cause}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(tier={self._tier.value!r}, "
            f"message={self._message!r}, context={dict(self._context)!r})"
        )


class ClientSetupError(ClassifiedError):
    """The client or its session could not be constructed."""


class RequestConstructionError(ClassifiedError):
    """The request could not be built (bad URL, unserializable body)."""


class TransportError(ClassifiedError):
    """Network-level failure: refused, timed out, TLS, reset."""


class StatusCodeMismatchError(ClassifiedError):
    """Response status differed from the expected status code."""

    @property
    def got(self) -> int:
        return self.cause.got

    @property
    def want(self) -> int:
        return self.cause.want


class ResponseDecodeError(ClassifiedError):
    """The response body was not JSON or did not have the expected shape."""


class ClientCancelled(ClassifiedError):
    """The ambient run context ended while the call was pending."""


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------

_KIND_TO_CLASS: dict[str, type[ClassifiedError]] = {
    "setup": ClientSetupError,
    "request": RequestConstructionError,
    "transport": TransportError,
    "status": StatusCodeMismatchError,
    "decode": ResponseDecodeError,
}


def classify(
    cause: BaseException | None,
    template: str,
    *args: Any,
    tier: Tier,
    kind: str = "transport",
    context: Mapping[str, Any] | None = None,
) -> ClassifiedError:
    """
    Wrap a raw failure into a ClassifiedError of the right kind and tier.

    Ending the run context is a clean shutdown rather than a defect: a
    :class:`ContextDone` cause always yields :class:`ClientCancelled` at
    APPLICATION tier, whatever ``tier`` was requested.  A
    :class:`StatusCodeError` cause always yields
    :class:`StatusCodeMismatchError`.

    Args:
        cause: The underlying exception, or ``None``.
        template: ``%``-style message template.
        *args: Values interpolated into ``template``.
        tier: Tier hint for the failure site.
        kind: ``'setup'``, ``'request'``, ``'transport'``, ``'status'`` or
              ``'decode'``.
        context: Call-site parameters kept for post-run diagnosis.

    Returns:
        The constructed ClassifiedError (not raised).

    Raises:
        ValueError: If ``kind`` is not recognized.
    """
    if isinstance(cause, ContextDone):
        return ClientCancelled(cause, template, *args, tier=Tier.APPLICATION, context=context)

    if isinstance(cause, StatusCodeError):
        kind = "status"

    try:
        cls = _KIND_TO_CLASS[kind]
    except KeyError:
        raise ValueError(f"Unknown error kind '{kind}'.") from None

    return cls(cause, template, *args, tier=tier, context=context)
