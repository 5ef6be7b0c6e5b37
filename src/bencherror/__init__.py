"""
src/bencherror: Failure classification for the isutrain benchmark client.

Module layout
-------------
errors.py: Tier enum, ClassifiedError hierarchy, classify(), context
            termination and status-mismatch exceptions
sinks.py: ErrorAggregator, per-tier append-only sinks shared by workers

Public interface
----------------
Classify a raw failure at the call site:
    classify(cause, template, *args, tier=Tier.BENCHMARK, context={...})

Collect and inspect failures after a run:
    errors = ErrorAggregator()
    errors.deposit(err.tier, err)
    errors.counts()
    errors.has_fatal()
"""

from .errors import (
    FATAL_TIERS,
    ClassifiedError,
    ClientCancelled,
    ClientSetupError,
    ContextDone,
    DeadlineExceeded,
    RequestCancelled,
    RequestConstructionError,
    ResponseDecodeError,
    StatusCodeError,
    StatusCodeMismatchError,
    Tier,
    TrainSeatsNotFound,
    TransportError,
    classify,
)
from .sinks import ErrorAggregator

__all__ = [
    # Tiers
    "Tier",
    "FATAL_TIERS",
    # Classification
    "classify",
    "ClassifiedError",
    "ClientSetupError",
    "RequestConstructionError",
    "TransportError",
    "StatusCodeMismatchError",
    "ResponseDecodeError",
    "ClientCancelled",
    # Non-classified outcomes
    "StatusCodeError",
    "TrainSeatsNotFound",
    "ContextDone",
    "RequestCancelled",
    "DeadlineExceeded",
    # Sinks
    "ErrorAggregator",
]
