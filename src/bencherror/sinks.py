"""
Tiered error sinks shared by every simulated user in a run.

One append-only sequence per :class:`Tier`.  Workers deposit the
ClassifiedErrors their calls raise; the harness reads the sinks after the
run to decide pass/fail and to render the report.
"""

from __future__ import annotations

import json
import threading

import pandas as pd

from .errors import FATAL_TIERS, ClassifiedError, Tier

ERROR_FRAME_COLUMNS: list[str] = ["tier", "error_type", "message", "context"]


class ErrorAggregator:
    """Thread-safe, per-tier append-only collection of classified errors."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sinks: dict[Tier, list[ClassifiedError]] = {tier: [] for tier in Tier}
        self._deposited: set[int] = set()

    def deposit(self, tier: Tier, error: ClassifiedError) -> None:
        """
        Append ``error`` to the sink for ``tier``.

        Raises:
            TypeError: If ``error`` is not a ClassifiedError.
            ValueError: If the error's own tier differs from ``tier``, or the
                        same error object was already deposited.
        """
        if not isinstance(error, ClassifiedError):
            raise TypeError(f"only classified errors can be deposited, got {type(error).__name__}")
        tier = Tier(tier)
        if error.tier is not tier:
            raise ValueError(
                f"{error.tier.value} error cannot be deposited into the {tier.value} sink"
            )
        with self._lock:
            if id(error) in self._deposited:
                raise ValueError(f"error already deposited: {error!r}")
            self._deposited.add(id(error))
            self._sinks[tier].append(error)

    def add(self, error: ClassifiedError) -> None:
        """Deposit ``error`` into the sink matching its own tier."""
        self.deposit(error.tier, error)

    def errors(self, tier: Tier) -> tuple[ClassifiedError, ...]:
        with self._lock:
            return tuple(self._sinks[Tier(tier)])

    def messages(self, tier: Tier) -> list[str]:
        return [str(err) for err in self.errors(tier)]

    def count(self, tier: Tier) -> int:
        with self._lock:
            return len(self._sinks[Tier(tier)])

    def counts(self) -> dict[str, int]:
        """Error count per tier, keyed by tier value, every tier present."""
        with self._lock:
            return {tier.value: len(errs) for tier, errs in self._sinks.items()}

    def total(self) -> int:
        return sum(self.counts().values())

    def has_fatal(self) -> bool:
        """True if any Critical, Initialize or PreTest error was deposited."""
        with self._lock:
            return any(self._sinks[tier] for tier in FATAL_TIERS)

    def to_frame(self) -> pd.DataFrame:
        """One row per deposited error, ordered by tier then deposit order."""
        with self._lock:
            rows = [
                {
                    "tier": tier.value,
                    "error_type": type(err).__name__,
                    "message": str(err),
                    "context": json.dumps(dict(err.context), ensure_ascii=False, sort_keys=True),
                }
                for tier, errs in self._sinks.items()
                for err in errs
            ]
        return pd.DataFrame(rows, columns=ERROR_FRAME_COLUMNS)
