"""
Per-endpoint call counters and extra-score accumulation for one run.

The ledger is constructed by the harness and shared by reference among all
simulated users; every update takes the ledger lock, so concurrent workers
never lose an increment.  Only final totals are meaningful; no ordering
across endpoints is recorded.

Invariants:
- Counters and bonus totals never decrease during a run; ``reset()`` is
  called only at run start.
- Static endpoints are counted with ``record``, dynamic endpoints with
  ``record_dynamic``; mixing them up is a programming error.
"""

from __future__ import annotations

import threading
from collections import Counter

import pandas as pd

from src.isutrain.endpoints import Endpoint

LEDGER_FRAME_COLUMNS: list[str] = ["endpoint", "method", "path", "dynamic", "count", "bonus"]


class EndpointLedger:
    """Thread-safe call counts and bonus totals keyed by Endpoint."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: Counter[Endpoint] = Counter()
        self._dynamic_counts: Counter[Endpoint] = Counter()
        self._bonus: Counter[Endpoint] = Counter()

    def record(self, endpoint: Endpoint) -> None:
        """
        Count one successful call to a static endpoint.

        Raises:
            ValueError: If ``endpoint`` is dynamic.
        """
        if endpoint.dynamic:
            raise ValueError(f"{endpoint.name} is dynamic; use record_dynamic()")
        with self._lock:
            self._counts[endpoint] += 1

    def record_dynamic(self, endpoint: Endpoint) -> None:
        """
        Count one successful call to a dynamic endpoint, whatever its id.

        Raises:
            ValueError: If ``endpoint`` is static.
        """
        if not endpoint.dynamic:
            raise ValueError(f"{endpoint.name} is static; use record()")
        with self._lock:
            self._dynamic_counts[endpoint] += 1

    def add_bonus(self, endpoint: Endpoint, amount: int) -> None:
        """
        Add extra score to ``endpoint``.

        Raises:
            ValueError: If ``amount`` is negative.
        """
        if amount < 0:
            raise ValueError(f"bonus must be non-negative, got {amount!r}")
        with self._lock:
            self._bonus[endpoint] += amount

    def count(self, endpoint: Endpoint) -> int:
        """Successful calls for ``endpoint`` (static or dynamic counter)."""
        with self._lock:
            if endpoint.dynamic:
                return self._dynamic_counts[endpoint]
            return self._counts[endpoint]

    def bonus(self, endpoint: Endpoint) -> int:
        with self._lock:
            return self._bonus[endpoint]

    def total_bonus(self) -> int:
        with self._lock:
            return sum(self._bonus.values())

    def counts(self) -> dict[Endpoint, int]:
        """Snapshot of every endpoint's count, zero for uncalled endpoints."""
        with self._lock:
            return {
                ep: (self._dynamic_counts[ep] if ep.dynamic else self._counts[ep])
                for ep in Endpoint
            }

    def reset(self) -> None:
        """Zero every counter. Call only at run start."""
        with self._lock:
            self._counts.clear()
            self._dynamic_counts.clear()
            self._bonus.clear()

    def to_frame(self) -> pd.DataFrame:
        """One row per endpoint with its count and accumulated bonus."""
        counts = self.counts()
        with self._lock:
            bonus = dict(self._bonus)
        rows = [
            {
                "endpoint": ep.name,
                "method": ep.method,
                "path": ep.template,
                "dynamic": ep.dynamic,
                "count": counts[ep],
                "bonus": bonus.get(ep, 0),
            }
            for ep in Endpoint
        ]
        return pd.DataFrame(rows, columns=LEDGER_FRAME_COLUMNS)
