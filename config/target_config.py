"""
Benchmark target configuration: base URL, timeouts, and reservation days.

This is the AUTHORITATIVE source for target configuration.
src/isutrain/config.py imports from here; do not maintain parallel copies.

ENVIRONMENT VARIABLES (all optional):
    ISUTRAIN_TARGET_URL         : base URL of the service under test
    ISUTRAIN_REQUEST_TIMEOUT    : per-request timeout in seconds
    ISUTRAIN_INITIALIZE_TIMEOUT : timeout for POST /initialize in seconds
    ISUTRAIN_USER_AGENT         : User-Agent header sent on every request
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field


def _env_str(key: str, default: str) -> str:
    """Get an environment variable as a string"""
    return os.environ.get(key, default)


def _env_float(key: str, default: float) -> float:
    """Convert an environment variable to float"""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        raise ValueError(
            f"The value '{val}' of environment variable '{key}' cannot be converted to a number."
        )


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_TARGET_URL: str = "http://127.0.0.1:8000"

# Per-request timeout for steady-state load generation
DEFAULT_REQUEST_TIMEOUT_SECONDS: float = 20.0

# POST /initialize must fail fast rather than stall the whole run
DEFAULT_INITIALIZE_TIMEOUT_SECONDS: float = 10.0

DEFAULT_USER_AGENT: str = "isutrain-benchmarker"

# Used until /initialize reports the real value
DEFAULT_AVAIL_RESERVE_DAYS: int = 30


# ---------------------------------------------------------------------------
# Environment-resolved values
# ---------------------------------------------------------------------------

TARGET_BASE_URL: str = _env_str("ISUTRAIN_TARGET_URL", DEFAULT_TARGET_URL)
REQUEST_TIMEOUT_SECONDS: float = _env_float(
    "ISUTRAIN_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT_SECONDS
)
INITIALIZE_TIMEOUT_SECONDS: float = _env_float(
    "ISUTRAIN_INITIALIZE_TIMEOUT", DEFAULT_INITIALIZE_TIMEOUT_SECONDS
)
USER_AGENT: str = _env_str("ISUTRAIN_USER_AGENT", DEFAULT_USER_AGENT)


@dataclass
class TargetConfig:
    """Connection settings for one benchmark run against one target."""
    base_url: str = DEFAULT_TARGET_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    initialize_timeout: float = DEFAULT_INITIALIZE_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT
    _avail_reserve_days: int = field(default=DEFAULT_AVAIL_RESERVE_DAYS, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def avail_reserve_days(self) -> int:
        with self._lock:
            return self._avail_reserve_days

    def set_avail_reserve_days(self, days: int) -> None:
        """
        Record how many days ahead the target accepts reservations.

        Only the initialize operation calls this, once /initialize succeeds.

        Raises:
            ValueError: If ``days`` is not a positive integer.
        """
        if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
            raise ValueError(f"available reservation days must be a positive integer, got {days!r}")
        with self._lock:
            self._avail_reserve_days = days


def load_target_config() -> TargetConfig:
    """Build a TargetConfig from the environment-resolved module values."""
    return TargetConfig(
        base_url=TARGET_BASE_URL,
        request_timeout=REQUEST_TIMEOUT_SECONDS,
        initialize_timeout=INITIALIZE_TIMEOUT_SECONDS,
        user_agent=USER_AGENT,
    )
