"""
Client-side configuration and project path constants.

Values are imported from the top-level ``config`` package so that
configuration stays separated from logic; the client never reads the
environment directly.
"""

from pathlib import Path

from config.score_params import RESERVED_SEAT_EXTRA_SCORE
from config.target_config import (
    DEFAULT_AVAIL_RESERVE_DAYS,
    TargetConfig,
    load_target_config,
)

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

# Resolve from this file: src/isutrain/config.py → src/isutrain → src → root
PROJECT_ROOT = Path(__file__).resolve().parents[2]

RESULTS_DIR = PROJECT_ROOT / "results"
LEDGER_REPORT_PATH = RESULTS_DIR / "endpoint_ledger.csv"
ERROR_REPORT_PATH = RESULTS_DIR / "classified_errors.csv"

# ---------------------------------------------------------------------------
# Wire format
# ---------------------------------------------------------------------------

JSON_CONTENT_TYPE = "application/json"

# Seat listing treats these as "no seats", not as a failure
SEATS_NOT_FOUND_STATUS_CODES: frozenset[int] = frozenset({400, 404})

__all__ = [
    "DEFAULT_AVAIL_RESERVE_DAYS",
    "ERROR_REPORT_PATH",
    "JSON_CONTENT_TYPE",
    "LEDGER_REPORT_PATH",
    "PROJECT_ROOT",
    "RESERVED_SEAT_EXTRA_SCORE",
    "RESULTS_DIR",
    "SEATS_NOT_FOUND_STATUS_CODES",
    "TargetConfig",
    "load_target_config",
]
