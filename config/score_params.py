"""
Score parameters: per-endpoint weights, extra score, and penalties.

This is the AUTHORITATIVE source for all scoring constants.
src/scoring/score.py imports from here; do not maintain parallel copies.

Keys of ENDPOINT_WEIGHTS are ``Endpoint`` member names from
src/isutrain/endpoints.py.  Endpoints absent from the table score zero.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Points per successful call
# ---------------------------------------------------------------------------

ENDPOINT_WEIGHTS: dict[str, int] = {
    "INITIALIZE":          0,
    "SETTINGS":            0,
    "SIGNUP":              1,
    "LOGIN":               1,
    "LOGOUT":              0,
    "LIST_STATIONS":       1,
    "SEARCH_TRAINS":       1,
    "LIST_TRAIN_SEATS":    1,
    "RESERVE":             5,
    "COMMIT_RESERVATION": 10,
    "LIST_RESERVATIONS":   1,
    "SHOW_RESERVATION":    1,   # dynamic: aggregated over reservation ids
    "CANCEL_RESERVATION":  2,   # dynamic: aggregated over reservation ids
}

# ---------------------------------------------------------------------------
# Extra score
# ---------------------------------------------------------------------------

# Added to the Reserve endpoint when a reserved (non free-seating) seat
# class is booked successfully
RESERVED_SEAT_EXTRA_SCORE: int = 3

# ---------------------------------------------------------------------------
# Penalties
# ---------------------------------------------------------------------------

# Subtracted once per Benchmark-tier error
BENCHMARK_ERROR_PENALTY: int = 10

# More Benchmark-tier errors than this fails the run outright
MAX_BENCHMARK_ERRORS: int = 100
