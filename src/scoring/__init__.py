"""
src/scoring: Run-wide counting and final score for the isutrain benchmark.

Module layout
-------------
ledger.py: EndpointLedger, per-endpoint counters (static and dynamic) and
            extra-score accumulation shared by all simulated users
score.py: final score, pass/fail verdict, printed summary, CSV export

Public interface
----------------
Count successful calls during a run (done by IsutrainClient):
    ledger = EndpointLedger()
    ledger.record(Endpoint.LOGIN)
    ledger.record_dynamic(Endpoint.SHOW_RESERVATION)
    ledger.add_bonus(Endpoint.RESERVE, 3)

Score the run:
    result = calculate_score(ledger, errors)
    print_score_summary(result)
    export_run_report(ledger, errors)
"""

from .ledger import EndpointLedger
from .score import calculate_score, export_run_report, print_score_summary

__all__ = [
    "EndpointLedger",
    "calculate_score",
    "print_score_summary",
    "export_run_report",
]
