"""
Final benchmark score and run report.

The score is read from the shared EndpointLedger and ErrorAggregator once
every simulated user has stopped:

  base_score  = Σ successful calls × endpoint weight
  extra_score = Σ accumulated bonus (reserved-seat reservations)
  penalty     = Benchmark-tier errors × BENCHMARK_ERROR_PENALTY
  score       = max(0, base_score + extra_score − penalty)

A run with any Critical, Initialize or PreTest error, or with more
Benchmark-tier errors than MAX_BENCHMARK_ERRORS, fails and scores 0.
Application-tier errors are reported but never scored.
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from config.score_params import (
    BENCHMARK_ERROR_PENALTY,
    ENDPOINT_WEIGHTS,
    MAX_BENCHMARK_ERRORS,
)
from src.bencherror.errors import FATAL_TIERS, Tier
from src.bencherror.sinks import ErrorAggregator
from src.isutrain.config import ERROR_REPORT_PATH, LEDGER_REPORT_PATH

from .ledger import EndpointLedger


def calculate_score(
    ledger: EndpointLedger,
    errors: ErrorAggregator,
    weights: dict[str, int] = ENDPOINT_WEIGHTS,
    penalty_per_error: int = BENCHMARK_ERROR_PENALTY,
    max_benchmark_errors: int = MAX_BENCHMARK_ERRORS,
) -> dict:
    """
    Compute the final score and pass/fail verdict of a run.

    Args:
        ledger: Ledger shared by all workers during the run.
        errors: Aggregator the workers deposited their failures into.
        weights: Points per successful call, keyed by Endpoint name.
        penalty_per_error: Points subtracted per Benchmark-tier error.
        max_benchmark_errors: Benchmark-tier errors tolerated before the run fails.

    Returns:
        Dict with keys ``base_score``, ``extra_score``, ``penalty``,
        ``score``, ``passed``, ``fail_reasons`` (list of str), and
        ``tier_counts`` (tier value → count).
    """
    counts = ledger.counts()
    base_score = sum(n * weights.get(ep.name, 0) for ep, n in counts.items())
    extra_score = ledger.total_bonus()

    tier_counts = errors.counts()
    benchmark_errors = tier_counts[Tier.BENCHMARK.value]
    penalty = benchmark_errors * penalty_per_error

    fail_reasons: list[str] = [
        f"{tier_counts[tier.value]} {tier.value} error(s)"
        for tier in Tier
        if tier in FATAL_TIERS and tier_counts[tier.value]
    ]
    if benchmark_errors > max_benchmark_errors:
        fail_reasons.append(
            f"{benchmark_errors} benchmark errors exceed the limit of {max_benchmark_errors}"
        )

    passed = not fail_reasons
    score = max(0, base_score + extra_score - penalty) if passed else 0

    return {
        "base_score": base_score,
        "extra_score": extra_score,
        "penalty": penalty,
        "score": score,
        "passed": passed,
        "fail_reasons": fail_reasons,
        "tier_counts": tier_counts,
    }


def print_score_summary(result: dict) -> None:
    """Print a human-readable summary of :func:`calculate_score` output."""
    sep = "=" * 60
    print(f"\n{sep}")
    print("BENCHMARK RESULT")
    print(sep)

    print(f"\n  Verdict:      {'PASS' if result['passed'] else 'FAIL'}")
    for reason in result["fail_reasons"]:
        print(f"    - {reason}")
    print(f"  Score:        {result['score']:,}")
    print(f"  Base score:   {result['base_score']:,}")
    print(f"  Extra score:  {result['extra_score']:,}")
    print(f"  Penalty:      {result['penalty']:,}")

    print("\nERRORS BY TIER:")
    for tier, n in result["tier_counts"].items():
        print(f"  {tier:<14} {n:>6}")


def export_run_report(
    ledger: EndpointLedger,
    errors: ErrorAggregator,
    ledger_path: Path = LEDGER_REPORT_PATH,
    errors_path: Path = ERROR_REPORT_PATH,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """
    Write the ledger and the classified errors as CSV files.

    Args:
        ledger: Ledger shared by all workers during the run.
        errors: Aggregator holding every deposited failure.
        ledger_path: Output CSV for per-endpoint counts and bonus.
        errors_path: Output CSV for classified errors.

    Returns:
        Tuple of (ledger DataFrame, errors DataFrame).
    """
    ledger_df = ledger.to_frame()
    errors_df = errors.to_frame()

    for df, output_path in ((ledger_df, ledger_path), (errors_df, errors_path)):
        output_path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(output_path, index=False)

    print(f"\nEndpoint ledger ({len(ledger_df)} endpoints) exported to {ledger_path}")
    print(f"Classified errors ({len(errors_df)} rows) exported to {errors_path}")

    return ledger_df, errors_df
