"""
Unit tests for src/bencherror/sinks.py.

Covers tier-checked deposit, single deposit per error, per-tier counts,
the fatal-tier verdict, concurrent appends, and the DataFrame export.
"""

from __future__ import annotations

import threading

import pytest

from src.bencherror.errors import ClassifiedError, Tier, classify
from src.bencherror.sinks import ERROR_FRAME_COLUMNS


def _err(tier: Tier = Tier.BENCHMARK, **context) -> ClassifiedError:
    return classify(None, "GET /api/stations: failed", tier=tier, context=context)


class TestDeposit:

    def test_deposit_into_matching_sink(self, errors):
        err = _err(Tier.BENCHMARK)
        errors.deposit(Tier.BENCHMARK, err)
        assert errors.errors(Tier.BENCHMARK) == (err,)
        assert errors.count(Tier.APPLICATION) == 0

    def test_add_uses_error_tier(self, errors):
        err = _err(Tier.PRETEST)
        errors.add(err)
        assert errors.errors(Tier.PRETEST) == (err,)

    def test_tier_mismatch_rejected(self, errors):
        with pytest.raises(ValueError, match="cannot be deposited"):
            errors.deposit(Tier.CRITICAL, _err(Tier.BENCHMARK))
        assert errors.total() == 0

    def test_double_deposit_rejected(self, errors):
        err = _err()
        errors.add(err)
        with pytest.raises(ValueError, match="already deposited"):
            errors.add(err)
        assert errors.count(Tier.BENCHMARK) == 1

    def test_plain_exception_rejected(self, errors):
        with pytest.raises(TypeError):
            errors.deposit(Tier.BENCHMARK, RuntimeError("x"))

    def test_errors_returns_snapshot(self, errors):
        errors.add(_err())
        snapshot = errors.errors(Tier.BENCHMARK)
        errors.add(_err())
        assert len(snapshot) == 1
        assert errors.count(Tier.BENCHMARK) == 2


class TestCounts:

    def test_every_tier_present(self, errors):
        assert errors.counts() == {tier.value: 0 for tier in Tier}

    def test_counts_per_tier(self, errors):
        errors.add(_err(Tier.BENCHMARK))
        errors.add(_err(Tier.BENCHMARK))
        errors.add(_err(Tier.APPLICATION))
        counts = errors.counts()
        assert counts["benchmark"] == 2
        assert counts["application"] == 1
        assert errors.total() == 3

    @pytest.mark.parametrize("tier", [Tier.CRITICAL, Tier.INITIALIZE, Tier.PRETEST])
    def test_fatal_tier_fails_run(self, errors, tier):
        errors.add(_err(tier))
        assert errors.has_fatal()

    def test_benchmark_and_application_not_fatal(self, errors):
        errors.add(_err(Tier.BENCHMARK))
        errors.add(_err(Tier.APPLICATION))
        assert not errors.has_fatal()


class TestConcurrency:

    def test_concurrent_deposits_all_kept(self, errors):
        n_workers, per_worker = 8, 250

        def worker():
            for _ in range(per_worker):
                errors.add(_err())

        threads = [threading.Thread(target=worker) for _ in range(n_workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors.count(Tier.BENCHMARK) == n_workers * per_worker


class TestToFrame:

    def test_empty_frame_has_columns(self, errors):
        df = errors.to_frame()
        assert list(df.columns) == ERROR_FRAME_COLUMNS
        assert df.empty

    def test_rows_carry_context(self, errors):
        errors.add(_err(Tier.BENCHMARK, reservation_id=42))
        df = errors.to_frame()
        assert len(df) == 1
        row = df.iloc[0]
        assert row["tier"] == "benchmark"
        assert row["error_type"] == "TransportError"
        assert row["context"] == '{"reservation_id": "42"}'
