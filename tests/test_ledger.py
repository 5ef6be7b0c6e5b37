"""
Unit tests for src/scoring/ledger.py.

Covers static vs. dynamic counting, bonus accumulation, reset, concurrent
increments without lost updates, and the DataFrame export.
"""

from __future__ import annotations

import threading

import pytest

from src.isutrain.endpoints import Endpoint
from src.scoring.ledger import LEDGER_FRAME_COLUMNS, EndpointLedger


class TestRecord:

    def test_static_record_increments_by_one(self, ledger):
        ledger.record(Endpoint.LOGIN)
        assert ledger.count(Endpoint.LOGIN) == 1
        assert ledger.count(Endpoint.SIGNUP) == 0

    def test_dynamic_record_aggregates_ids(self, ledger):
        for _ in range(3):
            ledger.record_dynamic(Endpoint.SHOW_RESERVATION)
        assert ledger.count(Endpoint.SHOW_RESERVATION) == 3
        assert ledger.count(Endpoint.CANCEL_RESERVATION) == 0

    def test_record_rejects_dynamic_endpoint(self, ledger):
        with pytest.raises(ValueError, match="record_dynamic"):
            ledger.record(Endpoint.SHOW_RESERVATION)

    def test_record_dynamic_rejects_static_endpoint(self, ledger):
        with pytest.raises(ValueError, match="record\\(\\)"):
            ledger.record_dynamic(Endpoint.LOGIN)

    def test_counts_cover_every_endpoint(self, ledger):
        ledger.record(Endpoint.RESERVE)
        counts = ledger.counts()
        assert set(counts) == set(Endpoint)
        assert counts[Endpoint.RESERVE] == 1


class TestBonus:

    def test_bonus_accumulates(self, ledger):
        ledger.add_bonus(Endpoint.RESERVE, 3)
        ledger.add_bonus(Endpoint.RESERVE, 3)
        assert ledger.bonus(Endpoint.RESERVE) == 6
        assert ledger.total_bonus() == 6

    def test_bonus_does_not_count_a_call(self, ledger):
        ledger.add_bonus(Endpoint.RESERVE, 3)
        assert ledger.count(Endpoint.RESERVE) == 0

    def test_negative_bonus_rejected(self, ledger):
        with pytest.raises(ValueError):
            ledger.add_bonus(Endpoint.RESERVE, -1)
        assert ledger.bonus(Endpoint.RESERVE) == 0


class TestReset:

    def test_reset_zeroes_everything(self, ledger):
        ledger.record(Endpoint.LOGIN)
        ledger.record_dynamic(Endpoint.CANCEL_RESERVATION)
        ledger.add_bonus(Endpoint.RESERVE, 5)
        ledger.reset()
        assert all(n == 0 for n in ledger.counts().values())
        assert ledger.total_bonus() == 0

    def test_ledgers_are_isolated(self):
        a, b = EndpointLedger(), EndpointLedger()
        a.record(Endpoint.LOGIN)
        assert b.count(Endpoint.LOGIN) == 0


class TestConcurrency:

    def test_no_lost_updates(self, ledger):
        n_workers, per_worker = 8, 1000

        def worker():
            for _ in range(per_worker):
                ledger.record(Endpoint.SEARCH_TRAINS)
                ledger.record_dynamic(Endpoint.SHOW_RESERVATION)
                ledger.add_bonus(Endpoint.RESERVE, 1)

        threads = [threading.Thread(target=worker) for _ in range(n_workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        expected = n_workers * per_worker
        assert ledger.count(Endpoint.SEARCH_TRAINS) == expected
        assert ledger.count(Endpoint.SHOW_RESERVATION) == expected
        assert ledger.bonus(Endpoint.RESERVE) == expected


class TestToFrame:

    def test_one_row_per_endpoint(self, ledger):
        ledger.record(Endpoint.RESERVE)
        ledger.add_bonus(Endpoint.RESERVE, 3)
        df = ledger.to_frame()
        assert list(df.columns) == LEDGER_FRAME_COLUMNS
        assert len(df) == len(Endpoint)
        row = df.set_index("endpoint").loc["RESERVE"]
        assert row["count"] == 1
        assert row["bonus"] == 3
        assert row["method"] == "POST"

    def test_dynamic_flag(self, ledger):
        df = ledger.to_frame().set_index("endpoint")
        assert bool(df.loc["SHOW_RESERVATION", "dynamic"])
        assert not bool(df.loc["LOGIN", "dynamic"])
