"""
Unit tests for src/bencherror/errors.py.

Covers tier classification of every failure kind, the cancellation
override, immutability of ClassifiedError, and message formatting.
"""

from __future__ import annotations

import pytest
import requests

from src.bencherror.errors import (
    FATAL_TIERS,
    ClassifiedError,
    ClientCancelled,
    ClientSetupError,
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


class TestTier:

    def test_fatal_tiers(self):
        assert FATAL_TIERS == {Tier.CRITICAL, Tier.INITIALIZE, Tier.PRETEST}

    @pytest.mark.parametrize("tier", [Tier.BENCHMARK, Tier.APPLICATION])
    def test_non_fatal_tiers(self, tier):
        assert not tier.is_fatal

    def test_tier_from_value(self):
        assert Tier("benchmark") is Tier.BENCHMARK


class TestClassify:

    @pytest.mark.parametrize("kind, cls", [
        ("setup", ClientSetupError),
        ("request", RequestConstructionError),
        ("transport", TransportError),
        ("decode", ResponseDecodeError),
    ])
    def test_kind_selects_class(self, kind, cls):
        err = classify(ValueError("x"), "boom", tier=Tier.BENCHMARK, kind=kind)
        assert type(err) is cls
        assert err.tier is Tier.BENCHMARK

    def test_default_kind_is_transport(self):
        err = classify(requests.ConnectionError("refused"), "GET %s: failed", "/api/stations",
                       tier=Tier.BENCHMARK)
        assert isinstance(err, TransportError)

    def test_status_cause_always_status_mismatch(self):
        cause = StatusCodeError("GET", "/api/stations", got=500, want=200)
        err = classify(cause, "bad status", tier=Tier.BENCHMARK, kind="transport")
        assert isinstance(err, StatusCodeMismatchError)
        assert err.got == 500
        assert err.want == 200

    @pytest.mark.parametrize("cause", [RequestCancelled("c"), DeadlineExceeded("d")])
    @pytest.mark.parametrize("hint", list(Tier))
    def test_context_end_is_application_tier(self, cause, hint):
        err = classify(cause, "GET /api/stations: request failed", tier=hint)
        assert isinstance(err, ClientCancelled)
        assert err.tier is Tier.APPLICATION

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError, match="Unknown error kind"):
            classify(None, "x", tier=Tier.BENCHMARK, kind="bogus")

    def test_message_formatting(self):
        err = classify(None, "POST %s: got=%d, want=%d", "/api/auth/login", 403, 200,
                       tier=Tier.BENCHMARK)
        assert err.message == "POST /api/auth/login: got=403, want=200"
        assert err.template == "POST %s: got=%d, want=%d"

    def test_template_with_percent_and_no_args(self):
        err = classify(None, "100% broken", tier=Tier.APPLICATION)
        assert err.message == "100% broken"

    def test_str_includes_cause(self):
        err = classify(ValueError("bad json"), "GET /x: decode failed", tier=Tier.BENCHMARK,
                       kind="decode")
        assert str(err) == "GET /x: decode failed: bad json"

    def test_cause_is_chained(self):
        cause = requests.Timeout("read timed out")
        err = classify(cause, "x", tier=Tier.BENCHMARK)
        assert err.cause is cause
        assert err.__cause__ is cause


class TestClassifiedErrorImmutability:

    @pytest.fixture
    def err(self):
        return classify(
            None, "GET /api/train/seats: failed", tier=Tier.BENCHMARK,
            context={"car_number": 3, "train_class": "express"},
        )

    def test_context_values_stringified(self, err):
        assert err.context == {"car_number": "3", "train_class": "express"}

    def test_context_is_read_only(self, err):
        with pytest.raises(TypeError):
            err.context["car_number"] = "4"

    @pytest.mark.parametrize("attr", ["tier", "message", "template", "context", "cause"])
    def test_public_attributes_read_only(self, err, attr):
        with pytest.raises(AttributeError):
            setattr(err, attr, None)

    def test_context_copied_at_construction(self):
        ctx = {"reservation_id": 1}
        err = classify(None, "x", tier=Tier.BENCHMARK, context=ctx)
        ctx["reservation_id"] = 2
        assert err.context["reservation_id"] == "1"

    @pytest.mark.parametrize("attr", ["_tier", "_message", "_context", "_cause", "extra"])
    def test_private_attributes_frozen(self, err, attr):
        with pytest.raises(AttributeError, match="immutable"):
            setattr(err, attr, Tier.CRITICAL)
        assert err.tier is Tier.BENCHMARK

    def test_delete_rejected(self, err):
        with pytest.raises(AttributeError, match="immutable"):
            del err._tier
        assert err.tier is Tier.BENCHMARK

    def test_raisable(self, err):
        with pytest.raises(ClassifiedError):
            raise err

    def test_raise_from_still_chains(self, err):
        cause = ValueError("late cause")
        with pytest.raises(ClassifiedError) as excinfo:
            raise err from cause
        assert excinfo.value.__cause__ is cause


class TestTrainSeatsNotFound:

    def test_not_a_classified_error(self):
        exc = TrainSeatsNotFound("/api/train/seats", {"car_number": "1"})
        assert not isinstance(exc, ClassifiedError)
        assert exc.context["car_number"] == "1"
