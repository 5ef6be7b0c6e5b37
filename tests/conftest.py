"""
Shared pytest fixtures for the isutrain client tests.

No test touches the network: the ``client`` fixture replaces the underlying
``requests.Session.send`` with a MagicMock, and ``make_response`` builds
the ``requests.Response`` objects it returns.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
import requests

from config.target_config import TargetConfig
from src.bencherror.sinks import ErrorAggregator
from src.isutrain.client import IsutrainClient
from src.isutrain.context import RunContext
from src.scoring.ledger import EndpointLedger

BASE_URL = "http://isutrain.test"


def make_response(
    status: int = 200,
    json_body=None,
    body: bytes | None = None,
    url: str = BASE_URL,
) -> requests.Response:
    """Build a fully-read requests.Response with the given status and body."""
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.encoding = "utf-8"
    if body is None:
        body = b"" if json_body is None else json.dumps(json_body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    response._content = body
    response._content_consumed = True
    return response


def sent_request(client: IsutrainClient, index: int = -1) -> requests.PreparedRequest:
    """The PreparedRequest passed to the mocked send on call ``index``."""
    return client.session.http.send.call_args_list[index].args[0]


# ---------------------------------------------------------------------------
# Run-wide shared state
# ---------------------------------------------------------------------------

@pytest.fixture
def target():
    return TargetConfig(base_url=BASE_URL, request_timeout=5.0, initialize_timeout=2.0)


@pytest.fixture
def ledger():
    return EndpointLedger()


@pytest.fixture
def errors():
    return ErrorAggregator()


@pytest.fixture
def ctx():
    return RunContext.background()


# ---------------------------------------------------------------------------
# Client with mocked transport
# ---------------------------------------------------------------------------

@pytest.fixture
def client(target, ledger):
    """IsutrainClient whose HTTP send returns an empty 200 unless reconfigured."""
    c = IsutrainClient.new(target, ledger)
    c.session.http.send = MagicMock(return_value=make_response(200))
    yield c
    c.close()


def respond(client: IsutrainClient, status: int = 200, json_body=None, body: bytes | None = None) -> None:
    """Make the client's next sends return the given response."""
    client.session.http.send.return_value = make_response(status, json_body, body)
    client.session.http.send.side_effect = None
