"""
src/isutrain: Instrumented HTTP client for the isutrain reservation service.

Module layout
-------------
config.py    : client constants, re-exported target configuration, paths
context.py   : RunContext: cancellation and deadline propagation
endpoints.py : Endpoint registry, static and dynamic path resolution
status.py    : ClientOption and status code validation
session.py   : Session: authenticated transport with cancellable sends
models.py    : request/response payloads and ISO-8601 formatting
client.py    : IsutrainClient: one operation per remote capability

Public interface
----------------
Create a client for one simulated user:
    client = IsutrainClient.new(target, ledger)

Run operations under a cancellable context:
    ctx = RunContext.background().with_cancel()
    client.login(ctx, email, password)
    client.search_trains(ctx, use_at, "Tokyo", "Osaka")

Expect a non-200 status in a negative scenario:
    client.login(ctx, email, "wrong", opts=ClientOption(want_status_code=403))
"""

from .client import IsutrainClient
from .config import TargetConfig, load_target_config
from .context import RunContext
from .endpoints import Endpoint, dynamic_path, path
from .models import (
    SEAT_CLASS_NON_RESERVED,
    SEAT_CLASS_PREMIUM,
    SEAT_CLASS_RESERVED,
    InitializeResponse,
    ReservationRequest,
    ReservationResponse,
    SeatReservation,
    Settings,
    Station,
    Train,
    TrainCar,
    TrainSeat,
    TrainSeatSearchResponse,
    format_iso8601,
)
from .session import Session
from .status import ClientOption, check_status_code

__all__ = [
    # Client
    "IsutrainClient",
    "Session",
    "RunContext",
    "ClientOption",
    "check_status_code",
    # Configuration
    "TargetConfig",
    "load_target_config",
    # Endpoints
    "Endpoint",
    "path",
    "dynamic_path",
    # Payloads
    "InitializeResponse",
    "ReservationRequest",
    "ReservationResponse",
    "SeatReservation",
    "Settings",
    "Station",
    "Train",
    "TrainCar",
    "TrainSeat",
    "TrainSeatSearchResponse",
    "SEAT_CLASS_PREMIUM",
    "SEAT_CLASS_RESERVED",
    "SEAT_CLASS_NON_RESERVED",
    "format_iso8601",
]
