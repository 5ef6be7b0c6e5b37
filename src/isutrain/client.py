"""
Instrumented API client for the isutrain reservation service.

Every operation runs the same pipeline (:meth:`IsutrainClient._execute`):

  1. resolve the endpoint path (static, or dynamic with a reservation id)
  2. serialize the payload as a JSON body, or the parameters as a query
  3. build the request on the user's Session and send it
  4. seat listing only: 404/400 means "no seats" → TrainSeatsNotFound
  5. validate the status code (200, or the caller's ClientOption override)
  6. decode the body into the operation's result type
  7. record the success in the EndpointLedger (plus Reserve's extra score)

Any failing step raises a ClassifiedError; nothing is recorded for a
failed call.  Tiers per operation:

  initialize      request/transport/status → INITIALIZE, decode → CRITICAL
  download_asset  everything               → PRETEST
  all others      transport/status/decode  → BENCHMARK,
                  request construction     → APPLICATION
  any operation   run context ended        → APPLICATION (ClientCancelled)
"""

from __future__ import annotations

import json
import logging
import posixpath
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable
from urllib.parse import SplitResult, urlsplit, urlunsplit

import requests

from src.bencherror.errors import (
    ClassifiedError,
    ContextDone,
    Tier,
    TrainSeatsNotFound,
    classify,
)

from .config import (
    JSON_CONTENT_TYPE,
    RESERVED_SEAT_EXTRA_SCORE,
    SEATS_NOT_FOUND_STATUS_CODES,
    TargetConfig,
)
from .context import RunContext
from .endpoints import Endpoint, dynamic_path, path
from .models import (
    InitializeResponse,
    ReservationRequest,
    ReservationResponse,
    SeatReservation,
    Settings,
    Station,
    Train,
    TrainSeatSearchResponse,
    User,
    decode_list,
    format_iso8601,
    is_reserved_seat_class,
)
from .session import Session
from .status import ClientOption, check_status_code, resolve_want_status

if TYPE_CHECKING:
    from src.scoring.ledger import EndpointLedger

logger = logging.getLogger(__name__)


def _parse_base_url(base_url: str) -> SplitResult:
    """
    Raises:
        ValueError: If ``base_url`` is not an absolute http(s) URL.
    """
    parts = urlsplit(base_url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError(f"target base URL must be an absolute http(s) URL, got {base_url!r}")
    return parts


def _encode_json(payload: Any) -> bytes:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


class IsutrainClient:
    """One simulated user's view of the isutrain API."""

    def __init__(
        self,
        session: Session,
        target: TargetConfig,
        ledger: EndpointLedger,
        reserved_seat_extra_score: int = RESERVED_SEAT_EXTRA_SCORE,
    ) -> None:
        self.session = session
        self.target = target
        self.ledger = ledger
        self.reserved_seat_extra_score = reserved_seat_extra_score
        self._base = _parse_base_url(target.base_url)

    # -----------------------------------------------------------------------
    # Construction
    # -----------------------------------------------------------------------

    @classmethod
    def new(cls, target: TargetConfig, ledger: EndpointLedger) -> IsutrainClient:
        """
        Client for steady-state load generation.

        Raises:
            ClientSetupError: CRITICAL tier; the run must abort.
        """
        return cls._build(Session.for_target, target, ledger)

    @classmethod
    def new_for_initialize(cls, target: TargetConfig, ledger: EndpointLedger) -> IsutrainClient:
        """Client whose session is bounded by the initialize timeout."""
        return cls._build(Session.for_initialize, target, ledger)

    @classmethod
    def _build(
        cls,
        session_factory: Callable[[TargetConfig], Session],
        target: TargetConfig,
        ledger: EndpointLedger,
    ) -> IsutrainClient:
        try:
            _parse_base_url(target.base_url)
            session = session_factory(target)
        except ValueError as exc:
            err = classify(
                exc, "cannot create isutrain client",
                tier=Tier.CRITICAL, kind="setup", context={"base_url": target.base_url},
            )
            logger.error("%s", err)
            raise err from exc
        return cls(session, target, ledger)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> IsutrainClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -----------------------------------------------------------------------
    # Pipeline
    # -----------------------------------------------------------------------

    def _url(self, endpoint_path: str) -> str:
        joined = posixpath.join(self._base.path or "/", endpoint_path.lstrip("/"))
        return urlunsplit((self._base.scheme, self._base.netloc, joined, "", ""))

    def _fail(
        self,
        cause: BaseException | None,
        template: str,
        *args: Any,
        tier: Tier,
        kind: str = "transport",
        context: dict[str, Any] | None = None,
    ) -> ClassifiedError:
        err = classify(cause, template, *args, tier=tier, kind=kind, context=context)
        logger.warning("[%s] %s %s", err.tier.value, err, dict(err.context))
        return err

    def _execute(
        self,
        ctx: RunContext,
        method: str,
        endpoint_path: str,
        *,
        payload: Any = None,
        params: dict[str, str] | None = None,
        want: int = 200,
        context: dict[str, Any] | None = None,
        tier: Tier = Tier.BENCHMARK,
        decode: Callable[[requests.Response], Any] | None = None,
        decode_tier: Tier | None = None,
        not_found_codes: frozenset[int] = frozenset(),
        timeout: float | None = None,
    ) -> Any:
        """
        Build, send, validate, and decode one call.

        Returns:
            ``decode(response)``, or the raw body bytes when ``decode`` is None.

        Raises:
            ClassifiedError: Any failure, classified per the module table.
            TrainSeatsNotFound: Status in ``not_found_codes``.
        """
        context = dict(context or {})
        context.setdefault("endpoint", endpoint_path)
        construct_tier = Tier.APPLICATION if tier is Tier.BENCHMARK else tier

        try:
            body = headers = None
            if payload is not None:
                body = _encode_json(payload)
                headers = {"Content-Type": JSON_CONTENT_TYPE}
            request = self.session.new_request(
                ctx, method, self._url(endpoint_path), body=body, params=params, headers=headers
            )
        except (requests.RequestException, ValueError, TypeError, ContextDone) as exc:
            raise self._fail(
                exc, "%s %s: failed to build request", method, endpoint_path,
                tier=construct_tier, kind="request", context=context,
            ) from exc

        try:
            response = self.session.do(ctx, request, timeout=timeout)
        except (requests.RequestException, OSError, ContextDone) as exc:
            raise self._fail(
                exc, "%s %s: request failed", method, endpoint_path,
                tier=tier, context=context,
            ) from exc

        with response:
            if response.status_code in not_found_codes:
                logger.info("%s %s: empty result (status %d)", method, endpoint_path, response.status_code)
                raise TrainSeatsNotFound(endpoint_path, context)

            mismatch = check_status_code(request, response, want)
            if mismatch is not None:
                raise self._fail(
                    mismatch, "%s %s: unexpected status code: got=%d, want=%d",
                    method, endpoint_path, mismatch.got, want,
                    tier=tier, context=context,
                )

            if decode is None:
                return response.content
            try:
                return decode(response)
            except (ValueError, KeyError, TypeError, OverflowError) as exc:
                raise self._fail(
                    exc, "%s %s: failed to decode response", method, endpoint_path,
                    tier=decode_tier or tier, kind="decode", context=context,
                ) from exc

    # -----------------------------------------------------------------------
    # Operations
    # -----------------------------------------------------------------------

    def initialize(self, ctx: RunContext) -> InitializeResponse:
        """
        Reset and seed the target, then publish its reservation window.

        Bounded by the initialize timeout regardless of the session timeout.

        Raises:
            ClassifiedError: INITIALIZE tier for request/status failures,
                             CRITICAL tier for an undecodable response or an
                             invalid reservation window.
        """
        endpoint_path = path(Endpoint.INITIALIZE)
        default_days = self.target.avail_reserve_days

        def _decode(response: requests.Response) -> InitializeResponse:
            if not response.content.strip():
                return InitializeResponse(available_days=default_days)
            return InitializeResponse.from_dict(response.json(), default_days)

        result = self._execute(
            ctx, "POST", endpoint_path,
            tier=Tier.INITIALIZE, decode=_decode, decode_tier=Tier.CRITICAL,
            timeout=self.target.initialize_timeout,
        )

        try:
            self.target.set_avail_reserve_days(result.available_days)
        except ValueError as exc:
            raise self._fail(
                exc, "POST %s: failed to set available reservation days", endpoint_path,
                tier=Tier.CRITICAL, kind="decode",
                context={"available_days": result.available_days},
            ) from exc

        self.ledger.record(Endpoint.INITIALIZE)
        return result

    def settings(self, ctx: RunContext, opts: ClientOption | None = None) -> Settings:
        endpoint_path = path(Endpoint.SETTINGS)
        settings = self._execute(
            ctx, "GET", endpoint_path,
            want=resolve_want_status(opts),
            decode=lambda resp: Settings.from_dict(resp.json()),
        )
        self.ledger.record(Endpoint.SETTINGS)
        return settings

    def signup(self, ctx: RunContext, email: str, password: str, opts: ClientOption | None = None) -> None:
        self._execute(
            ctx, "POST", path(Endpoint.SIGNUP),
            payload=User(email, password).to_payload(),
            want=resolve_want_status(opts),
            context={"email": email},
        )
        self.ledger.record(Endpoint.SIGNUP)

    def login(self, ctx: RunContext, email: str, password: str, opts: ClientOption | None = None) -> None:
        """Authenticate; the session cookie is kept for later calls."""
        self._execute(
            ctx, "POST", path(Endpoint.LOGIN),
            payload=User(email, password).to_payload(),
            want=resolve_want_status(opts),
            context={"email": email},
        )
        self.ledger.record(Endpoint.LOGIN)

    def logout(self, ctx: RunContext, opts: ClientOption | None = None) -> None:
        self._execute(ctx, "POST", path(Endpoint.LOGOUT), want=resolve_want_status(opts))
        self.ledger.record(Endpoint.LOGOUT)

    def list_stations(self, ctx: RunContext, opts: ClientOption | None = None) -> list[Station]:
        stations = self._execute(
            ctx, "GET", path(Endpoint.LIST_STATIONS),
            want=resolve_want_status(opts),
            decode=lambda resp: decode_list(resp.json(), Station, "stations"),
        )
        self.ledger.record(Endpoint.LIST_STATIONS)
        return stations

    def search_trains(
        self,
        ctx: RunContext,
        use_at: datetime,
        from_station: str,
        to_station: str,
        train_class: str = "",
        opts: ClientOption | None = None,
    ) -> list[Train]:
        params = {
            "use_at": format_iso8601(use_at),
            "train_class": train_class,
            "from": from_station,
            "to": to_station,
        }
        trains = self._execute(
            ctx, "GET", path(Endpoint.SEARCH_TRAINS),
            params=params,
            want=resolve_want_status(opts),
            context=params,
            decode=lambda resp: decode_list(resp.json(), Train, "trains"),
        )
        self.ledger.record(Endpoint.SEARCH_TRAINS)
        return trains

    def list_train_seats(
        self,
        ctx: RunContext,
        date: datetime,
        train_class: str,
        train_name: str,
        car_number: int,
        departure: str,
        arrival: str,
        opts: ClientOption | None = None,
    ) -> TrainSeatSearchResponse:
        """
        List the seats of one car.

        Raises:
            TrainSeatsNotFound: The service answered 404 or 400 (no seats);
                                not a failure and never deposited.
            ClassifiedError: Any other failure.
        """
        params = {
            "date": format_iso8601(date),
            "train_class": train_class,
            "train_name": train_name,
            "car_number": str(car_number),
            "from": departure,
            "to": arrival,
        }
        seats = self._execute(
            ctx, "GET", path(Endpoint.LIST_TRAIN_SEATS),
            params=params,
            want=resolve_want_status(opts),
            context=params,
            decode=lambda resp: TrainSeatSearchResponse.from_dict(resp.json()),
            not_found_codes=SEATS_NOT_FOUND_STATUS_CODES,
        )
        self.ledger.record(Endpoint.LIST_TRAIN_SEATS)
        return seats

    def reserve(
        self,
        ctx: RunContext,
        reservation: ReservationRequest,
        opts: ClientOption | None = None,
    ) -> ReservationResponse:
        """Reserve seats; reserved seat classes earn extra score on success."""
        result = self._execute(
            ctx, "POST", path(Endpoint.RESERVE),
            payload=reservation.to_payload(),
            want=resolve_want_status(opts),
            context=reservation.failure_context(),
            decode=lambda resp: ReservationResponse.from_dict(resp.json()),
        )
        self.ledger.record(Endpoint.RESERVE)
        if is_reserved_seat_class(reservation.seat_class):
            self.ledger.add_bonus(Endpoint.RESERVE, self.reserved_seat_extra_score)
        return result

    def commit_reservation(
        self,
        ctx: RunContext,
        reservation_id: int,
        card_token: str,
        opts: ClientOption | None = None,
    ) -> None:
        self._execute(
            ctx, "POST", path(Endpoint.COMMIT_RESERVATION),
            payload={"reservation_id": reservation_id, "card_token": card_token},
            want=resolve_want_status(opts),
            context={"reservation_id": reservation_id, "card_token": card_token},
        )
        self.ledger.record(Endpoint.COMMIT_RESERVATION)

    def list_reservations(self, ctx: RunContext, opts: ClientOption | None = None) -> list[SeatReservation]:
        reservations = self._execute(
            ctx, "GET", path(Endpoint.LIST_RESERVATIONS),
            want=resolve_want_status(opts),
            decode=lambda resp: decode_list(resp.json(), SeatReservation, "reservations"),
        )
        self.ledger.record(Endpoint.LIST_RESERVATIONS)
        return reservations

    def show_reservation(
        self,
        ctx: RunContext,
        reservation_id: int,
        opts: ClientOption | None = None,
    ) -> SeatReservation:
        reservation = self._execute(
            ctx, "GET", dynamic_path(Endpoint.SHOW_RESERVATION, reservation_id),
            want=resolve_want_status(opts),
            context={"reservation_id": reservation_id},
            decode=lambda resp: SeatReservation.from_dict(resp.json()),
        )
        self.ledger.record_dynamic(Endpoint.SHOW_RESERVATION)
        return reservation

    def cancel_reservation(
        self,
        ctx: RunContext,
        reservation_id: int,
        opts: ClientOption | None = None,
    ) -> None:
        self._execute(
            ctx, "POST", dynamic_path(Endpoint.CANCEL_RESERVATION, reservation_id),
            want=resolve_want_status(opts),
            context={"reservation_id": reservation_id},
        )
        self.ledger.record_dynamic(Endpoint.CANCEL_RESERVATION)

    def download_asset(self, ctx: RunContext, asset_path: str) -> bytes:
        """
        Fetch a static asset before load starts.

        Not counted in the ledger.

        Raises:
            ClassifiedError: PRETEST tier for every failure.
        """
        return self._execute(ctx, "GET", asset_path, tier=Tier.PRETEST)
