"""
Request and response payloads of the isutrain web service.

Only the fields the benchmark reads are modeled.  ``from_dict`` raises
``KeyError`` for a missing required key, ``TypeError``/``ValueError`` for
a value of the wrong type, and ``OverflowError`` for a non-finite number
where an integer is expected; the client reports each as a decode failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

# Service-local time; naive datetimes are interpreted in this zone
JST = timezone(timedelta(hours=9), "JST")

# ---------------------------------------------------------------------------
# Seat classes
# ---------------------------------------------------------------------------

SEAT_CLASS_PREMIUM = "premium"
SEAT_CLASS_RESERVED = "reserved"
SEAT_CLASS_NON_RESERVED = "non-reserved"   # free seating

SEAT_CLASSES: tuple[str, ...] = (SEAT_CLASS_PREMIUM, SEAT_CLASS_RESERVED, SEAT_CLASS_NON_RESERVED)


def is_reserved_seat_class(seat_class: str) -> bool:
    """True for any seat class other than free seating."""
    return seat_class != SEAT_CLASS_NON_RESERVED


def format_iso8601(value: datetime) -> str:
    """
    Format ``value`` as ISO-8601 with a UTC offset, second precision.

    ``2020-01-01T00:00:00+09:00``; naive datetimes are taken as JST.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=JST)
    return value.isoformat(timespec="seconds")


def _as_list(data: Any, name: str) -> list:
    if not isinstance(data, list):
        raise TypeError(f"expected a JSON array for {name}, got {type(data).__name__}")
    return data


def _as_dict(data: Any, name: str) -> dict:
    if not isinstance(data, dict):
        raise TypeError(f"expected a JSON object for {name}, got {type(data).__name__}")
    return data


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

@dataclass
class User:
    email: str
    password: str

    def to_payload(self) -> dict:
        return {"email": self.email, "password": self.password}


@dataclass
class TrainSeat:
    row: int
    column: str
    seat_class: str = ""
    is_smoking_seat: bool = False
    is_occupied: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> TrainSeat:
        data = _as_dict(data, "seat")
        return cls(
            row=int(data["row"]),
            column=str(data["column"]),
            seat_class=data.get("class", ""),
            is_smoking_seat=bool(data.get("is_smoking_seat", False)),
            is_occupied=bool(data.get("is_occupied", False)),
        )

    def to_payload(self) -> dict:
        return {"row": self.row, "column": self.column}


@dataclass
class ReservationRequest:
    """Body of POST /api/train/reserve."""
    train_class: str
    train_name: str
    seat_class: str
    seats: list[TrainSeat]
    departure: str
    arrival: str
    date: datetime
    car_number: int
    child: int = 0
    adult: int = 1
    reservation_type: str = ""

    def to_payload(self) -> dict:
        return {
            "train_class": self.train_class,
            "train_name": self.train_name,
            "seat_class": self.seat_class,
            "seats": [seat.to_payload() for seat in self.seats],
            "departure": self.departure,
            "arrival": self.arrival,
            "date": format_iso8601(self.date),
            "car_number": self.car_number,
            "child": self.child,
            "adult": self.adult,
            "type": self.reservation_type,
        }

    def failure_context(self) -> dict[str, str]:
        return {
            "train_class": self.train_class,
            "train_name": self.train_name,
            "seat_class": self.seat_class,
            "seats": repr([seat.to_payload() for seat in self.seats]),
            "departure": self.departure,
            "arrival": self.arrival,
            "date": format_iso8601(self.date),
            "car_number": str(self.car_number),
            "child": str(self.child),
            "adult": str(self.adult),
            "type": self.reservation_type,
        }


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

@dataclass
class InitializeResponse:
    available_days: int
    language: str = ""

    @classmethod
    def from_dict(cls, data: Any, default_days: int) -> InitializeResponse:
        data = _as_dict(data, "initialize response")
        return cls(
            available_days=int(data.get("available_days", default_days)),
            language=str(data.get("language", "")),
        )


@dataclass
class Settings:
    payment_api: str

    @classmethod
    def from_dict(cls, data: Any) -> Settings:
        data = _as_dict(data, "settings")
        return cls(payment_api=str(data["payment_api"]))


@dataclass
class Station:
    id: int
    name: str
    is_stop_express: bool = False
    is_stop_semi_express: bool = False
    is_stop_local: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> Station:
        data = _as_dict(data, "station")
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            is_stop_express=bool(data.get("is_stop_express", False)),
            is_stop_semi_express=bool(data.get("is_stop_semi_express", False)),
            is_stop_local=bool(data.get("is_stop_local", False)),
        )


@dataclass
class Train:
    train_class: str
    train_name: str
    start: str = ""
    last: str = ""
    departure: str = ""
    arrival: str = ""
    departure_time: str = ""
    arrival_time: str = ""
    seat_availability: dict[str, str] = field(default_factory=dict)
    seat_fare: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Train:
        data = _as_dict(data, "train")
        return cls(
            train_class=str(data["train_class"]),
            train_name=str(data["train_name"]),
            start=data.get("start", ""),
            last=data.get("last", ""),
            departure=data.get("departure", ""),
            arrival=data.get("arrival", ""),
            departure_time=data.get("departure_time", ""),
            arrival_time=data.get("arrival_time", ""),
            seat_availability=dict(_as_dict(data.get("seat_availability") or {}, "seat_availability")),
            seat_fare=dict(_as_dict(data.get("seat_fare") or {}, "seat_fare")),
        )


@dataclass
class TrainCar:
    car_number: int
    seat_class: str

    @classmethod
    def from_dict(cls, data: Any) -> TrainCar:
        data = _as_dict(data, "car")
        return cls(car_number=int(data["car_number"]), seat_class=str(data["seat_class"]))


@dataclass
class TrainSeatSearchResponse:
    date: str
    train_class: str
    train_name: str
    car_number: int
    seats: list[TrainSeat] = field(default_factory=list)
    cars: list[TrainCar] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> TrainSeatSearchResponse:
        data = _as_dict(data, "train seats response")
        return cls(
            date=str(data.get("date", "")),
            train_class=str(data["train_class"]),
            train_name=str(data["train_name"]),
            car_number=int(data["car_number"]),
            seats=[TrainSeat.from_dict(s) for s in _as_list(data.get("seats") or [], "seats")],
            cars=[TrainCar.from_dict(c) for c in _as_list(data.get("cars") or [], "cars")],
        )


@dataclass
class ReservationResponse:
    reservation_id: int
    amount: int = 0
    is_ok: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> ReservationResponse:
        data = _as_dict(data, "reservation response")
        return cls(
            reservation_id=int(data["reservation_id"]),
            amount=int(data.get("amount", 0)),
            is_ok=bool(data.get("is_ok", False)),
        )


@dataclass
class SeatReservation:
    reservation_id: int
    date: str = ""
    train_class: str = ""
    train_name: str = ""
    car_number: int = 0
    seat_class: str = ""
    amount: int = 0
    adult: int = 0
    child: int = 0
    departure: str = ""
    arrival: str = ""
    departure_time: str = ""
    arrival_time: str = ""
    seats: list[TrainSeat] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> SeatReservation:
        data = _as_dict(data, "reservation")
        return cls(
            reservation_id=int(data["reservation_id"]),
            date=str(data.get("date", "")),
            train_class=data.get("train_class", ""),
            train_name=data.get("train_name", ""),
            car_number=int(data.get("car_number", 0)),
            seat_class=data.get("seat_class", ""),
            amount=int(data.get("amount", 0)),
            adult=int(data.get("adult", 0)),
            child=int(data.get("child", 0)),
            departure=data.get("departure", ""),
            arrival=data.get("arrival", ""),
            departure_time=data.get("departure_time", ""),
            arrival_time=data.get("arrival_time", ""),
            seats=[TrainSeat.from_dict(s) for s in _as_list(data.get("seats") or [], "seats")],
        )


def decode_list(data: Any, item_type: type, name: str) -> list:
    """Decode a JSON array whose elements all decode via ``item_type.from_dict``."""
    return [item_type.from_dict(item) for item in _as_list(data, name)]
