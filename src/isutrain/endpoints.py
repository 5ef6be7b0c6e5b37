"""
Logical endpoints of the isutrain web service and their path templates.

Dynamic endpoints embed a reservation id in the concrete path; their
metrics are aggregated under the endpoint, never under the resolved path.
"""

from __future__ import annotations

import enum


class Endpoint(enum.Enum):
    """(HTTP method, path template) per remote capability."""

    INITIALIZE = ("POST", "/initialize")
    SETTINGS = ("GET", "/api/settings")
    SIGNUP = ("POST", "/api/auth/signup")
    LOGIN = ("POST", "/api/auth/login")
    LOGOUT = ("POST", "/api/auth/logout")
    LIST_STATIONS = ("GET", "/api/stations")
    SEARCH_TRAINS = ("GET", "/api/train/search")
    LIST_TRAIN_SEATS = ("GET", "/api/train/seats")
    RESERVE = ("POST", "/api/train/reserve")
    COMMIT_RESERVATION = ("POST", "/api/train/reservation/commit")
    LIST_RESERVATIONS = ("GET", "/api/user/reservations")
    SHOW_RESERVATION = ("GET", "/api/user/reservations/{reservation_id}")
    CANCEL_RESERVATION = ("POST", "/api/user/reservations/{reservation_id}/cancel")

    @property
    def method(self) -> str:
        return self.value[0]

    @property
    def template(self) -> str:
        return self.value[1]

    @property
    def dynamic(self) -> bool:
        return "{" in self.template


def path(endpoint: Endpoint) -> str:
    """
    Concrete path of a static endpoint.

    Raises:
        ValueError: If ``endpoint`` is dynamic.
    """
    if endpoint.dynamic:
        raise ValueError(f"{endpoint.name} is dynamic; use dynamic_path()")
    return endpoint.template


def dynamic_path(endpoint: Endpoint, reservation_id: int) -> str:
    """
    Concrete path of a dynamic endpoint for one reservation id.

    Raises:
        ValueError: If ``endpoint`` is static.
    """
    if not endpoint.dynamic:
        raise ValueError(f"{endpoint.name} is static; use path()")
    return endpoint.template.format(reservation_id=int(reservation_id))
