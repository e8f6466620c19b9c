"""Delivery result models used across teams-notify."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

SUCCESS_STATUS_MIN = 200
SUCCESS_STATUS_MAX = 299
STATUS_FIELDS = ("status", "status_code")


@dataclass(frozen=True)
class Success:
    """The webhook accepted the message."""

    status: int


@dataclass(frozen=True)
class Failure:
    """The webhook answered with something we cannot treat as delivered."""

    reason: Any


DeliveryResult = Union[Success, Failure]


def _read_status(response: Any) -> Optional[Any]:
    if response is None:
        return None
    for field in STATUS_FIELDS:
        if isinstance(response, Mapping):
            if field in response:
                return response[field]
        elif hasattr(response, field):
            return getattr(response, field)
    return None


def classify_response(response: Any) -> DeliveryResult:
    """Return Success only for an integer status in the 2xx range."""
    status = _read_status(response)
    # bool is an int subclass, but True is not a status code.
    if isinstance(status, int) and not isinstance(status, bool):
        if SUCCESS_STATUS_MIN <= status <= SUCCESS_STATUS_MAX:
            return Success(status=status)
    return Failure(reason=response)
