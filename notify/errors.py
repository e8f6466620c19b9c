"""Errors raised when a notification cannot be delivered."""

from __future__ import annotations


class NotificationError(RuntimeError):
    """Base error for every failed notification."""


class MissingArgumentError(NotificationError):
    """The webhook URL or the payload was not provided."""


class TransportFailureError(NotificationError):
    """The transport raised while sending the payload."""


class UnacceptableResponseError(NotificationError):
    """The webhook answered without a 2xx status."""

    def __init__(self, message: str, response: object) -> None:
        super().__init__(message)
        self.response = response
