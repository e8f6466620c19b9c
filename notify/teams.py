"""Microsoft Teams incoming-webhook notifications."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol

import requests

from diagnostics import safe_dumps
from models import Failure, classify_response
from notify.errors import (
    MissingArgumentError,
    TransportFailureError,
    UnacceptableResponseError,
)

ADAPTIVE_CARD_CONTENT_TYPE = "application/vnd.microsoft.card.adaptive"
FAILURE_PREFIX = "Failed to send notification to Microsoft Teams"


class Transport(Protocol):
    def send_raw_adaptive_card(self, card: Any) -> Any:
        ...


TransportFactory = Callable[[str], Transport]


def build_card_message(card: Any) -> dict:
    """Wrap an adaptive card in the message envelope Teams expects."""
    return {
        "type": "message",
        "attachments": [
            {
                "contentType": ADAPTIVE_CARD_CONTENT_TYPE,
                "contentUrl": None,
                "content": card,
            }
        ],
    }


class IncomingWebhook:
    """Post messages to a single Teams incoming-webhook URL."""

    def __init__(
        self,
        url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.url = url
        self.session = session
        self.timeout = timeout

    def send(self, message: Any) -> dict:
        """
        POST ``message`` as JSON and describe the response as a plain mapping.

        Error statuses are returned rather than raised; network errors propagate.
        """
        client = self.session or requests
        response = client.post(self.url, json=message, timeout=self.timeout)
        try:
            data: Any = response.json()
        except ValueError:
            # Teams answers "1" or an empty body on success, which is not JSON.
            data = response.text
        return {
            "status": response.status_code,
            "statusText": response.reason,
            "headers": dict(response.headers),
            "data": data,
        }

    def send_raw_adaptive_card(self, card: Any) -> dict:
        return self.send(build_card_message(card))


class TeamsNotifier:
    """Deliver one payload per call through a transport built for the target URL."""

    def __init__(self, transport_factory: TransportFactory = IncomingWebhook) -> None:
        self.transport_factory = transport_factory

    def notify(self, url: Optional[str], payload: Any) -> None:
        """
        Send ``payload`` to ``url`` or raise a NotificationError subclass.

        Arguments are checked before any transport is created. The transport is
        called exactly once; any 2xx status counts as delivered.
        """
        if not isinstance(url, str) or not url.strip():
            raise MissingArgumentError("missing webhook URL")
        if payload is None:
            raise MissingArgumentError("missing payload")

        try:
            transport = self.transport_factory(url)
            response = transport.send_raw_adaptive_card(payload)
        except Exception as exc:
            raise TransportFailureError(f"{FAILURE_PREFIX}: {safe_dumps(exc)}") from exc

        result = classify_response(response)
        if isinstance(result, Failure):
            raise UnacceptableResponseError(
                f"{FAILURE_PREFIX}: {safe_dumps(result.reason)}",
                response=result.reason,
            )


_default_notifier = TeamsNotifier()


def notify(url: Optional[str], payload: Any) -> None:
    """Send ``payload`` to ``url`` with the default requests-backed transport."""
    _default_notifier.notify(url, payload)
