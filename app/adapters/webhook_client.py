"""httpx-based webhook delivery adapter."""

from __future__ import annotations

import json
from typing import Any, Final

import httpx

from .interfaces import WebhookDeliveryPort, WebhookDeliveryResult
from .webhook_errors import (
    WebhookConnectionError,
    WebhookDeliveryError,
    WebhookStatusError,
    WebhookTimeoutError,
)


class HttpxWebhookDeliveryAdapter(WebhookDeliveryPort):
    """Adapter posting normalized records as a JSON array to one fixed listener URL.

    Each event is attempted exactly once. The event type and timestamp travel as
    headers so the body stays a plain array of normalized records.
    """

    _USER_AGENT: Final[str] = "qbwc-webhook-adapter/1.0 (Python/httpx)"
    EVENT_HEADER: Final[str] = "X-Adapter-Event"
    TIMESTAMP_HEADER: Final[str] = "X-Adapter-Timestamp"

    def __init__(
        self,
        webhook_url: str,
        timeout_seconds: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize webhook delivery adapter.

        Args:
            webhook_url: Listener URL receiving every event.
            timeout_seconds: Request timeout in seconds.
            transport: Optional httpx transport override.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_webhook_url = (webhook_url or "").strip()
        if not normalized_webhook_url:
            raise ValueError("webhook_url must not be blank")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")

        self._webhook_url = normalized_webhook_url
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    def adapter_target_label(self) -> str:
        """Return the configured listener URL without query string.

        Returns:
            str: Delivery target label.
        """

        return self._webhook_url.split("?", maxsplit=1)[0]

    def adapter_deliver(self, event_type: str, records: list[dict[str, Any]], timestamp: str) -> WebhookDeliveryResult:
        """Post one event to the listener.

        Args:
            event_type: Event type identifier.
            records: Normalized records sent as the JSON array body.
            timestamp: Event timestamp in UTC ISO-8601.

        Returns:
            WebhookDeliveryResult: Delivery outcome for a 2xx answer.

        Raises:
            WebhookTimeoutError: Raised when the listener does not answer in time.
            WebhookConnectionError: Raised on transport failures and unusable URLs.
            WebhookStatusError: Raised on non-success HTTP status.
            WebhookDeliveryError: Raised when records cannot be serialized.
        """

        try:
            body = json.dumps(records).encode("utf-8")
        except (TypeError, ValueError) as error:
            raise WebhookDeliveryError(f"webhook payload is not JSON-serializable: {error}", event_type) from error

        headers = {
            "Content-Type": "application/json",
            "User-Agent": self._USER_AGENT,
            self.EVENT_HEADER: event_type,
            self.TIMESTAMP_HEADER: timestamp,
        }

        try:
            with httpx.Client(timeout=self._timeout_seconds, transport=self._transport) as client:
                response = client.post(self._webhook_url, content=body, headers=headers)
        except httpx.TimeoutException as error:
            raise WebhookTimeoutError(
                f"webhook delivery timed out after {self._timeout_seconds}s",
                event_type,
            ) from error
        except httpx.HTTPError as error:
            raise WebhookConnectionError(f"webhook transport request failed: {error}", event_type) from error
        except httpx.InvalidURL as error:
            # not an HTTPError subclass, raised while the request is built
            raise WebhookConnectionError(f"webhook URL is invalid: {error}", event_type) from error

        if not response.is_success:
            raise WebhookStatusError(
                f"webhook listener returned HTTP {response.status_code}",
                event_type,
                status_code=response.status_code,
            )

        return WebhookDeliveryResult(
            event_type=event_type,
            status_code=response.status_code,
            record_count=len(records),
        )
