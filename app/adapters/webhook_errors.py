"""Project-native typed exceptions for webhook delivery failures."""

from __future__ import annotations


class WebhookDeliveryError(Exception):
    """Base exception for webhook delivery failures.

    Attributes:
        event_type: Event type of the failed delivery.
        status_code: Optional HTTP status returned by the listener.
    """

    def __init__(self, message: str, event_type: str, status_code: int | None = None):
        super().__init__(message)
        self.event_type = event_type
        self.status_code = status_code


class WebhookConnectionError(WebhookDeliveryError, ConnectionError):
    """Transport-level connectivity failure while posting a webhook event."""


class WebhookTimeoutError(WebhookDeliveryError, TimeoutError):
    """Webhook listener did not answer within the configured timeout."""


class WebhookStatusError(WebhookDeliveryError):
    """Webhook listener answered with a non-success HTTP status."""
