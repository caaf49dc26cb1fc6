"""Errors raised while relaying traffic to the configured webhooks."""


class RelayError(Exception):
    """Base class for relay failures surfaced to the client."""


class WebhookNotConfiguredError(RelayError):
    """Raised when a required webhook URL is missing."""


class WebhookTransportError(RelayError):
    """Raised when the webhook cannot be reached or the connection fails mid-stream."""


class WebhookStatusError(RelayError):
    """Raised when the webhook answers with a non-success status."""

    def __init__(self, status_code: int, details: str = "") -> None:
        super().__init__(f"Webhook responded with status {status_code}")
        self.status_code = status_code
        self.details = details


class EmptyWebhookResponseError(RelayError):
    """Raised when the webhook response carries no content at all."""
