"""Webhook relay for chat replies and file uploads.

Responsibilities:
    - Forwarding chat submissions to the chat webhook
    - Streaming the webhook's reply downstream without buffering it
    - Forwarding buffered multipart uploads to the files webhook
    - Mapping upstream failures onto a small exception hierarchy

Keeps all webhook I/O out of the HTTP routing layer.
"""

from relay_chat.relay.config import RelayConfig, UserCredential, get_relay_config
from relay_chat.relay.exceptions import (
    EmptyWebhookResponseError,
    RelayError,
    WebhookNotConfiguredError,
    WebhookStatusError,
    WebhookTransportError,
)
from relay_chat.relay.webhook_relay import ChatStream, WebhookRelay, relay_chunks

__all__ = [
    "ChatStream",
    "EmptyWebhookResponseError",
    "RelayConfig",
    "RelayError",
    "UserCredential",
    "WebhookNotConfiguredError",
    "WebhookRelay",
    "WebhookStatusError",
    "WebhookTransportError",
    "get_relay_config",
    "relay_chunks",
]
