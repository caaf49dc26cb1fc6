"""FastAPI dependencies resolving per-application services."""

from fastapi import Request

from relay_chat.auth.directory import UserDirectory
from relay_chat.relay.webhook_relay import WebhookRelay


def get_webhook_relay(request: Request) -> WebhookRelay:
    """Return the relay created for this application."""
    return request.app.state.relay


def get_user_directory(request: Request) -> UserDirectory:
    """Return the login directory created for this application."""
    return request.app.state.users
