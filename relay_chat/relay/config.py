"""Relay configuration with environment variable loading.

Pydantic-based configuration for the webhook relay and the login
directory. Values are resolved once when the application is created and
passed explicitly to the handlers that need them.
"""

import json
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, TypeAdapter, field_validator

from relay_chat.relay.exceptions import WebhookNotConfiguredError

# Load environment variables from .env file
load_dotenv()


class UserCredential(BaseModel):
    """A login credential mapped to the identity it unlocks.

    Attributes:
        id: User identifier returned on successful login.
        name: Display name returned on successful login.
        pin: The user's PIN.
        email: Optional email that must accompany the PIN.
    """

    id: str
    name: str
    pin: str = Field(..., min_length=1)
    email: str | None = None


def _users_from_env() -> list[UserCredential]:
    raw = os.getenv("AUTH_USERS", "").strip()
    if not raw:
        return []
    return TypeAdapter(list[UserCredential]).validate_python(json.loads(raw))


def _float_from_env(name: str, default: float) -> float:
    value = os.getenv(name, "").strip()
    return float(value) if value else default


class RelayConfig(BaseModel):
    """Configuration for the webhook relay.

    Attributes:
        chat_webhook_url: Upstream URL that streams assistant replies.
        files_webhook_url: Upstream URL that receives file uploads.
        connect_timeout: Seconds allowed to connect to a webhook.
        read_timeout: Seconds allowed between two reads of a webhook response.
        users: Credentials accepted by the login endpoint.
    """

    chat_webhook_url: str | None = Field(
        default_factory=lambda: os.getenv("CHAT_WEBHOOK_URL"),
        description="Webhook that answers chat messages with a streamed body",
    )
    files_webhook_url: str | None = Field(
        default_factory=lambda: os.getenv("FILES_WEBHOOK_URL"),
        description="Webhook that receives multipart file uploads",
    )
    connect_timeout: float = Field(
        default_factory=lambda: _float_from_env("WEBHOOK_CONNECT_TIMEOUT", 10.0),
        gt=0,
        description="Connect timeout for webhook requests, in seconds",
    )
    read_timeout: float = Field(
        default_factory=lambda: _float_from_env("WEBHOOK_READ_TIMEOUT", 120.0),
        gt=0,
        description="Maximum wait for the next chunk of a webhook response, in seconds",
    )
    users: list[UserCredential] = Field(
        default_factory=_users_from_env,
        description="Credentials accepted by the login endpoint",
    )

    @field_validator("chat_webhook_url", "files_webhook_url")
    @classmethod
    def validate_webhook_url(cls, v: str | None) -> str | None:
        """Treat blank URLs as unset and reject non-HTTP schemes."""
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Webhook URL must be an http(s) URL, got {v!r}")
        return v

    def require_chat_webhook(self) -> str:
        """Return the chat webhook URL.

        Raises:
            WebhookNotConfiguredError: If CHAT_WEBHOOK_URL is not set.
        """
        if self.chat_webhook_url is None:
            raise WebhookNotConfiguredError("Chat webhook URL is not configured")
        return self.chat_webhook_url

    def require_files_webhook(self) -> str:
        """Return the files webhook URL.

        Raises:
            WebhookNotConfiguredError: If FILES_WEBHOOK_URL is not set.
        """
        if self.files_webhook_url is None:
            raise WebhookNotConfiguredError("File webhook URL is not configured")
        return self.files_webhook_url


def get_relay_config() -> RelayConfig:
    """Create relay configuration from environment.

    Returns:
        Configured RelayConfig instance.

    Raises:
        ValidationError: If a configured value is malformed.
    """
    return RelayConfig()
