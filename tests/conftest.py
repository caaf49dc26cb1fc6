"""Pytest fixtures and shared test configuration.

Fixtures:
    - relay_config: Configuration pointing at stub webhooks
    - webhook: Stub that plays the chat and files webhooks
    - app: FastAPI app wired to the stub webhook
    - async_client: HTTPX client for API testing
    - test_user: Identity used for chat submissions
"""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from relay_chat.api.app import create_app
from relay_chat.models.schemas import UserRecord
from relay_chat.relay.config import RelayConfig, UserCredential
from tests.stubs import WebhookStub

CHAT_WEBHOOK_URL = "http://webhooks.test/chat"
FILES_WEBHOOK_URL = "http://webhooks.test/files"


@pytest.fixture
def relay_config() -> RelayConfig:
    """Return configuration with both webhooks and two users set.

    Returns:
        RelayConfig independent of the process environment.
    """
    return RelayConfig(
        chat_webhook_url=CHAT_WEBHOOK_URL,
        files_webhook_url=FILES_WEBHOOK_URL,
        connect_timeout=5.0,
        read_timeout=5.0,
        users=[
            UserCredential(id="user1", name="Gerard", pin="1234"),
            UserCredential(id="user2", name="Jordi", pin="1111", email="jordi@example.com"),
        ],
    )


@pytest.fixture
def webhook() -> WebhookStub:
    """Return a fresh webhook stub answering with an empty 200."""
    return WebhookStub()


@pytest.fixture
def app(relay_config: RelayConfig, webhook: WebhookStub) -> FastAPI:
    """Create the FastAPI app with webhook traffic routed to the stub."""
    return create_app(relay_config, transport=webhook.transport)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def test_user() -> UserRecord:
    """Return the user submitting chat messages."""
    return UserRecord(id="user1", name="Gerard")
