"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from relay_chat import __version__
from relay_chat.api.chat import router as chat_router
from relay_chat.api.files import router as files_router
from relay_chat.api.login import router as login_router
from relay_chat.auth.directory import UserDirectory
from relay_chat.relay.config import RelayConfig, get_relay_config
from relay_chat.relay.webhook_relay import WebhookRelay

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    config: RelayConfig = app.state.relay.config
    logger.info("Starting chat relay...")
    if config.chat_webhook_url is None:
        logger.warning("CHAT_WEBHOOK_URL is not set; chat requests will fail")
    if config.files_webhook_url is None:
        logger.warning("FILES_WEBHOOK_URL is not set; file uploads will fail")
    logger.info(f"Login directory holds {len(app.state.users)} user(s)")
    yield
    logger.info("Shutting down chat relay...")


def create_app(
    config: RelayConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Relay configuration; loaded from the environment if omitted.
        transport: Optional httpx transport for webhook traffic.

    Returns:
        Configured FastAPI application instance.
    """
    config = config or get_relay_config()

    application = FastAPI(
        title="Relay Chat API",
        description=(
            "Relays chat messages to an assistant webhook and streams the reply "
            "back as it is generated. Also forwards file uploads and handles "
            "PIN login."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.state.relay = WebhookRelay(config, transport=transport)
    application.state.users = UserDirectory(config.users)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.include_router(chat_router)
    application.include_router(files_router)
    application.include_router(login_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "relay-chat"}

    return application


app = create_app()
