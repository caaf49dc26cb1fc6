"""Chat endpoint that streams the assistant webhook's reply.

The reply body is passed through as plain text while it is produced; the
browser decodes frames from it incrementally.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from relay_chat.api.dependencies import get_webhook_relay
from relay_chat.models.schemas import ChatSubmission
from relay_chat.relay.exceptions import (
    EmptyWebhookResponseError,
    WebhookNotConfiguredError,
    WebhookStatusError,
    WebhookTransportError,
)
from relay_chat.relay.webhook_relay import WebhookRelay

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"


@router.post(
    "/chat",
    response_class=StreamingResponse,
    responses={200: {"content": {"text/plain": {}}}},
)
async def relay_chat_message(
    submission: ChatSubmission,
    relay: WebhookRelay = Depends(get_webhook_relay),
) -> StreamingResponse:
    """Forward a chat message and stream the reply.

    Args:
        submission: User id, user name and message text.
        relay: The application's webhook relay.

    Returns:
        StreamingResponse carrying the webhook's reply as it arrives.

    Raises:
        422: Missing fields, blank message or malformed JSON.
        500: Chat webhook not configured, or it returned no content.
        502: Chat webhook unreachable or answered with an error status.
    """
    try:
        stream = await relay.open_chat_stream(submission)
    except WebhookNotConfiguredError as e:
        logger.error(str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        ) from e
    except EmptyWebhookResponseError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        ) from e
    except (WebhookTransportError, WebhookStatusError) as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to reach the chat service",
        ) from e

    return StreamingResponse(
        stream,
        media_type=STREAM_MEDIA_TYPE,
        headers={"Cache-Control": "no-cache"},
        background=BackgroundTask(stream.aclose),
    )
