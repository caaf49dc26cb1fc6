"""File upload endpoint.

Buffers the multipart body sent by the browser and forwards it unchanged
to the files webhook. Uploads never travel over the chat stream.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from relay_chat.api.dependencies import get_webhook_relay
from relay_chat.models.schemas import UploadResponse
from relay_chat.relay.exceptions import (
    WebhookNotConfiguredError,
    WebhookStatusError,
    WebhookTransportError,
)
from relay_chat.relay.webhook_relay import WebhookRelay

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["files"])

MAX_UPLOAD_SIZE = 50 * 1024 * 1024  # 50MB


def _validate_content_type(content_type: str | None) -> str:
    """Validate that the upload declares its content type.

    Args:
        content_type: The request's Content-Type header.

    Returns:
        The content type, boundary included.

    Raises:
        HTTPException: 400 if the header is missing.
    """
    if not content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Content-Type header is required",
        )
    return content_type


async def _read_and_validate_body(request: Request) -> bytes:
    """Read the raw upload body and validate its size.

    Raises:
        HTTPException: 400 if the body is empty, 413 if it is too large.
    """
    body = await request.body()

    if not body:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body is empty",
        )

    if len(body) > MAX_UPLOAD_SIZE:
        size_mb = len(body) / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"Upload size ({size_mb:.1f}MB) exceeds maximum allowed (50MB)",
        )

    return body


@router.post("/files", response_model=UploadResponse)
async def upload_files(
    request: Request,
    relay: WebhookRelay = Depends(get_webhook_relay),
) -> UploadResponse | JSONResponse:
    """Forward an upload to the files webhook.

    Returns:
        UploadResponse with success=True, or the webhook's failure status
        with its error details.

    Raises:
        400: Missing Content-Type or empty body.
        413: Body exceeds 50MB.
        500: Files webhook not configured.
        502: Files webhook unreachable.
    """
    content_type = _validate_content_type(request.headers.get("content-type"))
    body = await _read_and_validate_body(request)

    try:
        await relay.forward_upload(body, content_type)
    except WebhookNotConfiguredError as e:
        logger.error(str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        ) from e
    except WebhookTransportError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to reach the files service",
        ) from e
    except WebhookStatusError as e:
        failure = UploadResponse(
            success=False,
            error="Webhook processing failed",
            details=e.details,
        )
        return JSONResponse(status_code=e.status_code, content=failure.model_dump())

    return UploadResponse(success=True)
