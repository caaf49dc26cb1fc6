"""Webhook relay that streams assistant replies through to the browser.

The chat webhook answers with a long-lived body that is produced while the
assistant is still generating. The relay never materialises that body:
each upstream chunk is decoded, re-encoded and handed downstream as soon
as it arrives, so memory use is bounded by a single chunk.

Design notes:

1. **Stateful UTF-8 decoding** - chunk boundaries are arbitrary, so a
   multi-byte character can be split across two reads. An incremental
   decoder keeps the undecoded tail and completes it with the next chunk
   instead of emitting replacement characters.

2. **Prime before committing** - the first non-empty chunk is read before
   the caller starts a 200 response. Connection failures, error statuses
   and an upstream that sends nothing at all can still be reported as a
   proper JSON error instead of an empty stream.

3. **Errors propagate** - a failure after streaming started is raised out
   of the body iterator so the downstream connection is aborted rather
   than closed as if the reply were complete.
"""

import codecs
import logging
from collections.abc import AsyncGenerator, AsyncIterable

import httpx

from relay_chat.models.schemas import ChatSubmission
from relay_chat.relay.config import RelayConfig, get_relay_config
from relay_chat.relay.exceptions import (
    EmptyWebhookResponseError,
    WebhookStatusError,
    WebhookTransportError,
)

logger = logging.getLogger(__name__)

# Upstream error bodies are only kept for diagnostics
_MAX_ERROR_DETAIL = 2048


async def relay_chunks(
    chunks: AsyncIterable[bytes],
    encoding: str = "utf-8",
) -> AsyncGenerator[bytes]:
    """Re-emit a byte stream chunk by chunk with character-safe boundaries.

    Args:
        chunks: Upstream byte chunks in arrival order.
        encoding: Text encoding of the upstream body.

    Yields:
        UTF-8 encoded text for every chunk that completed at least one
        character. Bytes of an unfinished character are held back until
        the chunk that completes them arrives.
    """
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    async for chunk in chunks:
        text = decoder.decode(chunk)
        if text:
            yield text.encode("utf-8")
    tail = decoder.decode(b"", final=True)
    if tail:
        yield tail.encode("utf-8")


class ChatStream:
    """A streamed chat reply from the webhook.

    Iterate to receive the reply bytes; ``aclose`` releases the upstream
    response and its client and is safe to call more than once.
    """

    def __init__(
        self,
        first: bytes,
        chunks: AsyncGenerator[bytes],
        response: httpx.Response,
        client: httpx.AsyncClient,
    ) -> None:
        self._first = first
        self._chunks = chunks
        self._response = response
        self._client = client
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aiter__(self) -> AsyncGenerator[bytes]:
        try:
            yield self._first
            async for chunk in self._chunks:
                yield chunk
        except httpx.HTTPError as e:
            logger.error(f"Chat webhook stream failed: {e!r}")
            raise WebhookTransportError(f"Chat webhook stream failed: {e}") from e
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._chunks.aclose()
        finally:
            try:
                await self._response.aclose()
            finally:
                await self._client.aclose()
                logger.debug("Chat webhook stream closed")


class WebhookRelay:
    """Forwards chat messages and file uploads to the configured webhooks.

    A fresh ``httpx.AsyncClient`` is opened per request and closed together
    with the upstream response.
    """

    def __init__(
        self,
        config: RelayConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the relay.

        Args:
            config: Optional relay configuration.
                    Loads from environment if not provided.
            transport: Optional httpx transport, used to substitute the
                       network in tests.
        """
        self._config = config or get_relay_config()
        self._transport = transport

    @property
    def config(self) -> RelayConfig:
        return self._config

    def _create_client(self) -> httpx.AsyncClient:
        timeout = httpx.Timeout(
            self._config.read_timeout,
            connect=self._config.connect_timeout,
        )
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    async def open_chat_stream(self, submission: ChatSubmission) -> ChatStream:
        """Send a chat message upstream and return the streamed reply.

        Args:
            submission: The validated chat message.

        Returns:
            ChatStream positioned before its first chunk.

        Raises:
            WebhookNotConfiguredError: CHAT_WEBHOOK_URL is not set.
            WebhookTransportError: The webhook could not be reached.
            WebhookStatusError: The webhook answered with an error status.
            EmptyWebhookResponseError: The webhook answered without content.
        """
        url = self._config.require_chat_webhook()
        client = self._create_client()
        try:
            request = client.build_request("POST", url, json=submission.to_webhook_payload())
            response = await client.send(request, stream=True)
        except httpx.HTTPError as e:
            await client.aclose()
            logger.error(f"Failed to reach chat webhook: {e!r}")
            raise WebhookTransportError(f"Failed to reach chat webhook: {e}") from e

        chunks = relay_chunks(response.aiter_bytes(), response.encoding or "utf-8")
        try:
            if not response.is_success:
                details = await self._read_error_details(response)
                logger.error(f"Chat webhook error: {response.status_code} {details}")
                raise WebhookStatusError(response.status_code, details)

            try:
                first = await anext(chunks)
            except StopAsyncIteration:
                logger.error("Chat webhook returned an empty body")
                raise EmptyWebhookResponseError("No response from webhook service") from None
            except httpx.HTTPError as e:
                logger.error(f"Chat webhook stream failed before first chunk: {e!r}")
                raise WebhookTransportError(f"Chat webhook stream failed: {e}") from e
        except BaseException:
            await ChatStream(b"", chunks, response, client).aclose()
            raise

        logger.info(f"Streaming chat reply for user {submission.user_id}")
        return ChatStream(first, chunks, response, client)

    async def forward_upload(self, body: bytes, content_type: str) -> None:
        """Forward a buffered multipart upload to the files webhook.

        Args:
            body: The raw request body, forwarded byte-for-byte.
            content_type: The original Content-Type, including the boundary.

        Raises:
            WebhookNotConfiguredError: FILES_WEBHOOK_URL is not set.
            WebhookTransportError: The webhook could not be reached.
            WebhookStatusError: The webhook rejected the upload.
        """
        url = self._config.require_files_webhook()
        async with self._create_client() as client:
            try:
                response = await client.post(
                    url,
                    content=body,
                    headers={"Content-Type": content_type},
                )
            except httpx.HTTPError as e:
                logger.error(f"Failed to reach files webhook: {e!r}")
                raise WebhookTransportError(f"Failed to reach files webhook: {e}") from e

        if not response.is_success:
            details = response.text[:_MAX_ERROR_DETAIL]
            logger.error(f"Files webhook error: {response.status_code} {details}")
            raise WebhookStatusError(response.status_code, details)

        logger.info(f"Forwarded upload of {len(body)} bytes to files webhook")

    @staticmethod
    async def _read_error_details(response: httpx.Response) -> str:
        try:
            await response.aread()
        except httpx.HTTPError:
            return ""
        return response.text[:_MAX_ERROR_DETAIL]
