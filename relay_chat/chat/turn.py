"""One request/response cycle of the chat.

A turn moves through ``PENDING -> STREAMING -> FINALIZED``, or ends in
``ERRORED`` if the relay cannot be reached, answers with an error status,
or drops the connection mid-reply. On error the partial reply is replaced
by a fixed message so a truncated answer is never presented as complete.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from enum import Enum

import httpx

from relay_chat.chat.decoder import FrameDecoder
from relay_chat.chat.session import ChatMessage, ChatSessionStore
from relay_chat.models.schemas import ChatSubmission, UserRecord

logger = logging.getLogger(__name__)

CHAT_ENDPOINT = "/api/chat"
CONNECTION_ERROR_TEXT = (
    "There was an error connecting to the server. Please try again later."
)


class TurnState(str, Enum):
    """Lifecycle states of a chat turn."""

    PENDING = "pending"
    STREAMING = "streaming"
    FINALIZED = "finalized"
    ERRORED = "errored"


class ChatTurn:
    """Drives one chat message through the relay and into the message log.

    Creating a turn immediately appends the user message and the bot
    placeholder to the store; :meth:`run` sends the request and streams the
    reply into the placeholder.
    """

    def __init__(
        self,
        store: ChatSessionStore,
        client: httpx.AsyncClient,
        user: UserRecord,
        text: str,
        *,
        endpoint: str = CHAT_ENDPOINT,
        on_update: Callable[[ChatMessage], None] | None = None,
    ) -> None:
        """Start a turn.

        Args:
            store: The session's message log.
            client: HTTP client pointed at the relay.
            user: The submitting user.
            text: The message text.
            endpoint: Relay path or URL for chat submissions.
            on_update: Called with the bot message after every change.

        Raises:
            TurnInProgressError: If the store already has an active turn.
            ValueError: If the text is blank.
        """
        self._store = store
        self._client = client
        self._user = user
        self._endpoint = endpoint
        self._on_update = on_update
        self._decoder = FrameDecoder()
        self.user_message, placeholder = store.begin_turn(text)
        self.bot_message_id = placeholder.id
        self.state = TurnState.PENDING

    @property
    def bot_message(self) -> ChatMessage:
        return self._store.get(self.bot_message_id)

    async def run(self) -> TurnState:
        """Send the message and stream the reply.

        Returns:
            The terminal state, FINALIZED or ERRORED.
        """
        if self.state is not TurnState.PENDING:
            raise RuntimeError("A chat turn can only run once")

        submission = ChatSubmission(
            user_id=self._user.id,
            user_name=self._user.name,
            message=self.user_message.text,
        )
        try:
            async with self._client.stream(
                "POST",
                self._endpoint,
                json=submission.to_webhook_payload(),
            ) as response:
                if not response.is_success:
                    logger.error(f"Chat relay responded with status {response.status_code}")
                    self._fail()
                    return self.state

                async for chunk in response.aiter_text():
                    self.state = TurnState.STREAMING
                    self._publish(self._decoder.feed(chunk), is_loading=True)

                if self.state is not TurnState.STREAMING:
                    logger.error("Chat relay response had no body")
                    self._fail()
                    return self.state

                self._publish(self._decoder.finish(), is_loading=False)
                self.state = TurnState.FINALIZED
        except httpx.HTTPError as e:
            logger.error(f"Chat turn failed: {e!r}")
            self._fail()
        except (asyncio.CancelledError, Exception):
            logger.exception("Chat turn aborted")
            self._fail()
            raise
        finally:
            self._store.end_turn(self.bot_message_id)

        return self.state

    def _publish(self, text: str, *, is_loading: bool) -> None:
        message = self._store.update_message(
            self.bot_message_id,
            text=text,
            is_loading=is_loading,
            timestamp=datetime.now(),
        )
        if self._on_update is not None:
            self._on_update(message)

    def _fail(self) -> None:
        self.state = TurnState.ERRORED
        self._publish(CONNECTION_ERROR_TEXT, is_loading=False)


async def submit_message(
    store: ChatSessionStore,
    client: httpx.AsyncClient,
    user: UserRecord,
    text: str,
    on_update: Callable[[ChatMessage], None] | None = None,
) -> ChatTurn:
    """Start a turn for ``text`` and run it to completion.

    Raises:
        TurnInProgressError: If another turn is active; no request is sent.
    """
    turn = ChatTurn(store, client, user, text, on_update=on_update)
    await turn.run()
    return turn
