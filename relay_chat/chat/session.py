"""In-memory message log for one chat page.

History lives only as long as the page that created the store. The log is
written in exactly two ways: a user message is appended together with
its bot placeholder when a turn starts, and existing messages are updated
by id while the turn streams and when it ends.
"""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Sender(str, Enum):
    """Author of a chat message."""

    USER = "user"
    BOT = "bot"


class ChatMessage(BaseModel):
    """A single message in the chat log.

    Attributes:
        id: Identifier unique within the session, stable for the message's lifetime.
        sender: Who wrote the message.
        text: Message text; for bot replies it grows while streaming.
        timestamp: Creation time, refreshed on every streamed update.
        is_loading: True while the bot reply is still being produced.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    sender: Sender
    text: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)
    is_loading: bool = False


class TurnInProgressError(RuntimeError):
    """Raised when a message is submitted while another turn is active."""


class ChatSessionStore:
    """Ordered message log with one-turn-at-a-time submission."""

    def __init__(self, greeting: str | None = None) -> None:
        self._messages: list[ChatMessage] = []
        self._positions: dict[str, int] = {}
        self._active_message_id: str | None = None
        if greeting:
            self._append(ChatMessage(sender=Sender.BOT, text=greeting))

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    @property
    def is_busy(self) -> bool:
        """Whether a turn is pending or streaming."""
        return self._active_message_id is not None

    def _append(self, message: ChatMessage) -> None:
        self._positions[message.id] = len(self._messages)
        self._messages.append(message)

    def get(self, message_id: str) -> ChatMessage:
        return self._messages[self._positions[message_id]]

    def begin_turn(self, text: str) -> tuple[ChatMessage, ChatMessage]:
        """Append a user message and its loading bot placeholder.

        Both messages are appended in the same call so the log never shows
        a user message without its reply slot.

        Args:
            text: The text the user typed.

        Returns:
            The user message and the bot placeholder.

        Raises:
            TurnInProgressError: If another turn is still active.
            ValueError: If the text is blank.
        """
        if self.is_busy:
            raise TurnInProgressError("A message is already being answered")
        text = text.strip()
        if not text:
            raise ValueError("Message text must not be empty")

        now = datetime.now()
        user_message = ChatMessage(sender=Sender.USER, text=text, timestamp=now)
        placeholder = ChatMessage(sender=Sender.BOT, text="", timestamp=now, is_loading=True)
        self._append(user_message)
        self._append(placeholder)
        self._active_message_id = placeholder.id
        return user_message, placeholder

    def update_message(self, message_id: str, **changes: object) -> ChatMessage:
        """Replace fields of an existing message, keeping its id.

        Raises:
            KeyError: If no message has this id.
            ValueError: If the change would alter the id.
        """
        if "id" in changes:
            raise ValueError("Message ids cannot be changed")
        position = self._positions[message_id]
        updated = self._messages[position].model_copy(update=changes)
        self._messages[position] = updated
        return updated

    def end_turn(self, message_id: str) -> None:
        """Release the turn lock held by the given bot placeholder."""
        if self._active_message_id == message_id:
            self._active_message_id = None

    def clear(self) -> None:
        """Drop the history to start a new conversation.

        Raises:
            TurnInProgressError: If a turn is still active.
        """
        if self.is_busy:
            raise TurnInProgressError("Cannot clear the chat while a message is being answered")
        self._messages.clear()
        self._positions.clear()
