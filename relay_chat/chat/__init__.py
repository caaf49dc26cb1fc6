"""Client side of the chat: decoding the reply stream into display text.

Responsibilities:
    - Incremental decoding of unreliably framed reply streams
    - The per-turn state machine (pending, streaming, finalized, errored)
    - The page's in-memory message log and one-turn-at-a-time guard
"""

from relay_chat.chat.decoder import FrameDecoder, StreamSession, split_frames
from relay_chat.chat.session import (
    ChatMessage,
    ChatSessionStore,
    Sender,
    TurnInProgressError,
)
from relay_chat.chat.turn import (
    CONNECTION_ERROR_TEXT,
    ChatTurn,
    TurnState,
    submit_message,
)

__all__ = [
    "CONNECTION_ERROR_TEXT",
    "ChatMessage",
    "ChatSessionStore",
    "ChatTurn",
    "FrameDecoder",
    "Sender",
    "StreamSession",
    "TurnInProgressError",
    "TurnState",
    "split_frames",
    "submit_message",
]
