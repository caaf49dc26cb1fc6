"""Incremental decoder for the assistant's reply stream.

The chat webhook writes one JSON object per line, ``{"type": "item",
"content": "..."}``, but its framing is not fully reliable: objects can
land on one line with no separator between them, and some lines are
plain text instead of JSON. The decoder turns whatever arrives into the
text shown in the bot's message.

Rules applied to every chunk:

1. Lines are only parsed once their terminator (``\\n``, optionally
   preceded by ``\\r``) has arrived. The unterminated tail waits in the
   residual buffer for the next chunk.
2. A line holding several objects back to back (``}{``) is split at the
   boundaries between balanced top-level objects.
3. ``item`` frames append their ``content``. Other well-formed records
   are ignored.
4. A fragment that is not JSON is appended verbatim unless it mentions
   the ``"type"`` key, in which case it is a broken frame and is dropped.

The accumulated text only ever grows, so a bad fragment never costs
text that was already shown.
"""

import json
import logging
from dataclasses import dataclass, replace

from pydantic import ValidationError

from relay_chat.models.schemas import StreamFrame

logger = logging.getLogger(__name__)

DISCRIMINATOR_KEY = '"type"'


@dataclass(frozen=True)
class StreamSession:
    """Decoder state for one chat turn.

    Attributes:
        residual_buffer: Received text that does not yet end in a newline.
        accumulated_text: Display text reconstructed so far.
        terminal: Whether the stream has ended.
        skipped_fragments: Broken frames dropped so far.
    """

    residual_buffer: str = ""
    accumulated_text: str = ""
    terminal: bool = False
    skipped_fragments: int = 0


def split_frames(line: str) -> list[str]:
    """Split a line at the boundaries between back-to-back JSON objects.

    Braces inside string literals and unbalanced braces in plain text
    never produce a split, so ``"x}{y"`` inside a frame's content survives.
    Joining the returned fragments always yields the original line.

    Args:
        line: One complete line of the stream.

    Returns:
        The candidate fragments in order.
    """
    fragments: list[str] = []
    start = 0
    depth = 0
    in_string = False
    escaped = False

    for index, char in enumerate(line):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"' and depth > 0:
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0 and line.startswith("{", index + 1):
                fragments.append(line[start : index + 1])
                start = index + 1

    fragments.append(line[start:])
    return fragments


def _frame_content(record: object) -> str:
    if not isinstance(record, dict) or record.get("type") != "item":
        return ""
    try:
        return StreamFrame.model_validate(record).content
    except ValidationError:
        return ""


def _consume_line(session: StreamSession, line: str) -> StreamSession:
    if not line.strip():
        return session

    text = session.accumulated_text
    skipped = session.skipped_fragments
    for fragment in split_frames(line):
        if not fragment.strip():
            continue
        try:
            record = json.loads(fragment)
        except ValueError:
            if DISCRIMINATOR_KEY in fragment:
                skipped += 1
                logger.debug(f"Dropped malformed frame: {fragment!r}")
            else:
                text += fragment
            continue
        text += _frame_content(record)

    return replace(session, accumulated_text=text, skipped_fragments=skipped)


def feed(session: StreamSession, chunk: str) -> tuple[StreamSession, str]:
    """Process one chunk of stream text.

    Args:
        session: State after the previous chunk.
        chunk: Newly received text; its boundaries need not match lines.

    Returns:
        The new state and the accumulated display text.
    """
    *ready, residual = (session.residual_buffer + chunk).split("\n")
    session = replace(session, residual_buffer=residual)
    for line in ready:
        session = _consume_line(session, line.removesuffix("\r"))
    return session, session.accumulated_text


def finish(session: StreamSession) -> tuple[StreamSession, str]:
    """Close the stream, treating any unterminated tail as a final line."""
    residual = session.residual_buffer
    session = replace(session, residual_buffer="", terminal=True)
    session = _consume_line(session, residual.removesuffix("\r"))
    return session, session.accumulated_text


class FrameDecoder:
    """Stateful wrapper around :func:`feed` and :func:`finish` for one turn."""

    def __init__(self) -> None:
        self.session = StreamSession()

    @property
    def text(self) -> str:
        return self.session.accumulated_text

    @property
    def terminal(self) -> bool:
        return self.session.terminal

    def feed(self, chunk: str) -> str:
        if self.session.terminal:
            raise RuntimeError("Cannot feed a finished stream")
        self.session, text = feed(self.session, chunk)
        return text

    def finish(self) -> str:
        if not self.session.terminal:
            self.session, _ = finish(self.session)
            if self.session.skipped_fragments:
                logger.info(
                    f"Stream finished with {self.session.skipped_fragments} dropped fragment(s)"
                )
        return self.session.accumulated_text
