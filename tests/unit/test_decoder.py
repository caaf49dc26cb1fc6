"""Unit tests for the incremental frame decoder."""

import pytest
import pytest_check as check

from relay_chat.chat.decoder import FrameDecoder, StreamSession, feed, finish, split_frames

ITEM_A = '{"type":"item","content":"A"}'
ITEM_B = '{"type":"item","content":"B"}'


class TestSplitFrames:
    """Tests for splitting back-to-back objects."""

    def test_splits_concatenated_objects(self) -> None:
        """Objects written without a separator become separate fragments."""
        assert split_frames(ITEM_A + ITEM_B) == [ITEM_A, ITEM_B]

    def test_single_object_is_untouched(self) -> None:
        """A lone object yields one fragment."""
        assert split_frames(ITEM_A) == [ITEM_A]

    def test_ignores_boundary_inside_string(self) -> None:
        """A literal }{ inside a JSON string does not split the object."""
        line = '{"type":"item","content":"x}{y"}'

        assert split_frames(line) == [line]

    def test_ignores_escaped_quote_in_string(self) -> None:
        """Escaped quotes do not end the string early."""
        line = '{"type":"item","content":"say \\"}{\\""}'

        assert split_frames(line) == [line]

    def test_plain_text_with_braces_is_untouched(self) -> None:
        """Unbalanced braces in plain text never produce a split."""
        assert split_frames("a}{b") == ["a}{b"]

    def test_nested_objects_split_at_top_level_only(self) -> None:
        """Boundaries inside nested objects are not split."""
        nested = '{"type":"meta","data":{"a":{}}}'

        assert split_frames(nested + ITEM_A) == [nested, ITEM_A]

    def test_fragments_rejoin_to_original(self) -> None:
        """Joining fragments always reproduces the line."""
        line = "text " + ITEM_A + ITEM_B + " tail"

        assert "".join(split_frames(line)) == line


class TestFeed:
    """Tests for chunk-by-chunk decoding."""

    def test_appends_item_content(self) -> None:
        """An item frame's content becomes display text."""
        decoder = FrameDecoder()

        assert decoder.feed(ITEM_A + "\n") == "A"

    def test_concatenated_frames_on_one_line(self) -> None:
        """Two objects on one line yield both contents in order."""
        decoder = FrameDecoder()

        assert decoder.feed(ITEM_A + ITEM_B + "\n") == "AB"

    def test_partial_line_is_deferred(self) -> None:
        """A chunk without a terminator leaves the text unchanged."""
        decoder = FrameDecoder()
        decoder.feed(ITEM_A + "\n")

        text = decoder.feed('{"type":"item","con')

        check.equal(text, "A")
        check.equal(decoder.session.residual_buffer, '{"type":"item","con')

    def test_split_line_matches_single_delivery(self) -> None:
        """A line split across chunks decodes as if it arrived whole."""
        whole = FrameDecoder()
        split = FrameDecoder()
        payload = ITEM_A + "\n" + ITEM_B + "\n"

        whole.feed(payload)
        split.feed(payload[:17])
        split.feed(payload[17:40])
        split.feed(payload[40:])

        assert split.text == whole.text == "AB"

    def test_tolerates_crlf(self) -> None:
        """Lines terminated by \\r\\n are parsed like \\n lines."""
        decoder = FrameDecoder()

        assert decoder.feed(ITEM_A + "\r\n" + ITEM_B + "\r\n") == "AB"

    def test_crlf_split_between_chunks(self) -> None:
        """A \\r at the end of one chunk and \\n in the next still ends the line."""
        decoder = FrameDecoder()
        decoder.feed(ITEM_A + "\r")

        assert decoder.feed("\n") == "A"

    def test_blank_lines_are_skipped(self) -> None:
        """Empty lines between frames add nothing."""
        decoder = FrameDecoder()

        assert decoder.feed("\n\n" + ITEM_A + "\n   \n") == "A"

    def test_other_record_types_are_ignored(self) -> None:
        """Well-formed records that are not items do not change the text."""
        decoder = FrameDecoder()
        decoder.feed('{"type":"begin"}\n')

        check.equal(decoder.feed(ITEM_A + "\n"), "A")
        check.equal(decoder.session.skipped_fragments, 0)

    def test_item_with_non_text_content_is_ignored(self) -> None:
        """An item whose content is not a string adds nothing."""
        decoder = FrameDecoder()

        assert decoder.feed('{"type":"item","content":42}\n') == ""

    def test_plain_text_line_is_appended_verbatim(self) -> None:
        """A non-JSON line without the discriminator key is display text."""
        decoder = FrameDecoder()
        decoder.feed(ITEM_A + "\n")

        assert decoder.feed("just some text\n") == "Ajust some text"

    def test_broken_frame_is_dropped(self) -> None:
        """A non-JSON line mentioning "type" is skipped without losing text."""
        decoder = FrameDecoder()
        decoder.feed(ITEM_A + "\n")

        text = decoder.feed('{"type":"item","content":"oops\n')

        check.equal(text, "A")
        check.equal(decoder.session.skipped_fragments, 1)

    def test_broken_fragment_does_not_drop_its_neighbours(self) -> None:
        """Only the malformed fragment of a concatenated line is lost."""
        decoder = FrameDecoder()

        text = decoder.feed(ITEM_A + '{"type":"item",}' + ITEM_B + "\n")

        check.equal(text, "AB")
        check.equal(decoder.session.skipped_fragments, 1)

    def test_unicode_content(self) -> None:
        """Non-ASCII content, escaped or raw, is decoded."""
        decoder = FrameDecoder()

        text = decoder.feed('{"type":"item","content":"caf\\u00e9 "}\n{"type":"item","content":"ñ"}\n')

        assert text == "café ñ"

    def test_text_only_grows(self) -> None:
        """Each emitted text extends the previous one."""
        decoder = FrameDecoder()
        chunks = [
            ITEM_A[:5],
            ITEM_A[5:] + "\n",
            "plain\n",
            '{"type":"broken\n',
            ITEM_B + ITEM_A + "\n",
            '{"type":"item","content":"end"}',
        ]

        previous = ""
        for chunk in chunks:
            text = decoder.feed(chunk)
            assert text.startswith(previous)
            previous = text

        assert decoder.finish().startswith(previous)


class TestFinish:
    """Tests for end-of-stream handling."""

    def test_processes_unterminated_tail(self) -> None:
        """A final line without a newline is decoded at stream end."""
        decoder = FrameDecoder()
        decoder.feed(ITEM_A + "\n" + ITEM_B)

        check.equal(decoder.text, "A")
        check.equal(decoder.finish(), "AB")
        check.is_true(decoder.terminal)

    def test_finish_is_idempotent(self) -> None:
        """Finishing twice does not process the tail twice."""
        decoder = FrameDecoder()
        decoder.feed(ITEM_A)

        decoder.finish()

        assert decoder.finish() == "A"

    def test_feed_after_finish_raises(self) -> None:
        """A finished decoder rejects more input."""
        decoder = FrameDecoder()
        decoder.finish()

        with pytest.raises(RuntimeError, match="finished"):
            decoder.feed(ITEM_A)


class TestReducer:
    """Tests for the pure feed/finish functions."""

    def test_feed_does_not_mutate_input_session(self) -> None:
        """feed returns a new session and leaves the old one intact."""
        initial = StreamSession()

        updated, text = feed(initial, ITEM_A + "\n" + ITEM_B[:4])

        check.equal(initial, StreamSession())
        check.equal(text, "A")
        check.equal(updated.residual_buffer, ITEM_B[:4])

    def test_finish_marks_terminal(self) -> None:
        """finish clears the buffer and marks the session terminal."""
        session, _ = feed(StreamSession(), ITEM_B)

        finished, text = finish(session)

        check.equal(text, "B")
        check.equal(finished.residual_buffer, "")
        check.is_true(finished.terminal)
