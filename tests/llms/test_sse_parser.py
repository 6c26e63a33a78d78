from __future__ import annotations

from polygate.llms.clients.shared.sse import EventStreamParser, ServerSentEvent, parse_frame


def test_frame_split_across_chunks_is_reassembled():
    parser = EventStreamParser()

    assert parser.feed(b"event: message\ndata: hel") == []
    assert parser.pending > 0

    events = parser.feed(b"lo\n\n")
    assert events == [ServerSentEvent(event="message", data="hello")]
    assert parser.pending == 0


def test_multiple_frames_in_one_chunk_keep_order():
    parser = EventStreamParser()
    events = parser.feed(b"event: output\ndata: a\n\nevent: output\ndata: b\n\n")
    assert [e.data for e in events] == ["a", "b"]


def test_data_lines_are_joined_with_newline():
    event = parse_frame("event: output\ndata: first\ndata:second\ndata:  indented")
    assert event.event == "output"
    assert event.data == "first\nsecond\n indented"


def test_first_event_line_wins():
    assert parse_frame("event: output\nevent: error\ndata: x").event == "output"


def test_frame_without_event_line_is_unnamed():
    assert parse_frame("data: x") == ServerSentEvent(event=None, data="x")


def test_crlf_terminated_frames():
    parser = EventStreamParser()
    events = parser.feed(b"event: output\r\ndata: a\r\n\r\ndata: b\r\n\r\n")
    assert [(e.event, e.data) for e in events] == [("output", "a"), (None, "b")]


def test_terminator_split_across_chunks():
    parser = EventStreamParser()
    assert parser.feed(b"data: a\r\n\r") == []
    assert parser.feed(b"\n") == [ServerSentEvent(data="a")]


def test_done_stops_parsing_and_drops_trailing_bytes():
    parser = EventStreamParser()
    events = parser.feed(
        b"event: output\ndata: a\n\nevent: done\ndata: {}\n\nevent: output\ndata: late\n\n"
    )

    assert [e.event for e in events] == ["output", "done"]
    assert parser.done is True
    assert parser.pending == 0
    assert parser.feed(b"event: output\ndata: more\n\n") == []


def test_multibyte_character_split_across_chunks_survives():
    parser = EventStreamParser()
    assert parser.feed(b"data: caf\xc3") == []
    assert parser.feed(b"\xa9\n\n") == [ServerSentEvent(data="café")]


def test_placeholder_detection():
    assert ServerSentEvent(event="output", data="{}").is_placeholder
    assert ServerSentEvent(event="output", data="").is_placeholder
    assert not ServerSentEvent(event="output", data=" ").is_placeholder
    assert not ServerSentEvent(event="output", data="hi").is_placeholder


def test_empty_chunk_is_a_noop():
    parser = EventStreamParser()
    assert parser.feed(b"") == []
    assert parser.pending == 0
