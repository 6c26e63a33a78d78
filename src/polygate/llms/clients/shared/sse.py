from __future__ import annotations

"""
Incremental Server-Sent Events framing.

The parser is transport-independent: callers push raw byte chunks in arrival
order and receive every frame completed so far. Frames may be split across
chunks at any byte, including inside a multi-byte UTF-8 character or a
terminator.
"""

import re
from dataclasses import dataclass

DONE_EVENT = "done"
PLACEHOLDER_DATA = "{}"

_CRLF_TERMINATOR = b"\r\n\r\n"
_LF_TERMINATOR = b"\n\n"
_LINE_SPLIT = re.compile(r"\r?\n")


@dataclass(frozen=True, slots=True)
class ServerSentEvent:
    event: str | None = None
    data: str = ""

    @property
    def is_done(self) -> bool:
        return self.event == DONE_EVENT

    @property
    def is_placeholder(self) -> bool:
        """Empty or `{}` payloads carry no visible text."""
        return self.data in ("", PLACEHOLDER_DATA)


def parse_frame(block: str) -> ServerSentEvent:
    """Parse one frame (terminator already removed) into an event."""
    event: str | None = None
    data_lines: list[str] = []

    for line in _LINE_SPLIT.split(block):
        if line.startswith("event:"):
            if event is None:
                event = line[len("event:"):].strip()
        elif line.startswith("data:"):
            value = line[len("data:"):]
            if value.startswith(" "):
                value = value[1:]
            data_lines.append(value)

    return ServerSentEvent(event=event, data="\n".join(data_lines))


class EventStreamParser:
    """Buffering state machine turning byte chunks into `ServerSentEvent`s."""

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._done = False

    @property
    def done(self) -> bool:
        """True once a `done` frame was seen; further input is ignored."""
        return self._done

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet forming a complete frame."""
        return len(self._buffer)

    def feed(self, chunk: bytes) -> list[ServerSentEvent]:
        if self._done or not chunk:
            return []

        self._buffer.extend(chunk)
        events: list[ServerSentEvent] = []

        while True:
            boundary = self._next_boundary()
            if boundary is None:
                break

            end, terminator_len = boundary
            block = bytes(self._buffer[:end]).decode("utf-8", errors="replace")
            del self._buffer[: end + terminator_len]

            event = parse_frame(block)
            events.append(event)
            if event.is_done:
                self._done = True
                self._buffer.clear()
                break

        return events

    def _next_boundary(self) -> tuple[int, int] | None:
        """Offset and length of the earliest frame terminator, CRLF first on ties."""
        crlf = self._buffer.find(_CRLF_TERMINATOR)
        lf = self._buffer.find(_LF_TERMINATOR)

        if crlf == -1 and lf == -1:
            return None
        if lf == -1 or (crlf != -1 and crlf <= lf):
            return crlf, len(_CRLF_TERMINATOR)
        return lf, len(_LF_TERMINATOR)
