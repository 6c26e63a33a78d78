"""Shared client helper utilities."""

from .normalization import extract_text_from_content, normalize_response, to_json_text
from .sse import DONE_EVENT, EventStreamParser, ServerSentEvent, parse_frame

__all__ = [
    "normalize_response",
    "extract_text_from_content",
    "to_json_text",
    "EventStreamParser",
    "ServerSentEvent",
    "parse_frame",
    "DONE_EVENT",
]
