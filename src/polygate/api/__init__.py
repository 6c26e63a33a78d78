"""OpenAI-compatible request/response reshaping on top of the engine."""

from .openai import (
    CHAT_COMPLETIONS_PATH,
    MalformedRequestError,
    build_completion,
    chat_completions,
    parse_messages,
    response_format_instruction,
    route,
)

__all__ = [
    "CHAT_COMPLETIONS_PATH",
    "MalformedRequestError",
    "build_completion",
    "chat_completions",
    "parse_messages",
    "response_format_instruction",
    "route",
]
