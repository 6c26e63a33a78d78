from __future__ import annotations

"""
OpenAI-compatible chat-completions surface over the invocation engine.

Incoming bodies follow the OpenAI chat-completions request shape (plus the
per-message `input_image`, `input_audio`, `input_audio_format` and
`input_video` extensions); replies are `chat.completion` objects whose
`message.content` is always a string, as SDK `.parse()` helpers expect.
"""

import json
import logging
import time
from typing import Any, Mapping

from ..llms.engine import InvocationEngine
from ..llms.errors import InvocationError
from ..llms.types import JSONObject, Message

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_PATH = "/v1/chat/completions"

_JSON_SCHEMA = "json_schema"
_JSON_OBJECT = "json_object"


class MalformedRequestError(InvocationError):
    """The request body or path does not match the OpenAI-compatible surface."""

    pass


def _content_text(content: Any, idx: int) -> str:
    """Flatten string or part-array content; parts are joined with a space."""
    if isinstance(content, str):
        return content

    if not isinstance(content, list):
        raise MalformedRequestError(f"messages[{idx}].content is missing or invalid")

    parts: list[str] = []
    for el in content:
        if isinstance(el, str):
            parts.append(el)
            continue
        if not isinstance(el, dict):
            continue

        text = el.get("text")
        if isinstance(text, str):
            parts.append(text)
            continue

        inner = el.get("content")
        if isinstance(inner, str):
            parts.append(inner)
        elif isinstance(inner, list):
            # One level of nesting only.
            for item in inner:
                if isinstance(item, dict) and isinstance(item.get("text"), str):
                    parts.append(item["text"])
                elif isinstance(item, str):
                    parts.append(item)

    if not parts:
        raise MalformedRequestError(f"messages[{idx}].content has no text")
    return " ".join(parts)


def _optional_str(message: Mapping[str, Any], key: str) -> str | None:
    value = message.get(key)
    return value if isinstance(value, str) else None


def _image(message: Mapping[str, Any]) -> str | list[str] | None:
    value = message.get("input_image")
    if isinstance(value, str):
        return value
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    return None


def parse_messages(raw: Any) -> list[Message]:
    if not isinstance(raw, list):
        raise MalformedRequestError("request is missing the 'messages' array")

    out: list[Message] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            raise MalformedRequestError(f"messages[{idx}] must be an object")

        role = item.get("role")
        if not isinstance(role, str):
            raise MalformedRequestError(f"messages[{idx}] is missing the role")
        if "content" not in item:
            raise MalformedRequestError(f"messages[{idx}] is missing the content")

        out.append(
            Message(
                role=role,
                input_text=_content_text(item["content"], idx),
                input_image=_image(item),
                input_audio=_optional_str(item, "input_audio"),
                input_audio_format=_optional_str(item, "input_audio_format"),
                input_video=_optional_str(item, "input_video"),
            )
        )
    return out


def response_format_instruction(response_format: Any) -> str | None:
    """
    System instruction describing a requested JSON output format, or None
    when `response_format` asks for nothing JSON-shaped.
    """
    if not isinstance(response_format, dict):
        return None

    kind = response_format.get("type")
    if kind not in (_JSON_SCHEMA, _JSON_OBJECT):
        return None

    name = description = None
    schema: Any = None
    strict = False
    if kind == _JSON_SCHEMA:
        fmt = response_format.get("json_schema")
        if isinstance(fmt, dict):
            if isinstance(fmt.get("name"), str):
                name = fmt["name"]
            if isinstance(fmt.get("description"), str):
                description = fmt["description"]
            schema = fmt.get("schema")
            strict = fmt.get("strict") is True

    if kind == _JSON_SCHEMA:
        instr = "You must respond with a single JSON object that conforms to the provided JSON Schema."
    else:
        instr = "You must respond with a single valid JSON object (no surrounding text)."

    if name is not None:
        instr += f" Name: {name}."
    if description is not None:
        instr += f" Description: {description}."
    if schema is not None:
        instr += "\n\nJSON Schema:\n" + json.dumps(schema, separators=(",", ":"), ensure_ascii=False)
    if strict:
        instr += (
            "\n\nStrict mode: follow the schema exactly and do not include any "
            "extra fields or surrounding explanatory text."
        )
    else:
        instr += "\n\nIf you cannot fully satisfy the schema, return the best-effort JSON object."
    return instr


def _word_count(text: str) -> int:
    return len(text.split())


def build_completion(
    model: str,
    messages: list[Message],
    content: str,
    *,
    created: int | None = None,
) -> JSONObject:
    """Wrap normalized text into a `chat.completion` object with word-count usage."""
    created = int(time.time()) if created is None else created
    prompt_tokens = sum(_word_count(m.input_text) for m in messages)
    completion_tokens = _word_count(content)

    return {
        "id": f"chatcmpl-{created}",
        "object": "chat.completion",
        "created": created,
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {
                    "role": "assistant",
                    "content": content,
                    "refusal": None,
                    "annotations": [],
                },
                "logprobs": None,
                "finish_reason": "stop",
            }
        ],
        "usage": {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
            "prompt_tokens_details": {"cached_tokens": 0, "audio_tokens": 0},
            "completion_tokens_details": {
                "reasoning_tokens": 0,
                "audio_tokens": 0,
                "accepted_prediction_tokens": 0,
                "rejected_prediction_tokens": 0,
            },
        },
        "service_tier": "default",
    }


async def chat_completions(engine: InvocationEngine, body: Any) -> JSONObject:
    """Run one OpenAI-style chat-completions request through `engine`."""
    if not isinstance(body, dict):
        raise MalformedRequestError("request body must be a JSON object")

    model = body.get("model")
    if not isinstance(model, str) or not model:
        raise MalformedRequestError("request is missing the model name")

    messages = parse_messages(body.get("messages"))
    effort = body.get("reasoning_effort")
    control_value = effort if isinstance(effort, str) else None

    instruction = response_format_instruction(body.get("response_format"))
    if instruction is not None:
        messages.insert(0, Message(role="system", input_text=instruction))

    logger.debug("chat completion for model=%s with %d message(s)", model, len(messages))
    content = await engine.invoke(model, messages, control_value)
    return build_completion(model, messages, content)


async def route(engine: InvocationEngine, path: str, body: Any) -> JSONObject:
    """Dispatch an API request by path."""
    if path == CHAT_COMPLETIONS_PATH:
        return await chat_completions(engine, body)
    raise MalformedRequestError(f"Unknown API path: {path}")
