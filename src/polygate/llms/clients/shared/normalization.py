from __future__ import annotations

"""
Shared response normalization used across provider adapters.

Upstream payloads come in several shapes: a flat string, an array of string
tokens (prediction output), or an OpenAI-compatible `choices` object whose
content may itself be an array of typed parts. Everything here is best-effort
and total: malformed input degrades to a JSON dump, never to an exception.
"""

import json
from typing import Any


def to_json_text(value: Any, *, pretty: bool = False) -> str:
    """Serialize any value to JSON text, falling back to `repr` for exotic objects."""
    try:
        if pretty:
            return json.dumps(value, indent=2, ensure_ascii=False, default=str)
        return json.dumps(value, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return repr(value)


def normalize_response(value: Any) -> str:
    """Extract human-readable text from a provider response value."""
    if isinstance(value, str):
        return value

    if isinstance(value, list):
        return _join_array(value)

    if isinstance(value, dict) and isinstance(value.get("choices"), list):
        return _join_choices(value["choices"])

    return to_json_text(value, pretty=True)


def _join_array(items: list[Any]) -> str:
    out: list[str] = []
    for item in items:
        if isinstance(item, str):
            out.append(item)
        elif isinstance(item, list):
            out.append(_join_array(item))
        else:
            out.append(to_json_text(item))
    return "".join(out)


def _join_choices(choices: list[Any]) -> str:
    out: list[str] = []
    for choice in choices:
        if not isinstance(choice, dict):
            continue

        message = choice.get("message")
        if isinstance(message, dict):
            if "content" in message:
                out.append(extract_text_from_content(message["content"]))
            continue

        text = choice.get("text")
        if isinstance(text, str):
            out.append(text)
    return "".join(out)


def extract_text_from_content(content: Any) -> str:
    """Flatten one `message.content` value (string or typed part array)."""
    if isinstance(content, str):
        return content

    if not isinstance(content, list):
        return "\n" + to_json_text(content)

    out: list[str] = []
    for part in content:
        if isinstance(part, str):
            out.append(part)
            continue
        if not isinstance(part, dict):
            continue

        p_type = part.get("type")
        if not isinstance(p_type, str):
            continue

        if p_type == "text":
            text = part.get("text")
            if isinstance(text, str):
                out.append(text)
            continue

        if p_type == "image_url":
            image_url = part.get("image_url")
            url = image_url.get("url") if isinstance(image_url, dict) else None
            if isinstance(url, str):
                out.append(f"\n[image: {url}]")
            continue

        text = part.get("text")
        if isinstance(text, str):
            out.append(text)
        else:
            out.append(f"\n[{p_type} item]")

    return "".join(out)
