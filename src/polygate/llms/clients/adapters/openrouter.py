from __future__ import annotations

"""
OpenRouter adapter: one synchronous chat-completions call per invocation.
"""

from typing import Sequence

from ..base.adapter import ProviderAdapter
from ..shared.normalization import normalize_response
from ...types import (
    CapabilityDescriptor,
    ChatCompletionRequest,
    ChatContentPart,
    ChatMessage,
    Message,
    Provider,
)

_UNKNOWN_AUDIO_FORMAT = "unknown"


def _message_parts(message: Message) -> list[ChatContentPart]:
    parts: list[ChatContentPart] = [{"type": "text", "text": message.input_text}]

    for url in message.images():
        parts.append({"type": "image_url", "image_url": {"url": url}})

    if message.input_audio is not None:
        parts.append(
            {
                "type": "input_audio",
                "inputAudio": {
                    "data": message.input_audio,
                    "format": message.input_audio_format or _UNKNOWN_AUDIO_FORMAT,
                },
            }
        )

    if message.input_video is not None:
        parts.append({"type": "video_url", "inputVideo": {"url": message.input_video}})

    return parts


class OpenRouterAdapter(ProviderAdapter):
    """Single-shot adapter; the descriptor endpoint is the upstream model id."""

    provider = Provider.OPENROUTER

    @property
    def completions_url(self) -> str:
        return f"{self.config.openrouter_base_url.rstrip('/')}/chat/completions"

    def build_request(
        self,
        descriptor: CapabilityDescriptor,
        messages: Sequence[Message],
        control_value: str | None = None,
    ) -> ChatCompletionRequest:
        return ChatCompletionRequest(
            model=descriptor.endpoint,
            messages=[ChatMessage(role=m.role, content=_message_parts(m)) for m in messages],
            control=self._control_field(descriptor, control_value),
        )

    async def invoke(
        self,
        descriptor: CapabilityDescriptor,
        messages: Sequence[Message],
        control_value: str | None = None,
    ) -> str:
        request = self.build_request(descriptor, messages, control_value)
        body = await self._post_json(self.completions_url, request.to_payload())
        return normalize_response(body)
