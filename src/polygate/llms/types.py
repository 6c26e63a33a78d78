from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

This module defines the provider-agnostic types shared by the invocation engine,
its adapters and the model catalog.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, TypeAlias, TypedDict

from .errors import ConfigError, ProtocolError

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]

# A single image reference (URL or data URI) or an ordered list of them.
ImageInput: TypeAlias = str | list[str]
ControlValue: TypeAlias = bool | int | float | str


class Provider(str, Enum):
    """Closed set of upstream inference services."""

    REPLICATE = "Replicate"
    OPENROUTER = "OpenRouter"


class ImageShape(str, Enum):
    SINGLE = "String"
    LIST = "VecString"


@dataclass(frozen=True, slots=True)
class Message:
    role: str
    input_text: str
    input_image: ImageInput | None = None
    input_audio: str | None = None
    input_audio_format: str | None = None
    input_video: str | None = None

    def images(self) -> list[str]:
        if self.input_image is None:
            return []
        if isinstance(self.input_image, str):
            return [self.input_image]
        return list(self.input_image)


@dataclass(frozen=True, slots=True)
class CapabilityDescriptor:
    """
    Static per-model facts governing validation and request construction.

    For create-and-poll providers `endpoint` is the prediction URL; for
    chat-completions providers it is the upstream model id.
    """

    provider: Provider
    endpoint: str
    control_name: str | None = None
    control_values_allowed: frozenset[str] | None = None
    roles_allowed: frozenset[str] | None = None
    image_field_name: str | None = None
    image_shape: ImageShape | None = None
    audio_field_name: str = "audio"
    video_field_name: str = "video"

    def __post_init__(self) -> None:
        if not self.endpoint:
            raise ConfigError("CapabilityDescriptor.endpoint must be non-empty")
        if self.control_values_allowed is not None and not self.control_values_allowed:
            raise ConfigError(
                "CapabilityDescriptor.control_values_allowed must be non-empty when present"
            )
        if self.roles_allowed is not None and not self.roles_allowed:
            raise ConfigError(
                "CapabilityDescriptor.roles_allowed must be non-empty when present"
            )


class JobStatus(str, Enum):
    CREATED = "created"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED, JobStatus.CANCELED)

    @classmethod
    def from_upstream(cls, value: str | None) -> "JobStatus":
        """Map a provider status label onto the job lifecycle."""
        if value is None:
            return cls.CREATED
        label = value.strip().lower()
        if label in ("starting", "created", "queued"):
            return cls.CREATED
        if label == "cancelled":
            return cls.CANCELED
        try:
            return cls(label)
        except ValueError:
            return cls.PROCESSING


_STATUS_RANK = {
    JobStatus.CREATED: 0,
    JobStatus.PROCESSING: 1,
    JobStatus.SUCCEEDED: 2,
    JobStatus.FAILED: 2,
    JobStatus.CANCELED: 2,
}


@dataclass(slots=True)
class InvocationJob:
    """
    One server-side prediction, alive only for the duration of an invocation.
    Mutated by polling/stream reads; never persisted.
    """

    id: str | None = None
    status: JobStatus = JobStatus.CREATED
    output: Any = None
    stream_url: str | None = None
    poll_url: str | None = None
    cancel_url: str | None = None

    def advance(self, status: JobStatus) -> None:
        """Move forward in the lifecycle; a stale earlier status is ignored."""
        if self.status.is_terminal and status is not self.status:
            raise ProtocolError(
                f"Job {self.id or '?'} left terminal status "
                f"'{self.status.value}' for '{status.value}'"
            )
        if _STATUS_RANK[status] >= _STATUS_RANK[self.status]:
            self.status = status


# ---- Typed request bodies -------------------------------------------------


@dataclass(frozen=True, slots=True)
class NamedField:
    """A body field whose key is supplied by the capability descriptor."""

    name: str
    value: JSONValue


@dataclass(frozen=True, slots=True)
class PredictionInput:
    prompt: str | None = None
    messages: list[JSONObject] | None = None
    control: NamedField | None = None
    image: NamedField | None = None
    audio: NamedField | None = None
    video: NamedField | None = None

    def to_payload(self) -> JSONObject:
        out: JSONObject = {}
        if self.prompt is not None:
            out["prompt"] = self.prompt
        if self.messages is not None:
            out["messages"] = list(self.messages)
        for named in (self.image, self.audio, self.video, self.control):
            if named is not None:
                out[named.name] = named.value
        return out


@dataclass(frozen=True, slots=True)
class PredictionRequest:
    input: PredictionInput
    stream: bool = False

    def to_payload(self) -> JSONObject:
        return {"stream": self.stream, "input": self.input.to_payload()}


class TextContentPart(TypedDict):
    type: Literal["text"]
    text: str


class ImageURLRef(TypedDict):
    url: str


class ImageURLContentPart(TypedDict):
    type: Literal["image_url"]
    image_url: ImageURLRef


class InputAudioRef(TypedDict):
    data: str
    format: str


class InputAudioContentPart(TypedDict):
    type: Literal["input_audio"]
    inputAudio: InputAudioRef


class VideoURLRef(TypedDict):
    url: str


class VideoURLContentPart(TypedDict):
    type: Literal["video_url"]
    inputVideo: VideoURLRef


ChatContentPart: TypeAlias = (
    TextContentPart | ImageURLContentPart | InputAudioContentPart | VideoURLContentPart
)


@dataclass(frozen=True, slots=True)
class ChatMessage:
    role: str
    content: list[ChatContentPart] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ChatCompletionRequest:
    model: str
    messages: list[ChatMessage] = field(default_factory=list)
    control: NamedField | None = None

    def to_payload(self) -> JSONObject:
        out: JSONObject = {
            "model": self.model,
            "messages": [
                {"role": m.role, "content": [dict(part) for part in m.content]}
                for m in self.messages
            ],
        }
        if self.control is not None:
            out[self.control.name] = self.control.value
        return out
