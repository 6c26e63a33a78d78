from __future__ import annotations

"""
Typed observability primitives for invocation lifecycle events.
"""

from dataclasses import dataclass
from typing import Awaitable, Literal, Protocol


InvocationLifecycleEventType = Literal[
    "request_start",
    "request_success",
    "request_error",
]


@dataclass(frozen=True, slots=True)
class InvocationLifecycleEvent:
    """
    One normalized lifecycle event emitted by the invocation engine.

    Observer failures are logged and never affect the invocation.
    """

    event_type: InvocationLifecycleEventType
    request_id: str
    provider_id: str
    model: str | None = None
    latency_ms: float | None = None
    error_class: str | None = None
    error_message: str | None = None


class InvocationObserver(Protocol):
    """Observer callback protocol used by the invocation engine."""

    def __call__(self, event: InvocationLifecycleEvent) -> None | Awaitable[None]:
        ...

