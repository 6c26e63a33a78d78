from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

This module defines custom exceptions for error handling in the invocation engine.
"""

from enum import Enum


class InvocationError(Exception):
    """Base exception for all polygate invocation errors."""

    pass


class ConfigError(InvocationError):
    """Missing credential or invalid static configuration. Fatal, never retried."""

    pass


class ModelNotFoundError(InvocationError):
    def __init__(self, model_name: str) -> None:
        super().__init__(f"Model '{model_name}' not found")
        self.model_name = model_name


class ValidationKind(str, Enum):
    ROLE = "role"
    CONTROL_VALUE = "control-value"
    IMAGE_SHAPE = "image-shape"


class ValidationError(InvocationError):
    """
    The request is incompatible with the model's capability descriptor.
    Raised before any network call.
    """

    def __init__(self, kind: ValidationKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class TransportError(InvocationError):
    """Connection, send or receive failure. The underlying cause is chained."""

    pass


class UpstreamError(InvocationError):
    """
    The provider answered with a non-success HTTP status, or the job reached
    a terminal failed/canceled state.
    """

    def __init__(self, status: int | str, body: str, message: str | None = None) -> None:
        super().__init__(message or f"Upstream call failed with status {status}: {body}")
        self.status = status
        self.body = body


class ProtocolError(InvocationError):
    """The provider returned JSON that does not match its documented shape."""

    pass


class InvocationTimeoutError(InvocationError, TimeoutError):
    """The polling budget elapsed before the job reached a terminal state."""

    pass
