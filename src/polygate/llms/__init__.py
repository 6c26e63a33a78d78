"""
Provider invocation engine: validation, control value encoding, provider
adapters and response normalization.
"""

from .config import GatewayConfig
from .encoding import encode_control_value
from .engine import DescriptorSource, InvocationEngine
from .errors import (
    ConfigError,
    InvocationError,
    InvocationTimeoutError,
    ModelNotFoundError,
    ProtocolError,
    TransportError,
    UpstreamError,
    ValidationError,
    ValidationKind,
)
from .factory import available_providers, create_adapter
from .log import configure_logging
from .observability import InvocationLifecycleEvent, InvocationObserver
from .types import (
    CapabilityDescriptor,
    ImageShape,
    InvocationJob,
    JobStatus,
    Message,
    Provider,
)
from .validation import validate_request

__all__ = [
    "GatewayConfig",
    "InvocationEngine",
    "DescriptorSource",
    "encode_control_value",
    "validate_request",
    "create_adapter",
    "available_providers",
    "configure_logging",
    "InvocationLifecycleEvent",
    "InvocationObserver",
    "CapabilityDescriptor",
    "ImageShape",
    "InvocationJob",
    "JobStatus",
    "Message",
    "Provider",
    "InvocationError",
    "ConfigError",
    "ModelNotFoundError",
    "ValidationError",
    "ValidationKind",
    "TransportError",
    "UpstreamError",
    "ProtocolError",
    "InvocationTimeoutError",
]
