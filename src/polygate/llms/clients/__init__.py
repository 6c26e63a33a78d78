"""Provider client package.

Structure:
- `adapters/`: provider-specific adapter implementations
- `base/`: reusable adapter base class
- `shared/`: event-stream framing and response normalization
"""

from .adapters import OpenRouterAdapter, ReplicateAdapter
from .base import ProviderAdapter

__all__ = [
    "ProviderAdapter",
    "OpenRouterAdapter",
    "ReplicateAdapter",
]
