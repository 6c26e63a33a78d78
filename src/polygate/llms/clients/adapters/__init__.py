"""Concrete provider adapter implementations."""

from .openrouter import OpenRouterAdapter
from .replicate import ReplicateAdapter

__all__ = ["OpenRouterAdapter", "ReplicateAdapter"]
