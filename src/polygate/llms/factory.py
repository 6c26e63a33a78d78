from __future__ import annotations

"""
Factory utilities for constructing concrete provider adapters.
"""

from typing import TYPE_CHECKING, Any, Callable

import httpx

from .config import GatewayConfig
from .errors import ConfigError
from .types import Provider

if TYPE_CHECKING:
    from .clients.base.adapter import ProviderAdapter


AdapterFactory = Callable[..., "ProviderAdapter"]


def available_providers() -> list[str]:
    """Return the provider labels with a built-in adapter."""
    return sorted(p.value for p in Provider)


def create_adapter(
    provider: Provider | str,
    *,
    config: GatewayConfig | None = None,
    http_client: httpx.AsyncClient,
    **options: Any,
) -> "ProviderAdapter":
    """
    Create the adapter for `provider`.

    Raises `ConfigError` for an unknown provider or a missing credential.
    Extra keyword `options` go to the adapter constructor.
    """
    try:
        key = provider if isinstance(provider, Provider) else Provider(provider)
    except ValueError as e:
        raise ConfigError(f"Unknown provider '{provider}'") from e

    factory = _builtin_factory(key)
    return factory(config=config or GatewayConfig.from_env(), http_client=http_client, **options)


def _builtin_factory(provider: Provider) -> AdapterFactory:
    """Resolve built-in adapter classes lazily to avoid import cycles."""
    if provider is Provider.REPLICATE:
        from .clients.adapters.replicate import ReplicateAdapter

        return ReplicateAdapter

    if provider is Provider.OPENROUTER:
        from .clients.adapters.openrouter import OpenRouterAdapter

        return OpenRouterAdapter

    raise ConfigError(f"No built-in adapter for provider '{provider.value}'")
