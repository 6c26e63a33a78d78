from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

The invocation engine: resolve a model's capability descriptor, validate the
request against it, and dispatch to the adapter of the model's provider.
"""

import inspect
import logging
import time
import uuid
from typing import Any, Awaitable, Iterable, Mapping, Protocol, Sequence, cast

import httpx

from .clients.base.adapter import ProviderAdapter
from .config import GatewayConfig
from .errors import ConfigError
from .factory import create_adapter
from .observability import InvocationLifecycleEvent, InvocationObserver
from .types import CapabilityDescriptor, Message, Provider
from .utils import run_sync
from .validation import validate_request

logger = logging.getLogger(__name__)


class DescriptorSource(Protocol):
    """Read-only lookup of capability descriptors by public model name."""

    def descriptor_for(self, name: str) -> CapabilityDescriptor:
        ...

    def providers(self) -> Iterable[Provider]:
        ...


class InvocationEngine:
    """
    Entry point for "run this conversation against model X".

    One adapter is built per provider present in the catalog when the engine
    is constructed, so a missing credential fails early with `ConfigError`.
    Invocations share no mutable state and may run concurrently.
    """

    def __init__(
        self,
        catalog: DescriptorSource,
        *,
        config: GatewayConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
        observers: list[InvocationObserver] | None = None,
        adapter_options: Mapping[Provider, Mapping[str, Any]] | None = None,
    ) -> None:
        self.catalog = catalog
        self.config = config or GatewayConfig.from_env()
        self._observers = list(observers or [])

        self._providers = sorted(set(catalog.providers()), key=lambda p: p.value)
        # Fail on missing credentials before a client is opened.
        for provider in self._providers:
            self.config.require_credential(provider)

        self._adapter_options = dict(adapter_options or {})
        self._owns_client = http_client is None
        self._http = http_client or self._new_client()
        self._adapters = self._build_adapters(self._http)

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.config.http_timeout_s)

    def _build_adapters(self, client: httpx.AsyncClient) -> dict[Provider, ProviderAdapter]:
        return {
            provider: create_adapter(
                provider,
                config=self.config,
                http_client=client,
                **dict(self._adapter_options.get(provider, {})),
            )
            for provider in self._providers
        }

    async def __aenter__(self) -> "InvocationEngine":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this engine created it."""
        if self._owns_client:
            await self._http.aclose()

    def add_observer(self, observer: InvocationObserver) -> None:
        self._observers.append(observer)

    def adapter_for(self, provider: Provider) -> ProviderAdapter:
        return self._pick_adapter(self._adapters, provider)

    @staticmethod
    def _pick_adapter(
        adapters: Mapping[Provider, ProviderAdapter], provider: Provider
    ) -> ProviderAdapter:
        try:
            return adapters[provider]
        except KeyError:
            raise ConfigError(
                f"No adapter configured for provider '{provider.value}'"
            ) from None

    async def invoke(
        self,
        model_name: str,
        messages: Sequence[Message],
        control_value: str | None = None,
    ) -> str:
        """
        Run `messages` against `model_name` and return the normalized text.

        Raises `ModelNotFoundError` before anything else happens, then
        `ValidationError` before any network call, then whatever the
        adapter raises. Nothing is retried.
        """
        return await self._invoke_with(self._adapters, model_name, messages, control_value)

    def invoke_sync(
        self,
        model_name: str,
        messages: Sequence[Message],
        control_value: str | None = None,
    ) -> str:
        """
        Synchronous wrapper around `invoke`.

        Each call runs on a fresh event loop. An engine that owns its client
        opens a short-lived one per call, since pooled connections are bound
        to the loop that opened them.
        """
        if not self._owns_client:
            return run_sync(self.invoke(model_name, messages, control_value))
        return run_sync(self._invoke_on_fresh_client(model_name, messages, control_value))

    async def _invoke_on_fresh_client(
        self,
        model_name: str,
        messages: Sequence[Message],
        control_value: str | None,
    ) -> str:
        client = self._new_client()
        try:
            adapters = self._build_adapters(client)
            return await self._invoke_with(adapters, model_name, messages, control_value)
        finally:
            await client.aclose()

    async def _invoke_with(
        self,
        adapters: Mapping[Provider, ProviderAdapter],
        model_name: str,
        messages: Sequence[Message],
        control_value: str | None,
    ) -> str:
        descriptor = self.catalog.descriptor_for(model_name)
        provider_id = descriptor.provider.value
        request_id = self._new_request_id()
        started = time.perf_counter()

        await self._emit_lifecycle_event(
            event_type="request_start",
            request_id=request_id,
            provider_id=provider_id,
            model=model_name,
        )

        try:
            validate_request(descriptor, messages, control_value)
            adapter = self._pick_adapter(adapters, descriptor.provider)
            result = await adapter.invoke(descriptor, list(messages), control_value)
        except Exception as e:
            latency_ms = (time.perf_counter() - started) * 1000.0
            logger.info(
                "invocation %s model=%s provider=%s failed after %.0fms: %s: %s",
                request_id,
                model_name,
                provider_id,
                latency_ms,
                type(e).__name__,
                e,
            )
            await self._emit_lifecycle_event(
                event_type="request_error",
                request_id=request_id,
                provider_id=provider_id,
                model=model_name,
                latency_ms=latency_ms,
                error=e,
            )
            raise

        latency_ms = (time.perf_counter() - started) * 1000.0
        logger.info(
            "invocation %s model=%s provider=%s succeeded in %.0fms",
            request_id,
            model_name,
            provider_id,
            latency_ms,
        )
        await self._emit_lifecycle_event(
            event_type="request_success",
            request_id=request_id,
            provider_id=provider_id,
            model=model_name,
            latency_ms=latency_ms,
        )
        return result

    def _new_request_id(self) -> str:
        """Generate a new opaque correlation id."""
        return uuid.uuid4().hex

    async def _emit_lifecycle_event(
        self,
        *,
        event_type: str,
        request_id: str,
        provider_id: str,
        model: str | None,
        latency_ms: float | None = None,
        error: Exception | None = None,
    ) -> None:
        """Emit one lifecycle event to observers, logging observer failures."""
        if not self._observers:
            return

        event = InvocationLifecycleEvent(
            event_type=cast(Any, event_type),
            request_id=request_id,
            provider_id=provider_id,
            model=model,
            latency_ms=latency_ms,
            error_class=type(error).__name__ if error is not None else None,
            error_message=str(error) if error is not None else None,
        )

        for observer in self._observers:
            try:
                result = observer(event)
                if inspect.isawaitable(result):
                    await cast(Awaitable[Any], result)
            except Exception:
                logger.warning(
                    "observer %r failed on %s for %s",
                    observer,
                    event_type,
                    request_id,
                    exc_info=True,
                )
