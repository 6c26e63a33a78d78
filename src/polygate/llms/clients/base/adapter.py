from __future__ import annotations

"""
Shared base for provider adapters.

This class centralizes:
  - bearer credential resolution
  - JSON POST/GET over the shared `httpx.AsyncClient`
  - mapping of transport, status and decoding failures onto the error taxonomy
  - control value encoding under the descriptor's parameter name

Concrete adapters only implement request construction and their completion
strategy.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Collection, Sequence

import httpx

from ...config import GatewayConfig
from ...encoding import encode_control_value
from ...errors import ProtocolError, TransportError, UpstreamError
from ...types import CapabilityDescriptor, Message, NamedField, Provider
from ...utils import clamp_str

logger = logging.getLogger(__name__)

_LOG_BODY_CHARS = 500


class ProviderAdapter(ABC):
    """One upstream protocol. Instances are stateless apart from config and client."""

    provider: Provider

    def __init__(self, *, config: GatewayConfig, http_client: httpx.AsyncClient) -> None:
        self.config = config
        self._http = http_client
        self._token = config.require_credential(self.provider)

    @property
    def provider_id(self) -> str:
        return self.provider.value

    @abstractmethod
    async def invoke(
        self,
        descriptor: CapabilityDescriptor,
        messages: Sequence[Message],
        control_value: str | None = None,
    ) -> str:
        """Run one validated request upstream and return the normalized text."""
        raise NotImplementedError

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"}

    def _control_field(
        self,
        descriptor: CapabilityDescriptor,
        control_value: str | None,
    ) -> NamedField | None:
        if control_value is None or descriptor.control_name is None:
            return None
        return NamedField(descriptor.control_name, encode_control_value(control_value))

    async def _post_json(
        self,
        url: str,
        payload: dict[str, Any],
        *,
        accepted: Collection[int] | None = None,
    ) -> Any:
        logger.debug("%s POST %s", self.provider_id, url)
        try:
            response = await self._http.post(url, json=payload, headers=self._auth_headers())
        except httpx.HTTPError as e:
            raise TransportError(f"{self.provider_id} POST {url} failed: {e}") from e
        return self._decode(response, accepted=accepted)

    async def _get_json(self, url: str) -> Any:
        logger.debug("%s GET %s", self.provider_id, url)
        try:
            response = await self._http.get(url, headers=self._auth_headers())
        except httpx.HTTPError as e:
            raise TransportError(f"{self.provider_id} GET {url} failed: {e}") from e
        return self._decode(response, accepted=None)

    def _decode(self, response: httpx.Response, *, accepted: Collection[int] | None) -> Any:
        ok = (
            response.status_code in accepted
            if accepted is not None
            else response.is_success
        )
        if not ok:
            body = response.text
            logger.warning(
                "%s returned HTTP %s: %s",
                self.provider_id,
                response.status_code,
                clamp_str(body, _LOG_BODY_CHARS),
            )
            raise UpstreamError(response.status_code, body)

        try:
            return response.json()
        except ValueError as e:
            raise ProtocolError(
                f"{self.provider_id} returned a non-JSON body: "
                f"{clamp_str(response.text, _LOG_BODY_CHARS)}"
            ) from e
