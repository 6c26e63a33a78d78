from __future__ import annotations
import os

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

"""
from dataclasses import dataclass

from .errors import ConfigError
from .types import Provider


def _env(*names: str) -> str | None:
    for name in names:
        value = os.getenv(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True, slots=True)
class GatewayConfig:
    # Credentials
    replicate_api_token: str | None = None
    openrouter_api_key: str | None = None

    # Upstream endpoints
    replicate_base_url: str = "https://api.replicate.com/v1"
    openrouter_base_url: str = "https://openrouter.ai/api/v1"

    # Transport
    http_timeout_s: float = 60.0

    # Polling
    poll_timeout_s: float = 300.0
    poll_initial_delay_s: float = 0.2
    poll_max_delay_s: float = 2.0

    # Create-and-stream instead of create-and-poll
    replicate_stream: bool = False

    log_level: str = "WARNING"

    @staticmethod
    def from_env() -> "GatewayConfig":
        return GatewayConfig(
            replicate_api_token=_env("POLYGATE_REPLICATE_API_TOKEN", "REPLICATE_API_TOKEN"),
            openrouter_api_key=_env("POLYGATE_OPENROUTER_API_KEY", "OPENROUTER_API_KEY"),
            replicate_base_url=os.getenv(
                "POLYGATE_REPLICATE_BASE_URL", "https://api.replicate.com/v1"
            ),
            openrouter_base_url=os.getenv(
                "POLYGATE_OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1"
            ),
            http_timeout_s=float(os.getenv("POLYGATE_HTTP_TIMEOUT_S", "60")),
            poll_timeout_s=float(os.getenv("POLYGATE_POLL_TIMEOUT_S", "300")),
            poll_initial_delay_s=float(os.getenv("POLYGATE_POLL_INITIAL_DELAY_S", "0.2")),
            poll_max_delay_s=float(os.getenv("POLYGATE_POLL_MAX_DELAY_S", "2.0")),
            replicate_stream=_env_flag("POLYGATE_REPLICATE_STREAM", False),
            log_level=os.getenv("POLYGATE_LOG_LEVEL", "WARNING"),
        )

    def require_credential(self, provider: Provider) -> str:
        """Return the bearer token for `provider` or fail with `ConfigError`."""
        if provider is Provider.REPLICATE:
            token, env_name = self.replicate_api_token, "REPLICATE_API_TOKEN"
        elif provider is Provider.OPENROUTER:
            token, env_name = self.openrouter_api_key, "OPENROUTER_API_KEY"
        else:
            raise ConfigError(f"Unknown provider '{provider}'")

        if not token:
            raise ConfigError(
                f"{env_name} not set. Provide it in the environment or pass "
                "it explicitly through `GatewayConfig`."
            )
        return token
