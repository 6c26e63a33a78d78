from __future__ import annotations

"""
Typed catalog records: models, prices, organizations, licences and benchmarks.

Records are immutable pydantic models so a catalog can be loaded from JSON
with full validation and then shared read-only across invocations.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ..llms.types import CapabilityDescriptor, ImageShape, Provider


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class PriceTier(_Record):
    """`max_tokens` is an inclusive upper bound; `None` means unbounded."""

    max_tokens: int | None = Field(default=None, ge=0)
    price_per_million: float = Field(ge=0)


def _find_tier_price(tiers: tuple[PriceTier, ...], tokens: int) -> float | None:
    for tier in tiers:
        if tier.max_tokens is None or tokens <= tier.max_tokens:
            return tier.price_per_million
    return None


class PerRunPrice(_Record):
    kind: Literal["per_run"] = "per_run"
    run_price: float = Field(ge=0)

    def input_price_per_million(self, tokens: int) -> float | None:
        return None

    def output_price_per_million(self, tokens: int) -> float | None:
        return None


class PerIoFlatPrice(_Record):
    kind: Literal["per_io_flat"] = "per_io_flat"
    input_price: float = Field(ge=0)
    output_price: float = Field(ge=0)

    @property
    def run_price(self) -> float | None:
        return None

    def input_price_per_million(self, tokens: int) -> float | None:
        return self.input_price

    def output_price_per_million(self, tokens: int) -> float | None:
        return self.output_price


class PerIoTieredPrice(_Record):
    """Token pricing where the first tier covering the token count applies."""

    kind: Literal["per_io_with_tiers"] = "per_io_with_tiers"
    input_tiers: tuple[PriceTier, ...]
    output_tiers: tuple[PriceTier, ...]

    @property
    def run_price(self) -> float | None:
        return None

    def input_price_per_million(self, tokens: int) -> float | None:
        return _find_tier_price(self.input_tiers, tokens)

    def output_price_per_million(self, tokens: int) -> float | None:
        return _find_tier_price(self.output_tiers, tokens)


Price = Annotated[
    Union[PerRunPrice, PerIoFlatPrice, PerIoTieredPrice],
    Field(discriminator="kind"),
]


class Characteristic(_Record):
    size: int | None = Field(default=None, ge=0)
    parameter_count: int | None = Field(default=None, ge=0)
    context_window: int | None = Field(default=None, ge=0)
    architecture: str | None = None
    max_output_length: int | None = Field(default=None, ge=0)


class Organization(_Record):
    name: str = Field(min_length=1)
    url: str | None = Field(default=None, alias="URL")


class Licence(_Record):
    name: str = Field(min_length=1)
    url: str | None = Field(default=None, alias="URL")
    open_source: bool = False
    commercial_use: bool = False
    free_software: bool = False


class ModelBenchmarkScore(_Record):
    """One ranked result; `thinking_level` names the control value used, if any."""

    model_name: str = Field(min_length=1)
    thinking_level: str | None = None
    score: float


class Benchmark(_Record):
    """A leaderboard with its ranking ordered best to worst."""

    name: str = Field(min_length=1)
    description: str | None = None
    ranking: tuple[ModelBenchmarkScore, ...] = ()
    domain: tuple[str, ...] = ()
    quality: int = Field(ge=0, le=255)
    leaderboard_url: str


class ModelEntry(_Record):
    """
    One public model name and everything known about it.

    `apiurl` is the prediction endpoint for Replicate models and the upstream
    model id for OpenRouter models. `thinking_level_property` names the body
    field carrying the control value; `thinking_levels_authorized` is its
    whitelist.
    """

    name: str = Field(min_length=1)
    url: str | None = Field(default=None, alias="URL")
    provider: Provider
    thinking_level_property: str | None = None
    thinking_levels_authorized: tuple[str, ...] | None = None
    characteristic: Characteristic | None = None
    price: Price
    organization: str | None = None
    licence: str
    capability: tuple[str, ...] | None = None
    input_modality: tuple[str, ...] | None = None
    output_modality: tuple[str, ...] | None = None
    description: str | None = None
    apiurl: str = Field(min_length=1)
    image_parameters: str | None = None
    image_parameters_type: ImageShape | None = None
    roles_authorized: tuple[str, ...] | None = None

    def to_descriptor(self) -> CapabilityDescriptor:
        """Project the entry onto the facts the invocation engine needs."""
        return CapabilityDescriptor(
            provider=self.provider,
            endpoint=self.apiurl,
            control_name=self.thinking_level_property,
            control_values_allowed=(
                frozenset(self.thinking_levels_authorized)
                if self.thinking_levels_authorized is not None
                else None
            ),
            roles_allowed=(
                frozenset(self.roles_authorized)
                if self.roles_authorized is not None
                else None
            ),
            image_field_name=self.image_parameters,
            image_shape=self.image_parameters_type,
        )
