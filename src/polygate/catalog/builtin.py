from __future__ import annotations

"""
The model, organization, licence and benchmark tables shipped with polygate.

Prices are USD per million tokens.
"""

from ..llms.types import ImageShape, Provider
from .models import (
    Benchmark,
    Characteristic,
    Licence,
    ModelBenchmarkScore,
    ModelEntry,
    Organization,
    PerIoFlatPrice,
    PerIoTieredPrice,
    PriceTier,
)

_REPLICATE_OPENAI_ROLES = ("user", "assistant", "developer", "system")
_REPLICATE_ANTHROPIC_ROLES = ("user", "assistant")
_OPENROUTER_ROLES = ("user", "system", "assistant")
_EFFORT = ("low", "medium", "high")
_BOOL_LEVELS = ("false", "true")
_TEXT_IMAGE = ("text", "image")
_TEXT = ("text",)
_GENERALIST = ("generalist",)


def _tiers(*pairs: tuple[int | None, float]) -> tuple[PriceTier, ...]:
    return tuple(PriceTier(max_tokens=m, price_per_million=p) for m, p in pairs)


ORGANIZATIONS: tuple[Organization, ...] = (
    Organization(name="Open AI", url="https://openai.com"),
    Organization(name="Anthropic", url="https://www.anthropic.com"),
    Organization(name="Google DeepMind", url="https://deepmind.google"),
    Organization(name="Meta", url="https://ai.meta.com"),
    Organization(name="xAI", url="https://x.ai"),
)

LICENCES: tuple[Licence, ...] = (
    Licence(name="Proprietary", open_source=False, commercial_use=True, free_software=False),
    Licence(
        name="Apache-2.0",
        url="https://www.apache.org/licenses/LICENSE-2.0",
        open_source=True,
        commercial_use=True,
        free_software=True,
    ),
    Licence(
        name="MIT",
        url="https://opensource.org/licenses/MIT",
        open_source=True,
        commercial_use=True,
        free_software=True,
    ),
    Licence(
        name="CC-BY-4.0",
        url="https://creativecommons.org/licenses/by/4.0/",
        open_source=True,
        commercial_use=True,
        free_software=False,
    ),
)

BUILTIN_MODELS: tuple[ModelEntry, ...] = (
    ModelEntry(
        name="gpt-4o",
        url="https://replicate.com/openai/gpt-4o",
        provider=Provider.REPLICATE,
        characteristic=Characteristic(context_window=128_000, max_output_length=16_384),
        price=PerIoFlatPrice(input_price=2.5, output_price=10.0),
        organization="Open AI",
        licence="Proprietary",
        capability=_GENERALIST,
        input_modality=_TEXT_IMAGE,
        output_modality=_TEXT,
        description=(
            "Versatile multi-modal assistant tailored for complex reasoning, "
            "long-context synthesis, and structured instruction execution."
        ),
        apiurl="https://api.replicate.com/v1/models/openai/gpt-4o/predictions",
        image_parameters="image_input",
        image_parameters_type=ImageShape.LIST,
        roles_authorized=_REPLICATE_OPENAI_ROLES,
    ),
    ModelEntry(
        name="gpt-4o-mini",
        url="https://replicate.com/openai/gpt-4o-mini",
        provider=Provider.REPLICATE,
        characteristic=Characteristic(context_window=128_000, max_output_length=16_384),
        price=PerIoFlatPrice(input_price=2.5, output_price=10.0),
        organization="Open AI",
        licence="Proprietary",
        capability=_GENERALIST,
        input_modality=_TEXT_IMAGE,
        output_modality=_TEXT,
        description=(
            "Lightweight, latency-focused variant of GPT-4o optimized for fast "
            "interactive edits, short-form coding tasks, and cost-sensitive deployments."
        ),
        apiurl="https://api.replicate.com/v1/models/openai/gpt-4o-mini/predictions",
        image_parameters="image_input",
        image_parameters_type=ImageShape.LIST,
        roles_authorized=_REPLICATE_OPENAI_ROLES,
    ),
    ModelEntry(
        name="claude-4-sonnet",
        url="https://replicate.com/anthropic/claude-4-sonnet",
        provider=Provider.REPLICATE,
        thinking_level_property="extended_thinking",
        thinking_levels_authorized=_BOOL_LEVELS,
        characteristic=Characteristic(context_window=200_000, max_output_length=64_000),
        price=PerIoFlatPrice(input_price=3.0, output_price=15.0),
        organization="Anthropic",
        licence="Proprietary",
        capability=_GENERALIST,
        input_modality=_TEXT_IMAGE,
        output_modality=_TEXT,
        description=(
            "Anthropic's Sonnet: a careful conversationalist excelling at iterative "
            "refinement, summarization, and safety-conscious dialogue."
        ),
        apiurl="https://api.replicate.com/v1/models/anthropic/claude-4-sonnet/predictions",
        image_parameters="image",
        image_parameters_type=ImageShape.SINGLE,
        roles_authorized=_REPLICATE_ANTHROPIC_ROLES,
    ),
    ModelEntry(
        name="gpt-5-codex",
        url="https://openrouter.ai/openai/gpt-5-codex",
        provider=Provider.OPENROUTER,
        thinking_level_property="effort",
        thinking_levels_authorized=_EFFORT,
        characteristic=Characteristic(context_window=400_000, max_output_length=128_000),
        price=PerIoFlatPrice(input_price=1.25, output_price=10.0),
        organization="Open AI",
        licence="Proprietary",
        capability=_GENERALIST,
        input_modality=_TEXT_IMAGE,
        output_modality=_TEXT,
        description=(
            "High-throughput GPT-5 variant engineered for code generation, "
            "multi-step algorithm design, and complex reasoning pipelines."
        ),
        apiurl="openai/gpt-5-codex",
        roles_authorized=_OPENROUTER_ROLES,
    ),
    ModelEntry(
        name="grok-4",
        url="https://openrouter.ai/x-ai/grok-4",
        provider=Provider.OPENROUTER,
        thinking_level_property="effort",
        thinking_levels_authorized=_EFFORT,
        characteristic=Characteristic(context_window=256_000, max_output_length=256_000),
        price=PerIoTieredPrice(
            input_tiers=_tiers((128_000, 3.0), (256_000, 6.0)),
            output_tiers=_tiers((128_000, 15.0), (256_000, 30.0)),
        ),
        organization="xAI",
        licence="Proprietary",
        capability=_GENERALIST,
        input_modality=_TEXT_IMAGE,
        output_modality=_TEXT,
        description=(
            "xAI's Grok 4: pragmatic reasoning engine optimized for developer "
            "workflows, factual recall, and real-world problem solving."
        ),
        apiurl="x-ai/grok-4",
        roles_authorized=_OPENROUTER_ROLES,
    ),
    ModelEntry(
        name="claude-4.5-sonnet",
        url="https://openrouter.ai/anthropic/claude-sonnet-4.5",
        provider=Provider.OPENROUTER,
        thinking_level_property="extended_thinking",
        thinking_levels_authorized=_BOOL_LEVELS,
        characteristic=Characteristic(context_window=1_000_000, max_output_length=64_000),
        price=PerIoFlatPrice(input_price=3.0, output_price=15.0),
        organization="Anthropic",
        licence="Proprietary",
        capability=_GENERALIST,
        input_modality=_TEXT_IMAGE,
        output_modality=_TEXT,
        description=(
            "Claude Sonnet 4.5: long-context specialist focused on sustained "
            "reasoning, autonomous task orchestration, and alignment-aware responses."
        ),
        apiurl="anthropic/claude-sonnet-4.5",
        roles_authorized=_OPENROUTER_ROLES,
    ),
    ModelEntry(
        name="grok-4-fast",
        url="https://openrouter.ai/x-ai/grok-4-fast",
        provider=Provider.OPENROUTER,
        thinking_level_property="effort",
        thinking_levels_authorized=_EFFORT,
        characteristic=Characteristic(context_window=2_000_000, max_output_length=30_000),
        price=PerIoTieredPrice(
            input_tiers=_tiers((128_000, 0.2), (256_000, 0.4)),
            output_tiers=_tiers((128_000, 0.5), (256_000, 1.0)),
        ),
        organization="xAI",
        licence="Proprietary",
        capability=_GENERALIST,
        input_modality=_TEXT_IMAGE,
        output_modality=_TEXT,
        description=(
            "Grok 4 Fast: ultra-low-latency flavor tuned for rapid interactive "
            "sessions, command-line workflows, and concise reasoning."
        ),
        apiurl="x-ai/grok-4-fast",
        roles_authorized=_OPENROUTER_ROLES,
    ),
    ModelEntry(
        name="gemini-3-pro",
        url="https://openrouter.ai/google/gemini-3-pro-preview",
        provider=Provider.OPENROUTER,
        thinking_level_property="effort",
        thinking_levels_authorized=("low", "high"),
        characteristic=Characteristic(context_window=1_048_576, max_output_length=65_536),
        price=PerIoTieredPrice(
            input_tiers=_tiers((200_000, 2.0), (1_048_576, 4.0)),
            output_tiers=_tiers((200_000, 12.0), (1_048_576, 18.0)),
        ),
        organization="Google DeepMind",
        licence="Proprietary",
        capability=_GENERALIST,
        input_modality=("text", "image", "audio", "video", "PDF"),
        output_modality=_TEXT,
        description=(
            "Gemini 3 Pro: a generalist model that excels at a wide range of tasks, "
            "from coding to creative writing, and is optimized for speed and efficiency."
        ),
        apiurl="google/gemini-3-pro-preview",
        roles_authorized=_OPENROUTER_ROLES,
    ),
)


def _ranking(*rows: tuple[str, str | None, float]) -> tuple[ModelBenchmarkScore, ...]:
    return tuple(
        ModelBenchmarkScore(model_name=name, thinking_level=level, score=score)
        for name, level, score in rows
    )


# Top five of each leaderboard, as published.
BENCHMARKS: tuple[Benchmark, ...] = (
    Benchmark(
        name="LiveBench-Coding",
        description=(
            "A continuously-updated leaderboard that evaluates models on live, "
            "realistic coding tasks and integration performance."
        ),
        ranking=_ranking(
            ("Claude 4 sonnet", None, 80.74),
            ("Claude 4.5 sonnet", "thinking", 80.36),
            ("gpt-5", None, 78.57),
            ("claude-4-sonnet", "Thinking", 77.48),
            ("gpt-5", "High", 77.10),
        ),
        domain=("coding", "programming"),
        quality=7,
        leaderboard_url="https://livebench.ai/#/",
    ),
    Benchmark(
        name="LiveBench-Reasoning",
        description=(
            "Leaderboard focused on pure reasoning capability averaged across "
            "diverse reasoning tasks."
        ),
        ranking=_ranking(
            ("gpt-5-codex", None, 98.67),
            ("gpt-5", "high", 98.17),
            ("grok-4", None, 97.78),
            ("gpt-5", "medium", 96.58),
            ("Grok 4 Fast", None, 95.44),
        ),
        domain=("reasoning", "nlp"),
        quality=9,
        leaderboard_url="https://livebench.ai/#/",
    ),
    Benchmark(
        name="Humanity's Last Exam",
        description=(
            "An expert-level benchmark of around 3,000 questions across many "
            "academic disciplines, testing reasoning and knowledge beyond what "
            "current models reliably handle."
        ),
        ranking=_ranking(
            ("Gemini 3 Pro", None, 37.52),
            ("GPT 5 Pro", None, 31.64),
            ("GPT 5", None, 25.32),
            ("Gemini 2.5 Pro", None, 21.64),
            ("o3", None, 20.32),
        ),
        domain=("reasoning", "knowledge"),
        quality=9,
        leaderboard_url="https://scale.com/leaderboard/humanitys_last_exam",
    ),
)
