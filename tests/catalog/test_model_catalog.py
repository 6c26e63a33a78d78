from __future__ import annotations

import json

import pytest
from pydantic import ValidationError as PydanticValidationError

from polygate.catalog import (
    Benchmark,
    ModelCatalog,
    ModelEntry,
    PerIoFlatPrice,
    PerIoTieredPrice,
    PerRunPrice,
    PriceTier,
    find_benchmark,
    find_licence,
    find_organization,
)
from polygate.llms.errors import ConfigError, ModelNotFoundError
from polygate.llms.types import ImageShape, Provider


def _entry_dict(**overrides) -> dict:
    data = {
        "name": "llama-local",
        "URL": "https://replicate.com/meta/llama",
        "provider": "Replicate",
        "price": {"kind": "per_run", "run_price": 0.01},
        "licence": "MIT",
        "apiurl": "https://api.replicate.com/v1/models/meta/llama/predictions",
        "roles_authorized": ["user"],
    }
    data.update(overrides)
    return data


def test_builtin_catalog_lists_shipped_models():
    catalog = ModelCatalog.builtin()
    assert catalog.names() == [
        "gpt-4o",
        "gpt-4o-mini",
        "claude-4-sonnet",
        "gpt-5-codex",
        "grok-4",
        "claude-4.5-sonnet",
        "grok-4-fast",
        "gemini-3-pro",
    ]
    assert catalog.providers() == frozenset({Provider.REPLICATE, Provider.OPENROUTER})
    assert "grok-4" in catalog
    assert len(catalog) == 8


def test_replicate_descriptor_carries_image_facts():
    descriptor = ModelCatalog.builtin().descriptor_for("gpt-4o")
    assert descriptor.provider is Provider.REPLICATE
    assert descriptor.endpoint == "https://api.replicate.com/v1/models/openai/gpt-4o/predictions"
    assert descriptor.image_field_name == "image_input"
    assert descriptor.image_shape is ImageShape.LIST
    assert descriptor.control_name is None
    assert descriptor.roles_allowed == frozenset({"user", "assistant", "developer", "system"})


def test_openrouter_descriptor_uses_model_id_as_endpoint():
    descriptor = ModelCatalog.builtin().descriptor_for("gemini-3-pro")
    assert descriptor.provider is Provider.OPENROUTER
    assert descriptor.endpoint == "google/gemini-3-pro-preview"
    assert descriptor.control_name == "effort"
    assert descriptor.control_values_allowed == frozenset({"low", "high"})


def test_unknown_model_raises():
    catalog = ModelCatalog.builtin()
    with pytest.raises(ModelNotFoundError):
        catalog.descriptor_for("nope")
    with pytest.raises(ModelNotFoundError):
        catalog.entry_for("nope")


def test_tiered_price_uses_first_matching_tier():
    price = ModelCatalog.builtin().entry_for("grok-4").price
    assert isinstance(price, PerIoTieredPrice)
    assert price.input_price_per_million(100_000) == 3.0
    assert price.input_price_per_million(128_000) == 3.0
    assert price.input_price_per_million(200_000) == 6.0
    assert price.output_price_per_million(256_000) == 30.0
    assert price.input_price_per_million(300_000) is None
    assert price.run_price is None


def test_unbounded_tier_catches_everything():
    price = PerIoTieredPrice(
        input_tiers=(PriceTier(max_tokens=10, price_per_million=1.0), PriceTier(price_per_million=2.0)),
        output_tiers=(),
    )
    assert price.input_price_per_million(10**9) == 2.0
    assert price.output_price_per_million(1) is None


def test_flat_and_per_run_prices():
    flat = PerIoFlatPrice(input_price=1.25, output_price=10.0)
    assert flat.input_price_per_million(10**6) == 1.25
    assert flat.output_price_per_million(0) == 10.0

    per_run = PerRunPrice(run_price=0.45)
    assert per_run.run_price == 0.45
    assert per_run.input_price_per_million(1) is None


def test_entries_are_immutable():
    entry = ModelCatalog.builtin().entry_for("gpt-4o")
    with pytest.raises(PydanticValidationError):
        entry.name = "renamed"


def test_from_json_loads_list_and_models_object(tmp_path):
    path = tmp_path / "models.json"
    path.write_text(json.dumps([_entry_dict()]), encoding="utf-8")
    catalog = ModelCatalog.from_json(path)
    assert catalog.names() == ["llama-local"]
    assert isinstance(catalog.entry_for("llama-local").price, PerRunPrice)

    wrapped = tmp_path / "wrapped.json"
    wrapped.write_text(json.dumps({"models": [_entry_dict(name="other")]}), encoding="utf-8")
    assert ModelCatalog.from_json(wrapped).names() == ["other"]


@pytest.mark.parametrize(
    "entry",
    [
        _entry_dict(provider="Bedrock"),
        _entry_dict(price={"kind": "per_token", "value": 1}),
        _entry_dict(apiurl=""),
        _entry_dict(unexpected="field"),
        _entry_dict(image_parameters_type="Array"),
    ],
)
def test_from_json_rejects_invalid_entries(tmp_path, entry):
    path = tmp_path / "models.json"
    path.write_text(json.dumps([entry]), encoding="utf-8")
    with pytest.raises(ConfigError):
        ModelCatalog.from_json(path)


def test_from_json_rejects_bad_files(tmp_path):
    with pytest.raises(ConfigError):
        ModelCatalog.from_json(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        ModelCatalog.from_json(broken)

    scalar = tmp_path / "scalar.json"
    scalar.write_text("42", encoding="utf-8")
    with pytest.raises(ConfigError):
        ModelCatalog.from_json(scalar)


def test_empty_whitelists_are_rejected():
    with pytest.raises(ConfigError):
        ModelCatalog.from_entries([_entry_dict(roles_authorized=[])])
    with pytest.raises(ConfigError):
        ModelCatalog.from_entries(
            [_entry_dict(thinking_level_property="effort", thinking_levels_authorized=[])]
        )


def test_duplicate_names_are_rejected():
    entry = ModelEntry.model_validate(_entry_dict())
    with pytest.raises(ConfigError, match="Duplicate"):
        ModelCatalog.from_entries([entry, entry])


def test_organizations_and_licences_lookup():
    assert find_organization("xAI").url == "https://x.ai"
    assert find_licence("Apache-2.0").open_source is True
    assert find_licence("Proprietary").commercial_use is True
    assert find_licence("WTFPL") is None


def test_benchmark_lookup_by_exact_name():
    reasoning = find_benchmark("LiveBench-Reasoning")

    assert reasoning is not None
    assert reasoning.quality == 9
    assert reasoning.domain == ("reasoning", "nlp")
    assert reasoning.leaderboard_url == "https://livebench.ai/#/"
    assert [s.model_name for s in reasoning.ranking][:3] == ["gpt-5-codex", "gpt-5", "grok-4"]
    assert reasoning.ranking[1].thinking_level == "high"
    scores = [s.score for s in reasoning.ranking]
    assert scores == sorted(scores, reverse=True)

    assert find_benchmark("Humanity's Last Exam").ranking[0].model_name == "Gemini 3 Pro"
    assert find_benchmark("livebench-reasoning") is None


def test_benchmark_records_validate():
    bench = Benchmark.model_validate(
        {
            "name": "Local",
            "ranking": [{"model_name": "gpt-4o", "score": 12.5}],
            "domain": ["qa"],
            "quality": 3,
            "leaderboard_url": "https://example.org",
        }
    )
    assert bench.ranking[0].thinking_level is None
    assert bench.description is None

    with pytest.raises(PydanticValidationError):
        Benchmark.model_validate({"name": "x", "quality": 300, "leaderboard_url": "u"})
