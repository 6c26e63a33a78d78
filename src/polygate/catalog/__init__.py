"""Model catalog: the descriptor provider behind the invocation engine."""

from .builtin import BENCHMARKS, BUILTIN_MODELS, LICENCES, ORGANIZATIONS
from .catalog import ModelCatalog, find_benchmark, find_licence, find_organization
from .models import (
    Benchmark,
    Characteristic,
    Licence,
    ModelBenchmarkScore,
    ModelEntry,
    Organization,
    PerIoFlatPrice,
    PerIoTieredPrice,
    PerRunPrice,
    Price,
    PriceTier,
)

__all__ = [
    "ModelCatalog",
    "ModelEntry",
    "Price",
    "PerRunPrice",
    "PerIoFlatPrice",
    "PerIoTieredPrice",
    "PriceTier",
    "Characteristic",
    "Organization",
    "Licence",
    "Benchmark",
    "ModelBenchmarkScore",
    "BUILTIN_MODELS",
    "ORGANIZATIONS",
    "LICENCES",
    "BENCHMARKS",
    "find_organization",
    "find_licence",
    "find_benchmark",
]
