from __future__ import annotations

"""
In-memory model catalog: public model name -> entry and capability descriptor.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator

from pydantic import TypeAdapter, ValidationError

from ..llms.errors import ConfigError, ModelNotFoundError
from ..llms.types import CapabilityDescriptor, Provider
from .builtin import BENCHMARKS, BUILTIN_MODELS, LICENCES, ORGANIZATIONS
from .models import Benchmark, Licence, ModelEntry, Organization

logger = logging.getLogger(__name__)

_ENTRIES = TypeAdapter(list[ModelEntry])


class ModelCatalog:
    """
    Read-only lookup used by the invocation engine.

    Descriptors are derived once at construction, so an inconsistent entry
    fails with `ConfigError` before any invocation.
    """

    def __init__(self, entries: Iterable[ModelEntry]) -> None:
        self._entries: dict[str, ModelEntry] = {}
        self._descriptors: dict[str, CapabilityDescriptor] = {}

        for entry in entries:
            if entry.name in self._entries:
                raise ConfigError(f"Duplicate model name '{entry.name}' in catalog")
            self._entries[entry.name] = entry
            self._descriptors[entry.name] = entry.to_descriptor()

    @classmethod
    def builtin(cls) -> "ModelCatalog":
        return cls(BUILTIN_MODELS)

    @classmethod
    def from_entries(cls, entries: Iterable[ModelEntry | dict[str, Any]]) -> "ModelCatalog":
        """Build from entries or their JSON-shaped dicts."""
        raw = list(entries)
        if all(isinstance(item, ModelEntry) for item in raw):
            return cls(raw)
        try:
            return cls(_ENTRIES.validate_python(raw))
        except ValidationError as e:
            raise ConfigError(f"Invalid model catalog: {e}") from e

    @classmethod
    def from_json(cls, path: str | Path) -> "ModelCatalog":
        """
        Load a catalog file holding a JSON array of entries, or an object
        with a `models` array.
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"Cannot read model catalog {path}: {e}") from e
        except ValueError as e:
            raise ConfigError(f"Model catalog {path} is not valid JSON: {e}") from e

        if isinstance(data, dict):
            data = data.get("models")
        if not isinstance(data, list):
            raise ConfigError(f"Model catalog {path} must hold a list of models")

        catalog = cls.from_entries(data)
        logger.info("loaded %d model(s) from %s", len(catalog), path)
        return catalog

    def descriptor_for(self, name: str) -> CapabilityDescriptor:
        try:
            return self._descriptors[name]
        except KeyError:
            raise ModelNotFoundError(name) from None

    def entry_for(self, name: str) -> ModelEntry:
        try:
            return self._entries[name]
        except KeyError:
            raise ModelNotFoundError(name) from None

    def names(self) -> list[str]:
        return list(self._entries)

    def providers(self) -> frozenset[Provider]:
        return frozenset(entry.provider for entry in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[ModelEntry]:
        return iter(self._entries.values())


def find_organization(name: str) -> Organization | None:
    return next((org for org in ORGANIZATIONS if org.name == name), None)


def find_licence(name: str) -> Licence | None:
    return next((lic for lic in LICENCES if lic.name == name), None)


def find_benchmark(name: str) -> Benchmark | None:
    return next((bench for bench in BENCHMARKS if bench.name == name), None)
