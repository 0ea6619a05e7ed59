"""
Template registry: normalized city key -> CityTemplateConfig.

The registry is built once from the JSON files in ``config.CITIES_DIR`` and is
read-only afterwards. ``reload()`` returns a new snapshot instead of mutating
the current one.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping

from .config import config
from .errors import UnknownCity
from .schemas.template import CityTemplateConfig

logger = logging.getLogger(__name__)


def normalize_city_key(city: str | None) -> str:
    """Uppercase and trim a city name ("  Cali " -> "CALI")."""
    return (city or "").strip().upper()


def load_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8-sig") as handle:
        return json.load(handle)


def load_city_config(path: Path) -> CityTemplateConfig:
    """
    Load and validate one city file.

    Args:
        path: JSON file with the operator-authored city entry

    Returns:
        CityTemplateConfig

    Raises:
        ValueError: If the file does not contain a JSON object
        MissingTemplateSource: If the entry has no template and no images
        pydantic.ValidationError: If the entry has the wrong shape
    """
    raw = load_json(path)
    if not isinstance(raw, dict):
        raise ValueError(f"City template JSON must be an object in {path}")
    raw.setdefault("city", path.stem)
    return CityTemplateConfig.from_raw(raw, origin=str(path))


class TemplateRegistry:
    """Immutable mapping from normalized city key to template configuration."""

    def __init__(self, entries: Iterable[CityTemplateConfig], source_dir: Path | None = None):
        table: dict[str, CityTemplateConfig] = {}
        for entry in entries:
            key = normalize_city_key(entry.city)
            if key in table:
                raise ValueError(f"City '{key}' is configured more than once")
            table[key] = entry
        self._entries: Mapping[str, CityTemplateConfig] = MappingProxyType(table)
        self.source_dir = source_dir

    @classmethod
    def from_directory(cls, directory: Path) -> "TemplateRegistry":
        """Build a registry from every ``*.json`` file of a directory, in name order."""
        directory = Path(directory)
        paths = sorted(directory.glob("*.json"))
        entries = [load_city_config(path) for path in paths]
        logger.debug("Loaded %d city templates from %s", len(entries), directory)
        return cls(entries, source_dir=directory)

    def reload(self, directory: Path | None = None) -> "TemplateRegistry":
        """
        Re-read the city files and return a new registry snapshot.

        Args:
            directory: Directory to read (defaults to the one this registry came from)

        Returns:
            A new TemplateRegistry; this one is left untouched
        """
        target = directory or self.source_dir
        if target is None:
            raise ValueError("Registry was not loaded from a directory; pass one to reload()")
        return TemplateRegistry.from_directory(target)

    def lookup(self, city: str | None) -> CityTemplateConfig:
        """
        Find the configuration of a city (case-insensitive, trimmed).

        Raises:
            UnknownCity: If the city is not configured
        """
        key = normalize_city_key(city)
        try:
            return self._entries[key]
        except KeyError:
            raise UnknownCity(
                f"No certificate template configured for city '{key}'. "
                f"Available: {', '.join(self.list_cities()) or 'none'}",
                city=key,
            ) from None

    def list_cities(self) -> list[str]:
        """Registered city keys in load order."""
        return list(self._entries)

    def __contains__(self, city: object) -> bool:
        return isinstance(city, str) and normalize_city_key(city) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


DEFAULT_REGISTRY = TemplateRegistry.from_directory(config.CITIES_DIR)
