"""Keyword Dictionary — Static two-tier list of sensitive-content terms.

The dictionary is configuration data: it is parsed once into an immutable
value and then passed to whoever needs it. The on-disk shape is::

    {"categories": {"explicit": ["..."], "mild": ["..."]}}

Entries that are not non-blank strings are dropped silently. A keyword
listed in both tiers is kept in ``explicit`` only.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, Field

from truthrank.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_BUNDLED_RESOURCE = "content_keywords.json"


class KeywordDictionary(BaseModel):
    """Immutable explicit / mild keyword tiers (lower-case, de-duplicated, ordered)."""

    model_config = {"frozen": True}

    explicit: tuple[str, ...] = Field(default=(), description="Explicit-tier keywords and phrases")
    mild: tuple[str, ...] = Field(default=(), description="Mild-tier keywords and phrases (no overlap with explicit)")

    @classmethod
    def from_payload(cls, payload: Any) -> KeywordDictionary:
        """Build a dictionary from a decoded configuration payload.

        Anything that does not look like ``{"categories": {...}}`` yields an
        empty dictionary rather than an error.
        """
        categories = payload.get("categories") if isinstance(payload, dict) else None
        if not isinstance(categories, dict):
            return cls()

        explicit = _normalize_entries(categories.get("explicit"))
        explicit_set = set(explicit)
        mild = tuple(keyword for keyword in _normalize_entries(categories.get("mild")) if keyword not in explicit_set)
        return cls(explicit=explicit, mild=mild)

    @property
    def is_empty(self) -> bool:
        return not self.explicit and not self.mild


def _normalize_entries(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    seen: dict[str, None] = {}
    for entry in value:
        if isinstance(entry, str) and entry.strip():
            seen.setdefault(entry.strip().lower(), None)
    return tuple(seen)


def load_keyword_dictionary(path: str | Path | None = None) -> KeywordDictionary:
    """Load a keyword dictionary from a JSON or YAML file, or the bundled one.

    Args:
        path: Dictionary file. ``.yaml`` / ``.yml`` files are parsed with
            PyYAML, everything else as JSON. ``None`` loads the dictionary
            shipped with the package.

    Returns:
        The parsed dictionary.

    Raises:
        ConfigurationError: If the file is missing or cannot be parsed.
    """
    if path is None:
        raw = resources.files("truthrank.config").joinpath(_BUNDLED_RESOURCE).read_text(encoding="utf-8")
        source = f"bundled:{_BUNDLED_RESOURCE}"
        suffix = ".json"
    else:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigurationError(f"Keyword dictionary not found: {config_path}")
        try:
            raw = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Keyword dictionary unreadable: {config_path}: {e}") from e
        source = str(config_path)
        suffix = config_path.suffix.lower()

    try:
        if suffix in {".yaml", ".yml"}:
            payload = yaml.safe_load(raw)
        else:
            payload = json.loads(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Keyword dictionary is not valid {suffix.lstrip('.')}: {source}: {e}") from e

    dictionary = KeywordDictionary.from_payload(payload)
    if dictionary.is_empty:
        logger.warning("Keyword dictionary %s has no usable entries; nothing will be flagged by keyword", source)
    else:
        logger.info(
            "Loaded keyword dictionary from %s: %d explicit, %d mild",
            source,
            len(dictionary.explicit),
            len(dictionary.mild),
        )
    return dictionary


@lru_cache(maxsize=1)
def default_keyword_dictionary() -> KeywordDictionary:
    """The bundled dictionary, parsed once per process."""
    return load_keyword_dictionary()
