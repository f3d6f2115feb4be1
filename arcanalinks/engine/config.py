"""Configuration helpers for the linking engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml


@dataclass(frozen=True)
class EngineConfig:
    """Typed wrapper around the engine configuration dictionary."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    def capitalized_nouns(self) -> List[str]:
        return [str(noun).lower() for noun in self.raw.get("capitalized_nouns", [])]

    def spread_url_slug(self, slug: str) -> str | None:
        aliases = self.raw.get("spread_aliases", {})
        return aliases.get(slug)

    def is_category_slug(self, slug: str) -> bool:
        return slug in self.raw.get("category_slugs", [])


DEFAULTS: Dict[str, Any] = {
    # Titles such as "The World" only match when capitalised in the prose.
    "capitalized_nouns": [
        "world",
        "sun",
        "moon",
        "star",
        "tower",
        "devil",
        "emperor",
        "empress",
        "fool",
        "lovers",
        "chariot",
        "hermit",
        "wheel",
        "hanged",
    ],
    "category_slugs": [
        "wands",
        "cups",
        "swords",
        "pentacles",
        "major-arcana",
        "minor-arcana",
    ],
    "spread_aliases": {
        "single": "single",
        "single-card": "single",
        "single-card-reading": "single",
        "three-card": "three-card",
        "three-card-reading": "three-card",
        "love": "love",
        "love-reading": "love",
        "career": "career",
        "career-reading": "career",
        "horseshoe": "horseshoe",
        "horseshoe-reading": "horseshoe",
        "celtic-cross": "celtic-cross",
        "celtic-cross-reading": "celtic-cross",
    },
    "anchor": {
        "class": "internal-link",
        "target": "_blank",
        "rel": "noopener noreferrer",
    },
    "preview_mark_class": "link-suggestion",
}


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load configuration from YAML, merging with defaults."""

    data: Dict[str, Any] = DEFAULTS.copy()
    data["capitalized_nouns"] = list(DEFAULTS["capitalized_nouns"])
    data["category_slugs"] = list(DEFAULTS["category_slugs"])
    data["spread_aliases"] = dict(DEFAULTS["spread_aliases"])
    data["anchor"] = dict(DEFAULTS["anchor"])

    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as stream:
            user = yaml.safe_load(stream) or {}
        merge_into(data, user)

    return EngineConfig(data)


def merge_into(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override into base dict."""

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_into(base[key], value)
        else:
            base[key] = value
