"""Shared fixtures for engine tests."""

from __future__ import annotations

from typing import Iterable, Tuple

import pytest

from arcanalinks.engine.config import load_config
from arcanalinks.engine.types import LinkRegistry


@pytest.fixture()
def engine_config():
    """Provide a fresh copy of the default engine configuration."""

    return load_config(None)


def make_registry(
    *,
    tarot: Iterable[Tuple[str, str]] = (),
    blog: Iterable[Tuple[str, str]] = (),
    spread: Iterable[Tuple[str, str]] = (),
    horoscope: Iterable[Tuple[str, str]] = (),
) -> LinkRegistry:
    """Build a registry from ``(slug, title)`` pairs per collection."""

    def _entries(pairs: Iterable[Tuple[str, str]]):
        return [{"slug": slug, "title": title} for slug, title in pairs]

    return LinkRegistry.from_dict(
        {
            "tarot": _entries(tarot),
            "blog": _entries(blog),
            "spread": _entries(spread),
            "horoscope": _entries(horoscope),
        }
    )


@pytest.fixture()
def registry() -> LinkRegistry:
    """A small registry resembling the production catalog."""

    return make_registry(
        tarot=[
            ("the-fool", "The Fool"),
            ("the-world", "The World"),
            ("the-emperor", "The Emperor: A Foundation of Power"),
            ("nine-of-pentacles", "9 of Pentacles: The Ultimate Guide"),
            ("death", "Death"),
        ],
        blog=[
            ("moon-rituals", "Moon Rituals"),
        ],
        spread=[
            ("celtic-cross", "Celtic Cross Spread"),
        ],
        horoscope=[
            ("aries", "Aries Horoscope"),
        ],
    )
