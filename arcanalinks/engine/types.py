"""Typed data structures shared by the linking engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple


class LinkType(str, Enum):
    """Kinds of linkable entities a shortcode can point at."""

    TAROT = "tarot"
    BLOG = "blog"
    SPREAD = "spread"
    HOROSCOPE = "horoscope"

    @classmethod
    def parse(cls, value: Any) -> Optional["LinkType"]:
        """Return the matching member, or ``None`` for unknown values."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class RegistryEntry:
    """A single linkable entity."""

    slug: str
    title: str


@dataclass(frozen=True)
class LinkRegistry:
    """Catalog of linkable entities grouped by :class:`LinkType`."""

    tarot: Tuple[RegistryEntry, ...] = ()
    blog: Tuple[RegistryEntry, ...] = ()
    spread: Tuple[RegistryEntry, ...] = ()
    horoscope: Tuple[RegistryEntry, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Iterable[Any]] | None) -> "LinkRegistry":
        """Build a registry from ``{"tarot": [{"slug": ..., "title": ...}], ...}``.

        Missing collections are treated as empty and entries without a slug
        are ignored.
        """

        data = data or {}
        collections: Dict[str, Tuple[RegistryEntry, ...]] = {}
        for link_type in LinkType:
            entries: List[RegistryEntry] = []
            for item in data.get(link_type.value) or []:
                if isinstance(item, RegistryEntry):
                    entries.append(item)
                    continue
                if not isinstance(item, Mapping):
                    continue
                slug = str(item.get("slug") or "").strip()
                if not slug:
                    continue
                entries.append(RegistryEntry(slug=slug, title=str(item.get("title") or "")))
            collections[link_type.value] = tuple(entries)
        return cls(**collections)

    def entries(self, link_type: LinkType) -> Tuple[RegistryEntry, ...]:
        if link_type is LinkType.TAROT:
            return self.tarot
        if link_type is LinkType.BLOG:
            return self.blog
        if link_type is LinkType.SPREAD:
            return self.spread
        if link_type is LinkType.HOROSCOPE:
            return self.horoscope
        raise ValueError(f"Unhandled link type: {link_type!r}")

    def find(self, link_type: LinkType, slug: str) -> Optional[RegistryEntry]:
        for entry in self.entries(link_type):
            if entry.slug == slug:
                return entry
        return None

    def title_for(self, link_type: LinkType, slug: str) -> Optional[str]:
        """Return the registry title for ``slug`` or ``None`` when unknown or blank."""

        entry = self.find(link_type, slug)
        if entry is None or not entry.title:
            return None
        return entry.title


@dataclass(frozen=True)
class TermInfo:
    """Identity behind a lowercase lookup key of the term index."""

    type: LinkType
    slug: str
    title: str
    requires_capital: bool
    label: str


@dataclass(frozen=True)
class ExistingLink:
    """An ``<a>`` element already present in the text."""

    start: int
    end: int
    text: str

    @property
    def text_start(self) -> int:
        """Offset where the visible text begins, just after the opening tag."""

        return self.end - len("</a>") - len(self.text)


@dataclass(frozen=True)
class ExistingShortcode:
    """A shortcode token already present in the text."""

    start: int
    end: int
    type: str
    slug: str
    custom_text: Optional[str] = None


@dataclass(frozen=True)
class ScanOptions:
    """Switches controlling a scan for linkable terms."""

    skip_existing_links: bool = True
    skip_existing_shortcodes: bool = True
    first_occurrence_only: bool = True
    case_sensitive: bool = False
    current_article_slug: str = ""


@dataclass(frozen=True)
class LinkSuggestion:
    """Instruction to replace ``length`` characters at ``position`` with ``shortcode``.

    Offsets refer to the exact text version the scan ran against.
    """

    term: str
    type: LinkType
    slug: str
    title: str
    shortcode: str
    position: int
    length: int
    selected: bool = True

    @property
    def end(self) -> int:
        return self.position + self.length

    def as_dict(self) -> Dict[str, Any]:
        return {
            "term": self.term,
            "type": self.type.value,
            "slug": self.slug,
            "title": self.title,
            "shortcode": self.shortcode,
            "position": self.position,
            "length": self.length,
            "selected": self.selected,
        }


@dataclass(frozen=True)
class Shortcode:
    """A parsed ``[[type:slug|text]]`` token and where it starts."""

    full_match: str
    type: LinkType
    slug: str
    position: int
    custom_text: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "full_match": self.full_match,
            "type": self.type.value,
            "slug": self.slug,
            "custom_text": self.custom_text,
            "position": self.position,
        }


@dataclass(frozen=True)
class InvalidShortcode:
    """Shortcode whose slug is missing from the registry."""

    shortcode: str
    type: LinkType
    slug: str
    reason: str

    def as_dict(self) -> Dict[str, Any]:
        return {
            "shortcode": self.shortcode,
            "type": self.type.value,
            "slug": self.slug,
            "reason": self.reason,
        }


ShortcodeCounts = Dict[str, int]
