"""Shortcode resolution and render-agnostic views over shortcode tokens.

Stored article bodies reference internal pages with ``[[type:slug]]`` or
``[[type:slug|Custom Text]]``. At render time every token becomes an anchor;
the helpers below extract, count, validate or strip the same tokens without
rendering them.
"""

from __future__ import annotations

import re
from html import escape
from typing import Dict, List, Optional

from .config import EngineConfig, load_config
from .text import iter_matches
from .types import InvalidShortcode, LinkRegistry, LinkType, Shortcode, ShortcodeCounts

# Captures type, slug and optional custom text. The grammar has no escape for
# "]" or "|"; slugs containing ":" are rejected so "[[tarot:a:b]]" stays text.
SHORTCODE_PATTERN = r"\[\[(tarot|blog|spread|horoscope):([^\]|:]+)(?:\|([^\]]+))?\]\]"

SHORTCODE_RE = re.compile(SHORTCODE_PATTERN)

FALLBACK_URL = "#"
READING_URL = "/reading"


def format_shortcode(link_type: LinkType, slug: str, text: str | None = None) -> str:
    """Serialise a token, e.g. ``[[tarot:the-fool|The Fool]]``."""

    if text:
        return f"[[{link_type.value}:{slug}|{text}]]"
    return f"[[{link_type.value}:{slug}]]"


def get_url_for_type(link_type: LinkType | str, slug: str, config: EngineConfig | None = None) -> str:
    """Return the site-relative URL a shortcode of ``link_type`` points to.

    Spread shortcodes double as category links: suit and arcana slugs route to
    the card overview, known spread names to their reading page and anything
    else to the reading index.
    """

    resolved = LinkType.parse(link_type)
    if resolved is None:
        return FALLBACK_URL

    if resolved is LinkType.TAROT:
        return f"/tarot/{slug}"
    if resolved is LinkType.BLOG:
        return f"/blog/{slug}"
    if resolved is LinkType.HOROSCOPE:
        return f"/horoscopes/{slug}"

    engine_config = config or load_config(None)
    if engine_config.is_category_slug(slug):
        return f"/tarot/cards/{slug}"
    reading_slug = engine_config.spread_url_slug(slug)
    if reading_slug:
        return f"{READING_URL}/{reading_slug}"
    return READING_URL


def get_title_from_registry(link_type: LinkType, slug: str, registry: LinkRegistry | None) -> str:
    """Return the registry title for the slug, falling back to the slug itself."""

    if registry is None:
        return slug
    return registry.title_for(link_type, slug) or slug


def _display_text(match: re.Match[str], registry: LinkRegistry | None) -> str:
    custom_text = match.group(3)
    if custom_text:
        return custom_text
    return get_title_from_registry(LinkType(match.group(1)), match.group(2), registry)


def build_anchor(link_type: LinkType, url: str, label: str, config: EngineConfig) -> str:
    anchor = config.get("anchor", {})
    return (
        f'<a href="{escape(url, quote=True)}" class="{anchor.get("class", "internal-link")}" '
        f'data-link-type="{link_type.value}" target="{anchor.get("target", "_blank")}" '
        f'rel="{anchor.get("rel", "noopener noreferrer")}">{label}</a>'
    )


def process_shortcodes(
    content: str | None,
    registry: LinkRegistry | None = None,
    config: EngineConfig | None = None,
) -> str:
    """Replace every shortcode in ``content`` with an anchor tag.

    The label is the custom text when present, otherwise the registry title,
    otherwise the bare slug. Anchors are not shortcode syntax, so running the
    function over its own output changes nothing.
    """

    if not content:
        return ""

    engine_config = config or load_config(None)

    def _replace(match: re.Match[str]) -> str:
        link_type = LinkType(match.group(1))
        url = get_url_for_type(link_type, match.group(2), engine_config)
        return build_anchor(link_type, url, _display_text(match, registry), engine_config)

    return SHORTCODE_RE.sub(_replace, content)


def extract_shortcodes(content: str | None) -> List[Shortcode]:
    """Return every shortcode in ``content`` in document order."""

    if not content:
        return []
    return [
        Shortcode(
            full_match=match.group(0),
            type=LinkType(match.group(1)),
            slug=match.group(2),
            custom_text=match.group(3),
            position=match.start(),
        )
        for match in iter_matches(SHORTCODE_RE, content)
    ]


def validate_shortcodes(content: str | None, registry: LinkRegistry) -> List[InvalidShortcode]:
    """Return the shortcodes whose slug is missing from the registry."""

    invalid: List[InvalidShortcode] = []
    for shortcode in extract_shortcodes(content):
        if registry.find(shortcode.type, shortcode.slug) is not None:
            continue
        invalid.append(
            InvalidShortcode(
                shortcode=shortcode.full_match,
                type=shortcode.type,
                slug=shortcode.slug,
                reason=f'No {shortcode.type.value} found with slug "{shortcode.slug}"',
            )
        )
    return invalid


def count_shortcodes(content: str | None) -> ShortcodeCounts:
    """Tally shortcodes per type, plus a ``total`` entry."""

    shortcodes = extract_shortcodes(content)
    counts: Dict[str, int] = {link_type.value: 0 for link_type in LinkType}
    for shortcode in shortcodes:
        counts[shortcode.type.value] += 1
    counts["total"] = len(shortcodes)
    return counts


def strip_shortcodes(content: str | None, registry: Optional[LinkRegistry] = None) -> str:
    """Replace each shortcode with its display text, for plain-text excerpts."""

    if not content:
        return ""
    return SHORTCODE_RE.sub(lambda match: _display_text(match, registry), content)
