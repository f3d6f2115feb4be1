"""Spans of the source text that must never be treated as linkable prose."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, TypeVar

from .shortcodes import SHORTCODE_PATTERN
from .text import Range, iter_matches
from .types import ExistingLink, ExistingShortcode, ScanOptions

_LINK_RE = re.compile(r"<a(?:\s[^>]*)?>(.*?)</a>", re.IGNORECASE | re.DOTALL)
_EXISTING_SHORTCODE_RE = re.compile(SHORTCODE_PATTERN, re.IGNORECASE)
# Looser than the shortcode grammar so half-formed tokens are still left alone.
_SHORTCODE_SPAN_RE = re.compile(r"\[\[(?:tarot|blog|spread|horoscope):[^\]]+\]\]", re.IGNORECASE)
# Markup of every tag except <a> opening/closing tags, e.g. <img alt="The Fool">.
_TAG_MARKUP_RE = re.compile(r"<(?!a[\s>]|/a>)[^>]+>", re.IGNORECASE)

_Span = TypeVar("_Span", ExistingLink, ExistingShortcode)


def find_existing_links(content: str) -> List[ExistingLink]:
    """Return every ``<a>…</a>`` element with its inner text."""

    return [
        ExistingLink(start=match.start(), end=match.end(), text=match.group(1))
        for match in iter_matches(_LINK_RE, content or "")
    ]


def find_existing_shortcodes(content: str) -> List[ExistingShortcode]:
    """Return every well-formed shortcode token, whatever the case of its type."""

    return [
        ExistingShortcode(
            start=match.start(),
            end=match.end(),
            type=match.group(1).lower(),
            slug=match.group(2),
            custom_text=match.group(3),
        )
        for match in iter_matches(_EXISTING_SHORTCODE_RE, content or "")
    ]


def find_excluded_ranges(content: str, options: ScanOptions) -> List[Range]:
    """Return ``[start, end)`` ranges the scanner must not report matches in.

    Ranges come from three independent passes and may overlap; they are
    neither merged nor deduplicated.
    """

    if not content:
        return []

    ranges: List[Range] = []
    if options.skip_existing_links:
        ranges.extend(match.span() for match in iter_matches(_LINK_RE, content))
    if options.skip_existing_shortcodes:
        ranges.extend(match.span() for match in iter_matches(_SHORTCODE_SPAN_RE, content))
    ranges.extend(match.span() for match in iter_matches(_TAG_MARKUP_RE, content))
    return ranges


def is_position_excluded(position: int, length: int, ranges: Sequence[Range]) -> bool:
    """Return True if ``[position, position + length)`` touches any excluded range.

    A candidate is excluded when it starts inside a range, ends inside one, or
    covers one entirely.
    """

    end = position + length
    for start, stop in ranges:
        if start <= position < stop:
            return True
        if start < end <= stop:
            return True
        if position <= start and end >= stop:
            return True
    return False


def find_containing(position: int, spans: Sequence[_Span]) -> Optional[_Span]:
    """Return the first span whose range contains ``position``."""

    for span in spans:
        if span.start <= position < span.end:
            return span
    return None
