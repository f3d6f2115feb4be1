"""Scan article text for mentions of registry entities and propose shortcodes."""

from __future__ import annotations

from typing import List

from .config import EngineConfig, load_config
from .exclusions import (
    find_containing,
    find_excluded_ranges,
    find_existing_links,
    find_existing_shortcodes,
    is_position_excluded,
)
from .shortcodes import format_shortcode
from .terms import build_term_index, sorted_terms
from .text import Range, compile_term, has_proper_capitalization, is_whole_word, iter_matches, overlaps
from .types import LinkRegistry, LinkSuggestion, ScanOptions


def scan_for_linkable_terms(
    content: str | None,
    registry: LinkRegistry,
    options: ScanOptions | None = None,
    config: EngineConfig | None = None,
) -> List[LinkSuggestion]:
    """Return link suggestions for ``content`` ordered by position.

    Terms are tried longest first. A match is dropped when it sits in an
    excluded range, fails the capitalisation gate, is not a whole word in
    plain prose, or overlaps a span an earlier (longer) term already claimed.
    A match inside an existing ``<a>`` element or shortcode proposes replacing
    that whole element while keeping its visible text, so customised captions
    survive the conversion.
    """

    if not content:
        return []

    opts = options or ScanOptions()
    engine_config = config or load_config(None)
    index = build_term_index(registry, engine_config)
    excluded = find_excluded_ranges(content, opts)
    existing_links = find_existing_links(content)
    existing_shortcodes = find_existing_shortcodes(content)

    suggestions: List[LinkSuggestion] = []
    claimed: List[Range] = []

    for term, info in sorted_terms(index):
        if opts.current_article_slug and info.slug == opts.current_article_slug:
            continue

        if opts.case_sensitive:
            pattern = compile_term(info.label, case_sensitive=True)
        else:
            pattern = compile_term(term)

        for match in iter_matches(pattern, content):
            position = match.start()
            matched_text = match.group(0)

            if is_position_excluded(position, len(matched_text), excluded):
                continue
            if info.requires_capital and not has_proper_capitalization(matched_text, term):
                continue

            containing_link = find_containing(position, existing_links)
            containing_shortcode = find_containing(position, existing_shortcodes)

            if containing_link is not None:
                # Attribute values of the opening tag are not prose.
                if position < containing_link.text_start:
                    continue
                replace_start, replace_end = containing_link.start, containing_link.end
                display_text = containing_link.text
            elif containing_shortcode is not None:
                replace_start, replace_end = containing_shortcode.start, containing_shortcode.end
                display_text = containing_shortcode.custom_text or matched_text
            else:
                if not is_whole_word(content, position, len(matched_text)):
                    continue
                replace_start, replace_end = match.span()
                display_text = matched_text

            # A link or shortcode yields at most one suggestion, and a shorter
            # term never lands inside a longer accepted one.
            if overlaps(replace_start, replace_end, claimed):
                continue

            claimed.append((replace_start, replace_end))
            suggestions.append(
                LinkSuggestion(
                    term=display_text,
                    type=info.type,
                    slug=info.slug,
                    title=info.title,
                    shortcode=format_shortcode(info.type, info.slug, display_text),
                    position=replace_start,
                    length=replace_end - replace_start,
                    selected=True,
                )
            )

            if opts.first_occurrence_only:
                break

    suggestions.sort(key=lambda suggestion: suggestion.position)
    return suggestions
