"""Service functions connecting stored link targets to the linking engine.

These functions encapsulate the application-side logic so they can be unit
tested and reused from the views. They load the link registry from the
database, run scans and renders against it, and produce plain-text excerpts
of article bodies that contain shortcodes.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Iterable, List

from bs4 import BeautifulSoup, FeatureNotFound  # type: ignore
from django.conf import settings

from .engine.apply import apply_link_suggestions, generate_preview
from .engine.config import EngineConfig, load_config
from .engine.scanner import scan_for_linkable_terms
from .engine.shortcodes import count_shortcodes, process_shortcodes, strip_shortcodes, validate_shortcodes
from .engine.text import collapse_whitespace, truncate
from .engine.types import LinkRegistry, LinkSuggestion, LinkType, RegistryEntry, ScanOptions
from .models import LinkTarget

logger = logging.getLogger(__name__)

DEFAULT_EXCERPT_LENGTH = 300


@lru_cache(maxsize=1)
def get_engine_config() -> EngineConfig:
    """Load the engine configuration named by ``ARCANALINKS_ENGINE_CONFIG``.

    The file is read once per process; a missing path falls back to the
    built-in defaults.
    """

    path = getattr(settings, 'ARCANALINKS_ENGINE_CONFIG', None)
    config = load_config(path)
    logger.debug('Loaded engine config from %s', path or 'defaults')
    return config


def build_link_registry(targets: Iterable[LinkTarget] | None = None) -> LinkRegistry:
    """Construct an immutable registry from stored link targets.

    Parameters
    ----------
    targets:
        Optional iterable of ``LinkTarget`` rows. When omitted every stored
        target is used.

    Returns
    -------
    LinkRegistry
        Entries grouped by type and ordered by title within each group.
        Rows with an unknown type are ignored.
    """

    rows = LinkTarget.objects.all() if targets is None else targets
    grouped: Dict[str, List[RegistryEntry]] = {link_type.value: [] for link_type in LinkType}
    for target in sorted(rows, key=lambda row: (row.link_type, row.title.lower(), row.slug)):
        if target.link_type not in grouped:
            logger.warning('Skipping link target %s with unknown type %r', target.pk, target.link_type)
            continue
        grouped[target.link_type].append(RegistryEntry(slug=target.slug, title=target.title))
    return LinkRegistry.from_dict(grouped)


def suggest_links(
    content: str,
    options: ScanOptions,
    registry: LinkRegistry | None = None,
) -> List[LinkSuggestion]:
    """Scan ``content`` against the stored registry and return suggestions."""

    link_registry = registry if registry is not None else build_link_registry()
    suggestions = scan_for_linkable_terms(content, link_registry, options, get_engine_config())
    logger.info(
        'Scanned %d characters, %d suggestion(s) (self slug: %r)',
        len(content or ''),
        len(suggestions),
        options.current_article_slug,
    )
    return suggestions


def preview_suggestions(content: str, suggestions: List[LinkSuggestion]) -> str:
    return generate_preview(content, suggestions, get_engine_config())


def apply_suggestions(content: str, suggestions: List[LinkSuggestion]) -> str:
    """Apply the selected suggestions and log how many were requested."""

    selected = sum(1 for suggestion in suggestions if suggestion.selected)
    logger.info('Applying %d of %d suggestion(s)', selected, len(suggestions))
    return apply_link_suggestions(content, suggestions)


def render_content(content: str, registry: LinkRegistry | None = None) -> str:
    """Expand shortcodes into anchors ready for the external sanitizer."""

    link_registry = registry if registry is not None else build_link_registry()
    return process_shortcodes(content, link_registry, get_engine_config())


def build_excerpt(
    content: str,
    registry: LinkRegistry | None = None,
    max_length: int = DEFAULT_EXCERPT_LENGTH,
) -> str:
    """Return a plain-text excerpt of an article body.

    Shortcodes are replaced by their display text, markup is dropped and
    whitespace collapsed before the text is cut to ``max_length`` characters.
    """

    if not content:
        return ''

    stripped = strip_shortcodes(content, registry)
    try:
        soup = BeautifulSoup(stripped, 'lxml')
    except FeatureNotFound:
        soup = BeautifulSoup(stripped, 'html.parser')

    text = collapse_whitespace(soup.get_text(' '))
    return truncate(text, max_length)


def check_content(content: str, registry: LinkRegistry | None = None) -> Dict[str, object]:
    """Report unknown shortcode targets and per-type counts for ``content``."""

    link_registry = registry if registry is not None else build_link_registry()
    invalid = validate_shortcodes(content, link_registry)
    if invalid:
        logger.warning('Found %d shortcode(s) pointing at unknown targets', len(invalid))
    return {
        'invalid': [item.as_dict() for item in invalid],
        'counts': count_shortcodes(content),
    }
