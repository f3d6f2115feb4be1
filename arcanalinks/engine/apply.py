"""Apply accepted link suggestions to the text they were computed against."""

from __future__ import annotations

from typing import Callable, Iterable, List

from .config import EngineConfig, load_config
from .types import LinkSuggestion


def _fold(content: str, suggestions: Iterable[LinkSuggestion], render: Callable[[LinkSuggestion], str]) -> str:
    """Rebuild ``content`` with each suggestion's span replaced by ``render(suggestion)``.

    Suggestions are ordered once by position and consumed with a cursor over
    the original text, so every offset stays valid. Spans that overlap an
    earlier replacement or fall outside the text are left untouched.
    """

    pieces: List[str] = []
    cursor = 0
    for suggestion in sorted(suggestions, key=lambda item: (item.position, -item.length)):
        if suggestion.position < cursor or suggestion.length < 0 or suggestion.end > len(content):
            continue
        pieces.append(content[cursor:suggestion.position])
        pieces.append(render(suggestion))
        cursor = suggestion.end
    pieces.append(content[cursor:])
    return "".join(pieces)


def apply_link_suggestions(content: str | None, suggestions: Iterable[LinkSuggestion]) -> str:
    """Replace the span of every selected suggestion with its shortcode."""

    if not content:
        return ""
    selected = [suggestion for suggestion in suggestions if suggestion.selected]
    return _fold(content, selected, lambda suggestion: suggestion.shortcode)


def generate_preview(
    content: str | None,
    suggestions: Iterable[LinkSuggestion],
    config: EngineConfig | None = None,
) -> str:
    """Return ``content`` with selected suggestions highlighted for review.

    Unselected suggestions collapse to their plain display text.
    """

    if not content:
        return ""
    engine_config = config or load_config(None)
    mark_class = engine_config.get("preview_mark_class", "link-suggestion")

    def _render(suggestion: LinkSuggestion) -> str:
        if suggestion.selected:
            return f'<mark class="{mark_class}">{suggestion.term}</mark>'
        return suggestion.term

    return _fold(content, suggestions, _render)
